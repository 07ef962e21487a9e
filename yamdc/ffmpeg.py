"""Thin wrappers around the ffmpeg and ffprobe command line tools."""

from __future__ import annotations

import os
import shutil
import subprocess
import tempfile
import uuid


class FFMpegError(Exception):
    """Raised when ffmpeg or ffprobe is missing or fails."""


class FFMpeg:
    """Image conversion through the ffmpeg command."""

    def __init__(self, cmd: str | None = None) -> None:
        if cmd is None:
            cmd = shutil.which("ffmpeg")
            if cmd is None:
                raise FFMpegError("ffmpeg command not found")
        self.cmd = cmd

    def convert_to_yuv420p_jpeg(self, data: bytes) -> bytes:
        """Re-encode an image to a yuv420p JPEG."""
        dst = os.path.join(tempfile.gettempdir(), "image-conv-dst-" + str(uuid.uuid4()))
        try:
            try:
                result = subprocess.run(
                    [self.cmd, "-i", "pipe:0", "-vf", "format=yuv420p", "-f", "image2", dst],
                    input=data,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                )
            except OSError as exc:
                raise FFMpegError(f"call ffmpeg to conv failed: {exc}") from exc
            if result.returncode != 0:
                raise FFMpegError(f"call ffmpeg to conv failed, exit status {result.returncode}")
            try:
                with open(dst, "rb") as handle:
                    return handle.read()
            except OSError as exc:
                raise FFMpegError(f"unable to read converted data: {exc}") from exc
        finally:
            try:
                os.remove(dst)
            except FileNotFoundError:
                pass


class FFProbe:
    """Media inspection through the ffprobe command."""

    def __init__(self, cmd: str | None = None) -> None:
        if cmd is None:
            cmd = shutil.which("ffprobe")
            if cmd is None:
                raise FFMpegError("search ffprobe command failed")
        self.cmd = cmd

    def read_duration(self, path: str) -> float:
        """Return the duration of a media file in seconds."""
        args = [self.cmd, "-i", path, "-show_entries", "format=duration",
                "-v", "quiet", "-of", "csv=p=0"]
        try:
            result = subprocess.run(args, capture_output=True)
        except OSError as exc:
            raise FFMpegError(f"call ffprobe to detect video duration failed: {exc}") from exc
        if result.returncode != 0:
            raise FFMpegError(
                f"call ffprobe to detect video duration failed, exit status {result.returncode}"
            )
        text = result.stdout.decode("utf-8", errors="replace").strip()
        try:
            return float(text)
        except ValueError as exc:
            raise FFMpegError(f"parse video duration failed, duration:{text}") from exc


def _try_create(factory):
    try:
        return factory()
    except FFMpegError:
        return None


_default_ffmpeg: FFMpeg | None = _try_create(FFMpeg)
_default_ffprobe: FFProbe | None = _try_create(FFProbe)


def is_ffmpeg_enabled() -> bool:
    return _default_ffmpeg is not None


def is_ffprobe_enabled() -> bool:
    return _default_ffprobe is not None


def convert_to_yuv420p_jpeg(data: bytes) -> bytes:
    if _default_ffmpeg is None:
        raise FFMpegError("ffmpeg is not available")
    return _default_ffmpeg.convert_to_yuv420p_jpeg(data)


def read_duration(path: str) -> float:
    if _default_ffprobe is None:
        raise FFMpegError("ffprobe is not available")
    return _default_ffprobe.read_duration(path)