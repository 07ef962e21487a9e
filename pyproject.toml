[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "yamdc"
version = "0.1.0"
description = "Movie library toolkit: file name number parsing, NFO files, poster cropping, watermarks and metadata handlers"
requires-python = ">=3.10"
keywords = ["nfo", "jellyfin", "kodi", "metadata", "poster", "watermark", "media library"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video",
]
dependencies = [
    "pillow",
    "regex",
    "requests",
    "zstandard",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["yamdc"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
