"""Recognise movie numbers and their flags from file names."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass

import regex

from .model import FileContext, Number, determine_category

logger = logging.getLogger(__name__)

_I = regex.IGNORECASE

# ---------------------------------------------------------------------------
# Uncensored detection

_UNCENSOR_PREFIXES = (
    "1PON",
    "CARIB",
    "SM3D2DBD",
    "SMDV",
    "SKY",
    "HEY",
    "FC2",
    "MKD",
    "MKBD",
    "H4610",
    "H0930",
    "MD-",
    "SMD-",
    "SSDV-",
    "CCDV-",
    "LLDV-",
    "DRC-",
    "MXX-",
    "DSAM-",
)

_UNCENSOR_PATTERNS = tuple(
    regex.compile(p)
    for p in (
        r"^\d+[-|_]\d+$",
        r"^N\d+$",
        r"^K\d+$",
        r"^KB\d+$",
        r"^C\d+-KI\d+$",
    )
)


def is_uncensor_movie(text: str) -> bool:
    """Return True when the number looks like an uncensored release."""
    text = text.upper().replace("_", "-")
    if text.startswith(_UNCENSOR_PREFIXES):
        return True
    return any(p.search(text) for p in _UNCENSOR_PATTERNS)


# ---------------------------------------------------------------------------
# Number rewriting


@dataclass
class NumberRewriter:
    """A conditional rewrite of a number string."""

    on_check: Callable[[str], bool] | None = None
    on_rewrite: Callable[[str], str] | None = None

    def check(self, text: str) -> bool:
        if self.on_check is None:
            return True
        return self.on_check(text)

    def rewrite(self, text: str) -> str:
        if self.on_rewrite is None:
            return text
        return self.on_rewrite(text)


def number_alpha_number_rewriter() -> NumberRewriter:
    """Rewrite numbers such as 324ABC-234343 into ABC-234343."""
    checker = regex.compile(r"^\d+[a-zA-Z]+-\d+")

    def strip_leading_digits(text: str) -> str:
        for idx, ch in enumerate(text):
            if not ch.isdecimal():
                return text[idx:]
        return text

    return NumberRewriter(
        on_check=lambda text: checker.search(text) is not None,
        on_rewrite=strip_leading_digits,
    )


def fc2_number_rewriter() -> NumberRewriter:
    """Normalise FC2 numbers to the FC2-PPV-<id> form."""

    def rewrite(text: str) -> str:
        if "-PPV-" not in text:
            text = text.replace("FC2-", "FC2-PPV-")
        return text.replace("FC2PPV-", "FC2-PPV-")

    return NumberRewriter(on_check=lambda text: text.startswith("FC2"), on_rewrite=rewrite)


_DEFAULT_REWRITERS = (fc2_number_rewriter(), number_alpha_number_rewriter())


def rewrite_number(text: str) -> str:
    """Apply every default rewriter whose check passes, in order."""
    for rewriter in _DEFAULT_REWRITERS:
        if rewriter.check(text):
            text = rewriter.rewrite(text)
    return text


# ---------------------------------------------------------------------------
# File name cleaning


def _group_value(match: regex.Match, ref: str | int) -> str | None:
    try:
        return match.group(ref) or ""
    except (IndexError, regex.error):
        return None


def _expand_template(template: str, match: regex.Match) -> str:
    """Expand a $-style replacement template ($1, ${name}, $&, $$)."""
    out: list[str] = []
    i = 0
    n = len(template)
    while i < n:
        ch = template[i]
        if ch != "$" or i + 1 >= n:
            out.append(ch)
            i += 1
            continue
        nxt = template[i + 1]
        if nxt == "$":
            out.append("$")
            i += 2
        elif nxt == "&":
            out.append(match.group(0))
            i += 2
        elif nxt == "{":
            end = template.find("}", i + 2)
            name = template[i + 2 : end] if end > 0 else ""
            value = None
            if name:
                value = _group_value(match, int(name) if name.isdecimal() else name)
            if value is None:
                out.append(ch)
                i += 1
            else:
                out.append(value)
                i = end + 1
        elif nxt.isdecimal():
            j = i + 1
            while j < n and template[j].isdecimal():
                j += 1
            while j > i + 1 and int(template[i + 1 : j]) > len(match.groups()):
                j -= 1
            if j == i + 1:
                out.append(ch)
                i += 1
            else:
                out.append(_group_value(match, int(template[i + 1 : j])) or "")
                i = j
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def clean_file_name(text: str, replace_rules: Iterable[Sequence[str]] | None = None) -> str:
    """Apply each [pattern, replacement] rule to the name, in order."""
    for rule in replace_rules or ():
        if len(rule) < 2:
            raise ValueError(f"replace rule needs a pattern and a replacement: {rule!r}")
        pattern, replacement = rule[0], rule[1]
        try:
            compiled = regex.compile(pattern)
        except regex.error as exc:
            raise ValueError(f"invalid replace pattern {pattern!r}: {exc}") from exc
        text = compiled.sub(lambda m, tpl=replacement: _expand_template(tpl, m), text)
    return text


# ---------------------------------------------------------------------------
# Resolution and episode extraction

_RESOLUTION_4K = regex.compile(r"(u(ltra).+hd|2160p|4k)", _I)
_TAIL_NUMBER = regex.compile(r"(?<!\d)\d{1,2}$")
_TAIL_ALPHA = regex.compile(r"(?<![a-zA-Z])[a-zA-Z]$")


def extract_is_4k(name: str) -> tuple[bool, str]:
    """Detect a 4K marker; return the flag and the name without it."""
    match = _RESOLUTION_4K.search(name)
    if match is None:
        return False, name
    return True, name.replace(match.group(0), "")


def extract_suffix_episode(name: str) -> tuple[str, str]:
    """Split a trailing one or two digit number, or a single letter, off the name."""
    match = _TAIL_NUMBER.search(name)
    if match is not None:
        return match.group(0), _TAIL_NUMBER.sub("", name)
    match = _TAIL_ALPHA.search(name)
    if match is not None:
        return match.group(0).upper(), _TAIL_ALPHA.sub("", name)
    return "", name


# ---------------------------------------------------------------------------
# Code extraction


@dataclass
class CodeInfo:
    code: str = ""
    episode: str = ""
    is_uncensored: bool = False
    is_cracked: bool = False
    is_leaked: bool = False
    is_cn_subs: bool = False


_CHINESE_SUBS = regex.compile(r"(?<![a-zA-Z])(ch\b)|(中?文?字幕?)", _I)
_UNCENSORED = regex.compile(r"(unc?e?n?s?o?r?e?d?)|(无码)", _I)
_LEAK = regex.compile(r"(leak(ed)?)|(泄漏)|(流出)", _I)
_CRACK = regex.compile(r"(crack(ed)?)|(破解)", _I)
_MARKERS = (_CHINESE_SUBS, _UNCENSORED, _LEAK, _CRACK)

_TOKYO_HOT_CODE = regex.compile(r"(cz|gedo|k|n|red-|se)\d{2,4}", _I)
_CARIB_CODE = regex.compile(r"\d{6}(-|_)\d{3}", _I)

_GENERAL_CODE = regex.compile(r"(?:\d{2,}[-_]\d{2,})|(?:[A-Z]+[-_]?[A-Z]*\d{2,})+", _I)
_ALPHA_NUM = regex.compile(r"[a-zA-Z]+\d{2,}", _I)
_INSERT_DASH = regex.compile(r"([a-zA-Z]{2,})(?:0*?)(\d{2,})", _I)
_STANDARD = regex.compile(r"([a-zA-Z]{2,})-(?:0*)(\d{3,})", _I)


def _extract_tokyo_hot(name: str) -> str | None:
    match = _TOKYO_HOT_CODE.search(name)
    return match.group(0) if match else None


def _extract_carib(name: str) -> str | None:
    match = _CARIB_CODE.search(name)
    return match.group(0).replace("-", "_") if match else None


_SPECIAL_RULES: tuple[tuple[regex.Pattern, Callable[[str], str | None]], ...] = (
    (regex.compile(r"tokyo.*hot", _I), _extract_tokyo_hot),
    (regex.compile(r"carib|1pon|mura|paco", _I), _extract_carib),
)


def _episode_behind_code(name: str, code: str) -> tuple[str, bool]:
    """Find an episode letter or digit following the code in the name."""
    pattern = regex.compile(
        r"(?<=" + regex.escape(code) + r")(?:-(\b[A-Z]\b))?.*?(?:-\w*(\d)(?!\d))", _I
    )
    match = pattern.search(name)
    if match is None:
        return "", False
    digit = match.group(2) or ""
    alpha = (match.group(1) or "").upper()
    if digit and alpha == "C":
        return digit, True
    return digit or alpha, False


def _special_code(name: str) -> tuple[str, str, bool]:
    for trigger, extractor in _SPECIAL_RULES:
        if trigger.search(name) is None:
            continue
        code = extractor(name)
        if code:
            episode, is_cn_sub = _episode_behind_code(name, code)
            return code, episode, is_cn_sub
    return "", "", False


def _general_code(name: str) -> tuple[str, str, bool]:
    matches = [m.group(0) for m in _GENERAL_CODE.finditer(name)]
    if not matches:
        logger.debug("no general code match in %r", name)
        return "", "", False
    code = min(matches, key=len)
    if "-" not in code:
        found = _ALPHA_NUM.search(code)
        if found is not None:
            code = found.group(0)
            if "heyzo" not in code.lower():
                code = _INSERT_DASH.sub(r"\1-\2", code)
    standard = _STANDARD.search(code)
    if standard is not None and "heyzo" not in code.lower():
        code = standard.group(1) + "-" + standard.group(2)
    episode, is_cn_sub = _episode_behind_code(name, code)
    return code, episode, is_cn_sub


def extract_code(name: str) -> CodeInfo:
    """Extract the movie code and its flags from a cleaned file name."""
    result = CodeInfo(
        is_cn_subs=_CHINESE_SUBS.search(name) is not None,
        is_uncensored=_UNCENSORED.search(name) is not None,
        is_leaked=_LEAK.search(name) is not None,
        is_cracked=_CRACK.search(name) is not None,
    )
    clean = name
    for marker in _MARKERS:
        clean = marker.sub("", clean)

    code, episode, is_cn_sub = _special_code(clean)
    if code:
        result.code = code
        result.episode = episode
        result.is_cn_subs = result.is_cn_subs or is_cn_sub
        return result

    code, episode, is_cn_sub = _general_code(clean)
    if code:
        result.code = code
        result.episode = episode
    result.is_cn_subs = result.is_cn_subs or is_cn_sub
    return result


# ---------------------------------------------------------------------------
# Public parsing entry points


def _resolve_code_info(name: str) -> CodeInfo:
    episode_suffix, trimmed = extract_suffix_episode(name)
    if not episode_suffix:
        return extract_code(name)
    info = extract_code(trimmed)
    if not info.code:
        # The trailing digits may belong to the number itself, e.g. 052624-01.
        return extract_code(name)
    if info.episode and "C" in (info.episode, episode_suffix):
        info.is_cn_subs = True
        if info.episode == "C":
            info.episode = episode_suffix
    else:
        info.episode = info.episode or episode_suffix
    return info


def parse(text: str, replace_rules: Iterable[Sequence[str]] | None = None) -> Number:
    """Parse a file name without extension into a Number."""
    if not text:
        raise ValueError("empty number str")
    cleaned = clean_file_name(text, replace_rules)
    is_4k, without_resolution = extract_is_4k(cleaned)
    info = _resolve_code_info(without_resolution)
    number_id = info.code.upper()
    return Number(
        number_id=number_id,
        episode=info.episode,
        is_cn_sub=info.is_cn_subs,
        is_leaked=info.is_leaked,
        is_uncensored=info.is_uncensored,
        is_4k=is_4k,
        cat=determine_category(number_id),
    )


def parse_with_file_name(path: str, replace_rules: Iterable[Sequence[str]] | None = None) -> Number:
    """Parse the base name of a path, with its extension removed."""
    base = os.path.basename(path)
    dot = base.rfind(".")
    stem = base[:dot] if dot >= 0 else base
    return parse(stem, replace_rules)


def reorganize_all_numbers(contexts: Sequence[FileContext]) -> None:
    """Treat episode C as a real episode when a B part sits in the same directory."""
    for fc in contexts:
        if fc.number is None or fc.number.episode != "C":
            continue
        number_id = fc.number.number_id
        directory = fc.dir(0)
        has_part_b = any(
            other.number is not None
            and other.number.number_id == number_id
            and other.number.episode == "B"
            and other.dir(0) == directory
            for other in contexts
        )
        if has_part_b:
            fc.number.episode = "C"
            fc.number.is_cn_sub = False


def get_clean_id(text: str) -> str:
    """Remove every '-' and '_' from the text."""
    return text.replace("-", "").replace("_", "")