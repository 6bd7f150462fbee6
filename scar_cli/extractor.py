"""Include directive extraction for C/C++ sources.

Directives are matched textually. Preprocessor conditionals are not
evaluated, so an include guarded by ``#if 0`` is still reported. Comments
are removed before matching, while string literals are kept intact so that
comment markers inside them are not mistaken for comments.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List

from .models import ExtractionResult, IncludeForm, RawInclude, UnreadableFile

logger = logging.getLogger(__name__)

INCLUDE_RE = re.compile(r'^\s*#\s*include\s*(?:"([^"\n]+)"|<([^>\n]+)>)')
RAW_STRING_RE = re.compile(r'R"([^()\\\s]{0,16})\(')

_CODE, _LINE_COMMENT, _BLOCK_COMMENT, _STRING, _CHAR = range(5)

CHAR_PREFIXES = frozenset({"L", "u", "U", "u8"})


def _opens_char_literal(text: str, i: int) -> bool:
    """Whether the quote at ``text[i]`` starts a character literal.

    A quote inside a number (``1'000``, ``0xFF'FF``) is a digit separator.
    After an encoding prefix such as ``L`` or ``u8`` it opens a literal.
    """
    j = i
    while j > 0 and (text[j - 1].isalnum() or text[j - 1] in "_.'"):
        j -= 1
    token = text[j:i]
    if not token or token in CHAR_PREFIXES:
        return True
    return not token[0].isdigit()


def _blank(segment: str) -> str:
    """Replace *segment* with spaces, keeping its newlines."""
    return "".join("\n" if ch == "\n" else " " for ch in segment)


def strip_comments(text: str) -> str:
    """Return *text* with line and block comments replaced by whitespace.

    The result has the same number of lines as the input so line numbers
    stay valid. Raw string literal bodies are blanked as well since they may
    contain lines that look like directives.
    """
    out: List[str] = []
    state = _CODE
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]
        nxt = text[i + 1] if i + 1 < n else ""

        if state == _CODE:
            if ch == "/" and nxt == "/":
                state = _LINE_COMMENT
                out.append("  ")
                i += 2
                continue
            if ch == "/" and nxt == "*":
                state = _BLOCK_COMMENT
                out.append("  ")
                i += 2
                continue
            if ch == "R" and nxt == '"':
                match = RAW_STRING_RE.match(text, i)
                if match and (i == 0 or not (text[i - 1].isalnum() or text[i - 1] == "_") or text[i - 1] in "uUL8"):
                    terminator = ")" + match.group(1) + '"'
                    end = text.find(terminator, match.end())
                    end = n if end < 0 else end + len(terminator)
                    out.append('R""')
                    out.append(_blank(text[i + 3:end]))
                    i = end
                    continue
            if ch == '"':
                state = _STRING
            elif ch == "'" and _opens_char_literal(text, i):
                state = _CHAR
            out.append(ch)
            i += 1
            continue

        if state == _LINE_COMMENT:
            if ch == "\\" and nxt == "\n":
                out.append(" \n")
                i += 2
                continue
            if ch == "\\" and nxt == "\r" and text[i + 2:i + 3] == "\n":
                out.append("  \n")
                i += 3
                continue
            if ch == "\n":
                state = _CODE
                out.append("\n")
            else:
                out.append(" ")
            i += 1
            continue

        if state == _BLOCK_COMMENT:
            if ch == "*" and nxt == "/":
                state = _CODE
                out.append("  ")
                i += 2
                continue
            out.append("\n" if ch == "\n" else " ")
            i += 1
            continue

        # inside a string or character literal
        terminator = '"' if state == _STRING else "'"
        if ch == "\\" and nxt:
            out.append(ch + nxt)
            i += 2
            continue
        if ch == terminator or ch == "\n":
            state = _CODE
        out.append(ch)
        i += 1

    return "".join(out)


def extract_includes(text: str, origin: Path) -> List[RawInclude]:
    """Return the include directives of *text* in source order."""
    includes: List[RawInclude] = []
    for lineno, line in enumerate(strip_comments(text).split("\n"), start=1):
        match = INCLUDE_RE.match(line)
        if not match:
            continue
        quoted, angled = match.groups()
        if quoted is not None:
            target, form = quoted.strip(), IncludeForm.QUOTED
        else:
            target, form = angled.strip(), IncludeForm.ANGLE
        if not target:
            continue
        includes.append(RawInclude(target=target, form=form, origin=origin, line=lineno))
    return includes


def read_source(path: Path) -> str:
    """Read *path* as text.

    UTF-8 is tried first and Latin-1 is used as a fallback, since legacy
    C++ trees often carry non-UTF-8 comments. Content with NUL bytes is
    rejected as binary.
    """
    data = path.read_bytes()
    nul = data.find(b"\x00")
    if nul >= 0:
        raise ValueError(f"binary content (NUL byte at offset {nul})")
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.debug("%s is not valid UTF-8, decoding as Latin-1", path)
        return data.decode("latin-1")


def extract_file(path: Path) -> ExtractionResult:
    """Extract the includes of one file without ever raising for bad input."""
    try:
        text = read_source(path)
    except (OSError, ValueError) as exc:
        logger.warning("Error while reading %s: %s. Skipping it.", path, exc)
        return ExtractionResult(path=path, error=UnreadableFile(path=path, reason=str(exc)))
    includes = extract_includes(text, path)
    logger.debug("%s: %d include directive(s)", path, len(includes))
    return ExtractionResult(path=path, includes=tuple(includes))
