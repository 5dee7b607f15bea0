"""
Embedded-block extraction and replacement for code samples.

A generated code sample contains exactly one brace-delimited data
literal introduced by a fixed anchor phrase, e.g.

    payload = { ... }            (Python)
    const payload = { ... };     (JavaScript)
    Set payload = { ... }        (VBScript)

The block's contents are user-controlled text, so braces are counted
with a scanner that skips over quoted strings (single or double quotes,
backslash escapes honoured, never spanning a line) and over // and
/* */ comments. Everything outside the block is left byte-for-byte
untouched.

Extraction is partial: no anchor or no balanced block returns None,
which callers treat as "nothing to update". Replacement is total: when
no block exists a fresh anchor and block are appended.
"""

import re
from dataclasses import dataclass
from typing import Optional, Pattern, Union


@dataclass(frozen=True)
class BlockAnchor:
    """
    Locates the embedded block in one code-sample template.

    Properties:
        pattern:
            Regex matching the anchor phrase including trailing
            whitespace; the block must start right after the match

        prefix:
            Literal anchor text written when a block is appended

        suffix:
            Literal text written after an appended block (e.g. ";")
    """

    pattern: Pattern
    prefix: str
    suffix: str = ""

    @classmethod
    def compile(cls, pattern: str, prefix: str, suffix: str = "", flags: int = 0) -> "BlockAnchor":
        return cls(pattern=re.compile(pattern, flags), prefix=prefix, suffix=suffix)


@dataclass(frozen=True)
class EmbeddedBlock:
    """A located block: its text and its [start, end) span in the source."""

    block_text: str
    start: int
    end: int


AnchorLike = Union[BlockAnchor, Pattern, str]


def _pattern(anchor: AnchorLike) -> Pattern:
    if isinstance(anchor, BlockAnchor):
        return anchor.pattern
    if isinstance(anchor, str):
        return re.compile(anchor)
    return anchor


def _skip_string(text: str, pos: int) -> Optional[int]:
    """Offset past the string opening at `pos`; None if it is still open at a line end."""
    quote = text[pos]
    pos += 1
    while pos < len(text):
        ch = text[pos]
        if ch == "\n":
            return None
        if ch == "\\" and not text.startswith("\n", pos + 1):
            pos += 2
            continue
        if ch == quote:
            return pos + 1
        pos += 1
    return None


def scan_balanced(text: str, start: int) -> Optional[int]:
    """
    Scan from the `{` at `start` to its matching `}`.

    Quoted strings end at their line, so a stray quote cannot swallow
    text on the following lines. `//` and `/* */` comments outside
    strings are skipped.

    Returns:
        Offset just past the closing brace, or None if the braces never
        balance before the end of the text
    """
    depth = 0
    pos = start
    n = len(text)
    while pos < n:
        ch = text[pos]
        if ch in ("'", '"'):
            pos = _skip_string(text, pos)
            if pos is None:
                return None
            continue
        if text.startswith("//", pos):
            newline = text.find("\n", pos)
            if newline == -1:
                return None
            pos = newline
            continue
        if text.startswith("/*", pos):
            close = text.find("*/", pos + 2)
            if close == -1:
                return None
            pos = close + 2
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return pos + 1
        pos += 1
    return None


def _block_starts(source: str, anchor: AnchorLike):
    for match in _pattern(anchor).finditer(source):
        if source.startswith("{", match.end()):
            yield match.end()


def has_block_start(source: str, anchor: AnchorLike) -> bool:
    """True when the anchor is present and directly followed by `{`."""
    if not isinstance(source, str):
        return False
    return next(_block_starts(source, anchor), None) is not None


def extract_block(source: str, anchor: AnchorLike) -> Optional[EmbeddedBlock]:
    """
    Find the first anchor directly followed by a balanced block.

    Args:
        source: Code-sample text, possibly hand edited
        anchor: BlockAnchor, compiled pattern or pattern string

    Returns:
        EmbeddedBlock or None when no balanced block follows any anchor
    """
    if not isinstance(source, str):
        return None
    for start in _block_starts(source, anchor):
        end = scan_balanced(source, start)
        if end is not None:
            return EmbeddedBlock(block_text=source[start:end], start=start, end=end)
    return None


def replace_block(source: str, anchor: BlockAnchor, new_block: str) -> str:
    """
    Swap the embedded block for `new_block`, keeping all other text.

    When no block is found, `anchor.prefix + new_block + anchor.suffix`
    is appended after a blank line instead.
    """
    source = source if isinstance(source, str) else ""
    found = extract_block(source, anchor)
    if found is not None:
        return source[:found.start] + new_block + source[found.end:]

    appended = anchor.prefix + new_block + anchor.suffix
    if not source:
        return appended
    return source + "\n\n" + appended


__all__ = [
    "BlockAnchor",
    "EmbeddedBlock",
    "scan_balanced",
    "has_block_start",
    "extract_block",
    "replace_block",
]
