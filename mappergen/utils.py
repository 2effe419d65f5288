# File: mappergen/utils.py
"""
mappergen - Utility Functions & Helpers
=========================================
Name/pattern matching, identifier case transformation, and file I/O helpers
shared by the generation pipeline.

- Case-conversion functions are ``@lru_cache``-decorated: the same table and
  column names are converted many times per run.
- ``write_file`` writes to a temp file then renames, so a crash never leaves
  a half-written mapper behind.
"""

from __future__ import annotations

import functools
import logging
import os
import posixpath
import re
import shutil
import tempfile
import time
import unicodedata
from pathlib import Path
from typing import List, Optional, Tuple, Union

from mappergen.errors import InvalidIdentifierError

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("mappergen.utils")

# ---------------------------------------------------------------------------
# Pre-compiled regex patterns
# ---------------------------------------------------------------------------

_NON_ALPHANUM_RE: re.Pattern[str] = re.compile(r"[\W_]+")


# ---------------------------------------------------------------------------
# Name / pattern matching
# ---------------------------------------------------------------------------


def matches_name_or_pattern(
    matcher: Union[None, str, re.Pattern[str]],
    target: str,
) -> bool:
    """
    Test a rule matcher against a table, column or type name.

    - ``None`` matches anything.
    - A string is compared dot-segment by dot-segment from the right, so
      ``"id"`` matches every ``id`` column and ``"public.users"`` matches
      ``"mydb.public.users"``.  A matcher with more segments than the target
      never matches.
    - A compiled pattern matches when it is found anywhere in the target.

    Examples:
        >>> matches_name_or_pattern("users.id", "public.users.id")
        True
        >>> matches_name_or_pattern("users.id", "admin_users.id")
        False
    """
    if matcher is None:
        return True
    if isinstance(matcher, str):
        matcher_parts: List[str] = matcher.split(".")
        target_parts: List[str] = target.split(".")
        if len(matcher_parts) > len(target_parts):
            return False
        for i in range(1, len(matcher_parts) + 1):
            if matcher_parts[-i] != target_parts[-i]:
                return False
        return True
    return matcher.search(target) is not None


# ---------------------------------------------------------------------------
# Cached case transformation
# ---------------------------------------------------------------------------


def _split_humps(chunk: str) -> List[str]:
    """
    Split a run of letters and digits on case humps and digit boundaries.

    ``"HTTPResponse"`` → ``["HTTP", "Response"]``, ``"address2"`` →
    ``["address", "2"]``.  Letters without case join the lower-case run.
    """
    words: List[str] = []
    current: str = ""
    for ch in chunk:
        if current:
            prev: str = current[-1]
            if ch.isdigit() != prev.isdigit():
                words.append(current)
                current = ch
                continue
            if ch.isupper() and not prev.isupper() and not prev.isdigit():
                words.append(current)
                current = ch
                continue
            # end of an acronym: "HTTPResponse" splits before the "R"
            if (
                not ch.isupper()
                and not ch.isdigit()
                and prev.isupper()
                and len(current) > 1
                and current[-2].isupper()
            ):
                words.append(current[:-1])
                current = prev
        current += ch
    if current:
        words.append(current)
    return words


@functools.lru_cache(maxsize=None)
def _extract_words(name: str) -> Tuple[str, ...]:
    """
    Extract individual lower-cased words from any casing style.

    Any Unicode letter or digit is part of a word; everything else
    separates words.  Returns a tuple so the result is hashable for the
    LRU cache.
    """
    normalized: str = unicodedata.normalize("NFC", name)
    words: List[str] = []
    for chunk in _NON_ALPHANUM_RE.split(normalized):
        if chunk:
            words.extend(_split_humps(chunk))
    return tuple(w.lower() for w in words)


def _upper_first(word: str) -> str:
    return word[:1].upper() + word[1:]


@functools.lru_cache(maxsize=None)
def to_camel_case(name: str) -> str:
    """
    Convert any string to camelCase.

    Examples:
        >>> to_camel_case("user_profile")
        'userProfile'
        >>> to_camel_case("HTTPResponse")
        'httpResponse'
        >>> to_camel_case("Straße_name")
        'straßeName'

    Raises:
        InvalidIdentifierError: *name* has no letters or digits.
    """
    words: Tuple[str, ...] = _extract_words(name)
    if not words:
        raise InvalidIdentifierError(name)
    return words[0] + "".join(_upper_first(w) for w in words[1:])


@functools.lru_cache(maxsize=None)
def to_pascal_case(name: str) -> str:
    """
    Convert any string to PascalCase.

    Examples:
        >>> to_pascal_case("order_items")
        'OrderItems'
        >>> to_pascal_case("character varying")
        'CharacterVarying'

    Raises:
        InvalidIdentifierError: *name* has no letters or digits.
    """
    words: Tuple[str, ...] = _extract_words(name)
    if not words:
        raise InvalidIdentifierError(name)
    return "".join(_upper_first(w) for w in words)


def last_segment(qualified_name: str) -> str:
    """Return the part after the last dot (``"public.users"`` → ``"users"``)."""
    return qualified_name.split(".")[-1]


# ---------------------------------------------------------------------------
# Comment formatting
# ---------------------------------------------------------------------------


def format_doc_comment(comment: Optional[str]) -> Optional[str]:
    """
    Render a schema comment as a ``/** ... */`` block, or ``None`` if empty.
    """
    if not comment:
        return None
    body: str = "\n".join(f" * {line}" for line in comment.split("\n"))
    return f"/**\n{body}\n*/"


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------


def to_posix(path: str) -> str:
    """Normalise host path separators to forward slashes."""
    if os.sep != "/":
        path = path.replace(os.sep, "/")
    if os.altsep and os.altsep != "/":
        path = path.replace(os.altsep, "/")
    return path


def relative_module_path(from_file: Union[str, Path], target: Union[str, Path]) -> str:
    """
    Module specifier for *target* as seen from the file *from_file*.

    The result always uses forward slashes and always starts with ``./`` or
    ``../`` so it can never be mistaken for a package name.

    Example:
        >>> relative_module_path("/out/UsersTable.ts", "/out/adapters")
        './adapters'
    """
    from_dir: str = os.path.dirname(os.path.abspath(str(from_file)))
    rel: str = to_posix(os.path.relpath(os.path.abspath(str(target)), from_dir))
    rel = posixpath.normpath(rel)
    if rel == ".":
        return "./"
    if rel == ".." or rel.startswith("../"):
        return rel
    return "./" + rel


# ---------------------------------------------------------------------------
# File I/O helpers
# ---------------------------------------------------------------------------


def ensure_directory(path: Path) -> None:
    """Create directory (and parents) if it doesn't exist."""
    path.mkdir(parents=True, exist_ok=True)
    logger.debug("Ensured directory exists: %s", path)


def read_file(path: Union[str, Path]) -> str:
    """Read a UTF-8 text file."""
    return Path(path).read_text(encoding="utf-8")


def write_file(path: Path, content: str, atomic: bool = True) -> int:
    """
    Write *content* to *path*, returning the number of bytes written.

    When *atomic* is True the content goes to a temporary sibling first and
    is then moved into place.
    """
    ensure_directory(path.parent)

    encoded: bytes = content.encode("utf-8")

    if atomic:
        fd, tmp_path = tempfile.mkstemp(
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp",
        )
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(encoded)
            shutil.move(tmp_path, str(path))
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
    else:
        path.write_bytes(encoded)

    logger.debug("Wrote %d bytes to %s", len(encoded), path)
    return len(encoded)


def count_lines(content: str) -> int:
    """Count the number of lines in a string."""
    if not content:
        return 0
    return content.count("\n") + (1 if not content.endswith("\n") else 0)


# ---------------------------------------------------------------------------
# Timer context manager
# ---------------------------------------------------------------------------


class Timer:
    """
    Context-manager timer for profiling generation steps.

    Usage:
        with Timer("render") as t:
            ...
        print(t.elapsed)
    """

    __slots__ = ("label", "start_time", "end_time", "elapsed")

    def __init__(self, label: str = "operation") -> None:
        self.label: str = label
        self.start_time: float = 0.0
        self.end_time: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[object],
    ) -> None:
        self.end_time = time.perf_counter()
        self.elapsed = self.end_time - self.start_time
        logger.debug("Timer [%s]: %.4f seconds", self.label, self.elapsed)

    def __repr__(self) -> str:
        return f"<Timer {self.label}: {self.elapsed:.4f}s>"


__all__: List[str] = [
    "matches_name_or_pattern",
    "to_camel_case",
    "to_pascal_case",
    "last_segment",
    "format_doc_comment",
    "to_posix",
    "relative_module_path",
    "ensure_directory",
    "read_file",
    "write_file",
    "count_lines",
    "Timer",
]
