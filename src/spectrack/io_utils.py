"""Wrappers for text file I/O with consistent encoding (UTF-8)."""

from __future__ import annotations

from dataclasses import dataclass, field
from io import TextIOWrapper
from pathlib import Path
from typing import Any

PathLike = Path | str


def read_text(path: PathLike, errors: str = "strict", **kwargs: Any) -> str:
    """Read path as text with UTF-8 encoding. Forwards extra kwargs to Path.read_text."""
    p = path if isinstance(path, Path) else Path(path)
    return p.read_text(encoding="utf-8", errors=errors, **kwargs)


def write_text(path: PathLike, text: str, **kwargs: Any) -> None:
    """Write text to path with UTF-8 encoding. Forwards extra kwargs to Path.write_text.

    Newlines are written untranslated so a patched document keeps its original
    line endings byte for byte.
    """
    p = path if isinstance(path, Path) else Path(path)
    kwargs.setdefault("newline", "")
    p.write_text(text, encoding="utf-8", **kwargs)


def open_text(
    path: PathLike,
    mode: str = "r",
    *,
    encoding: str = "utf-8",
    errors: str = "strict",
    **kwargs: Any,
) -> TextIOWrapper:
    """Open path for text I/O with UTF-8 by default."""
    return open(path, mode, encoding=encoding, errors=errors, **kwargs)


@dataclass
class _CacheEntry:
    mtime_ns: int
    size: int
    text: str


@dataclass
class CachedReader:
    """Pass-through text cache keyed by resolved path.

    An entry is reused only while the file's mtime and size are unchanged,
    so a cached read always returns what :func:`read_text` would.
    """

    _entries: dict[str, _CacheEntry] = field(default_factory=dict)
    hits: int = 0
    misses: int = 0

    def exists(self, path: PathLike) -> bool:
        return Path(path).is_file()

    def read(self, path: PathLike) -> str:
        p = Path(path)
        key = str(p.resolve())
        st = p.stat()
        entry = self._entries.get(key)
        if entry is not None and entry.mtime_ns == st.st_mtime_ns and entry.size == st.st_size:
            self.hits += 1
            return entry.text

        self.misses += 1
        with open_text(p, newline="") as fh:
            text = fh.read()
        self._entries[key] = _CacheEntry(st.st_mtime_ns, st.st_size, text)
        return text

    def invalidate(self, path: PathLike) -> None:
        self._entries.pop(str(Path(path).resolve()), None)

    def clear(self) -> None:
        self._entries.clear()


_default_reader = CachedReader()


def default_reader() -> CachedReader:
    """Return the process-wide reader used when callers don't supply one."""
    return _default_reader
