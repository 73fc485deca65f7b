"""
Byte Source
============

Read-only, randomly addressable view over the bytes of an object file.

A :class:`ByteSource` is either backed by a memory mapping of a file on
disk or by an in-memory buffer.  Every range handed out is bounds-checked;
asking for bytes past the end raises :class:`~elfview.core.errors.BoundsError`
instead of silently returning a short slice.

Slices are returned as owned ``bytes`` so that no view into the mapping
outlives :meth:`ByteSource.close`.

Usage::

    with ByteSource.open("/usr/bin/ls") as src:
        ident = src.slice(0, 16)
"""

from __future__ import annotations

import mmap
from pathlib import Path
from typing import Any, Union

from elfview.core.errors import BoundsError

_Buffer = Union[bytes, bytearray, mmap.mmap]


class ByteSource:
    """Bounds-checked byte buffer borrowed by the decoding pipeline."""

    def __init__(self, data: _Buffer, *, name: str = "<memory>") -> None:
        self._data = data
        self._size = len(data)
        self._name = name
        self._closed = False

    # ------------------------------------------------------------------ #
    #  Construction
    # ------------------------------------------------------------------ #

    @classmethod
    def open(cls, path: str | Path, *, use_mmap: bool = True) -> ByteSource:
        """Open *path* read-only.

        Empty files cannot be memory mapped, so they (and every file when
        *use_mmap* is ``False``) are read into memory instead.

        Raises:
            OSError: If the file cannot be opened or mapped.
        """
        file_path = Path(path)
        with open(file_path, "rb") as fh:
            if use_mmap and file_path.stat().st_size > 0:
                data: _Buffer = mmap.mmap(fh.fileno(), 0, access=mmap.ACCESS_READ)
            else:
                data = fh.read()
        return cls(data, name=str(file_path))

    # ------------------------------------------------------------------ #
    #  Access
    # ------------------------------------------------------------------ #

    def __len__(self) -> int:
        return self._size

    @property
    def name(self) -> str:
        return self._name

    @property
    def closed(self) -> bool:
        return self._closed

    def check(self, offset: int, length: int, what: str = "range") -> None:
        """Raise :class:`BoundsError` unless ``[offset, offset+length)`` fits."""
        if offset < 0 or length < 0 or offset + length > self._size:
            raise BoundsError(offset, length, self._size, what)

    def slice(self, offset: int, length: int, what: str = "range") -> bytes:
        """Return the bytes of ``[offset, offset + length)``."""
        if self._closed:
            raise ValueError(f"byte source {self._name} is closed")
        self.check(offset, length, what)
        return bytes(self._data[offset:offset + length])

    # ------------------------------------------------------------------ #
    #  Lifetime
    # ------------------------------------------------------------------ #

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if isinstance(self._data, mmap.mmap):
            self._data.close()

    def __enter__(self) -> ByteSource:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
