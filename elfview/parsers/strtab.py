"""
ELF String Tables
==================

A string table section is a run of NUL-terminated byte strings addressed
by the byte offset of their first character.  Offset 0 always holds the
empty string.

Other records (section headers, symbols) store offsets into a string
table.  :meth:`StringTable.get` does not check that an offset lands on
the start of an entry: an offset into the middle of an entry returns its
tail, which is how linkers share suffixes (``.rela.text`` / ``.text``).
"""

from __future__ import annotations

from typing import Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field


def _text(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


class StringTable(BaseModel):
    """A string table section held in memory.

    Usage::

        tbl = StringTable(section=".strtab", data=b"\\x00main\\x00x\\x00")
        tbl.get(1)          # "main"
        list(tbl.names())   # ["main", "x"]
    """

    model_config = ConfigDict(frozen=True)

    section: str = ""
    data: bytes = Field(default=b"", repr=False, exclude=True)

    @classmethod
    def empty(cls, section: str = "") -> StringTable:
        return cls(section=section)

    def __len__(self) -> int:
        return len(self.data)

    def get(self, offset: int) -> Optional[str]:
        """Return the string starting at *offset*.

        The string runs up to, not including, the next NUL byte or the
        end of the table.  ``None`` if *offset* lies outside the table.
        """
        if offset < 0 or offset >= len(self.data):
            return None
        end = self.data.find(b"\x00", offset)
        if end == -1:
            end = len(self.data)
        return _text(self.data[offset:end])

    def entries(self) -> Iterator[tuple[int, str]]:
        """Yield ``(offset, string)`` for every entry after the leading NUL.

        Each call starts a fresh scan.
        """
        data = self.data
        pos = 1
        while pos < len(data):
            end = data.find(b"\x00", pos)
            if end == -1:
                end = len(data)
            yield pos, _text(data[pos:end])
            pos = end + 1

    def names(self) -> Iterator[str]:
        """Yield only the strings of :meth:`entries`."""
        for _, name in self.entries():
            yield name

    @computed_field  # type: ignore[prop-decorator]
    @property
    def size(self) -> int:
        return len(self.data)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def strings(self) -> list[tuple[int, str]]:
        return list(self.entries())
