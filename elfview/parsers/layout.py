"""
ELF Raw Record Layouts
=======================

Fixed-width binary records of the 64-bit ELF format, decoded with
:mod:`struct`.  This module knows byte layout only: field order, field
width and byte order.  Interpreting the numbers is the job of
:mod:`elfview.parsers.enums` and the resolvers built on top of it.

Record shapes (sizes in bytes)::

    IdentRecord            16   e_ident[]
    FileHeaderRecord       64   Elf64_Ehdr
    SectionHeaderRecord    64   Elf64_Shdr
    SymbolRecord           24   Elf64_Sym
    ProgramHeaderRecord    56   Elf64_Phdr

Byte order is a parameter of every decode (``"<"`` little-endian,
``">"`` big-endian).  The identification block is made of single bytes
and therefore decodes the same either way.

References:
    - System V Application Binary Interface, Edition 4.1, chapter 4.
    - Linux man page: elf(5).
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from functools import lru_cache
from typing import ClassVar, TypeVar

from elfview.core.errors import ShortBufferError
from elfview.core.source import ByteSource

LITTLE_ENDIAN: str = "<"
BIG_ENDIAN: str = ">"

ELF_MAGIC: bytes = b"\x7fELF"
EI_NIDENT: int = 16

R = TypeVar("R", bound="_Record")


@lru_cache(maxsize=None)
def _compiled(fmt: str) -> struct.Struct:
    return struct.Struct(fmt)


class _Record:
    """Mixin giving a dataclass a fixed-width ``struct`` layout.

    Subclasses declare ``FORMAT`` without a byte-order prefix; the field
    order of the dataclass must match the order of the format codes.
    """

    __slots__ = ()

    FORMAT: ClassVar[str]

    @classmethod
    def layout(cls, endian: str = LITTLE_ENDIAN) -> struct.Struct:
        return _compiled(endian + cls.FORMAT)

    @classmethod
    def record_size(cls) -> int:
        """Encoded size of the record in bytes."""
        return cls.layout().size

    @classmethod
    def decode(cls: type[R], buf: bytes, endian: str = LITTLE_ENDIAN) -> R:
        """Decode one record from the start of *buf*.

        Bytes past the record size are ignored, so a table entry whose
        declared stride is larger than the record still decodes.

        Raises:
            ShortBufferError: If *buf* is shorter than the record.
        """
        st = cls.layout(endian)
        if len(buf) < st.size:
            raise ShortBufferError(cls.__name__, st.size, len(buf))
        return cls._build(st.unpack_from(buf, 0), endian)

    @classmethod
    def read(
        cls: type[R],
        source: ByteSource,
        offset: int,
        endian: str = LITTLE_ENDIAN,
    ) -> R:
        """Decode one record found at *offset* in *source*."""
        return cls.decode(
            source.slice(offset, cls.record_size(), cls.__name__), endian
        )

    @classmethod
    def _build(cls: type[R], fields: tuple, endian: str) -> R:
        return cls(*fields)


# ---------------------------------------------------------------------------
# Identification block
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class IdentRecord(_Record):
    """``e_ident``: the class- and byte-order-independent prefix."""

    magic: bytes
    elf_class: int
    data: int
    version: int
    osabi: int
    abiversion: int
    pad: bytes
    nident: int

    FORMAT: ClassVar[str] = "4sBBBBB6sB"

    @property
    def magic_ok(self) -> bool:
        return self.magic == ELF_MAGIC


# ---------------------------------------------------------------------------
# File header
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class FileHeaderRecord(_Record):
    """``Elf64_Ehdr``."""

    ident: IdentRecord
    type: int
    machine: int
    version: int
    entry: int
    phoff: int
    shoff: int
    flags: int
    ehsize: int
    phentsize: int
    phnum: int
    shentsize: int
    shnum: int
    shstrndx: int

    FORMAT: ClassVar[str] = "16sHHIQQQIHHHHHH"

    @classmethod
    def _build(cls, fields: tuple, endian: str) -> FileHeaderRecord:
        ident = IdentRecord.decode(fields[0], endian)
        return cls(ident, *fields[1:])


# ---------------------------------------------------------------------------
# Section header
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class SectionHeaderRecord(_Record):
    """``Elf64_Shdr``.

    ``link`` and ``info`` are overloaded; their meaning depends on
    ``type``.  ``entsize`` is 0 unless the section holds a table of
    fixed-size entries.
    """

    name: int
    type: int
    flags: int
    addr: int
    offset: int
    size: int
    link: int
    info: int
    addralign: int
    entsize: int

    FORMAT: ClassVar[str] = "IIQQQQIIQQ"


# ---------------------------------------------------------------------------
# Symbol table entry
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class SymbolRecord(_Record):
    """``Elf64_Sym``."""

    name: int
    info: int
    other: int
    shndx: int
    value: int
    size: int

    FORMAT: ClassVar[str] = "IBBHQQ"


# ---------------------------------------------------------------------------
# Program header
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ProgramHeaderRecord(_Record):
    """``Elf64_Phdr``."""

    type: int
    flags: int
    offset: int
    vaddr: int
    paddr: int
    filesz: int
    memsz: int
    align: int

    FORMAT: ClassVar[str] = "IIQQQQQQ"
