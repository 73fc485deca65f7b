"""
Elfview Exceptions
===================

Exception hierarchy raised by the ELF decoding pipeline.  Every decode
stage raises as soon as something is wrong; callers never receive a
partially built :class:`~elfview.core.models.ElfObject`.

Hierarchy::

    ElfError
    +-- DecodeError
    |   +-- ShortBufferError
    |   +-- BoundsError
    +-- BadMagicError
    +-- UnknownClassError
    +-- UnsupportedClassError
    +-- UnknownDataEncodingError
    +-- EntrySizeMismatchError
    +-- SymbolContextError

I/O failures while acquiring the byte source are not wrapped and surface
as the built-in :class:`OSError`.
"""

from __future__ import annotations


class ElfError(Exception):
    """Base class for every error raised while decoding an ELF file."""


class DecodeError(ElfError):
    """A fixed-size record could not be decoded."""


class ShortBufferError(DecodeError):
    """Fewer bytes were supplied than the record requires."""

    def __init__(self, record: str, needed: int, available: int) -> None:
        self.record = record
        self.needed = needed
        self.available = available
        super().__init__(
            f"{record}: need {needed} bytes, only {available} available"
        )


class BoundsError(DecodeError):
    """A computed ``[offset, offset + length)`` range leaves the buffer."""

    def __init__(self, offset: int, length: int, limit: int, what: str = "range") -> None:
        self.offset = offset
        self.length = length
        self.limit = limit
        self.what = what
        super().__init__(
            f"{what} [0x{offset:x}, 0x{offset + length:x}) exceeds "
            f"buffer of 0x{limit:x} bytes"
        )


class BadMagicError(ElfError):
    """The identification block does not start with ``\\x7fELF``."""

    def __init__(self, magic: bytes) -> None:
        self.magic = bytes(magic)
        super().__init__(f"not an ELF file (magic {self.magic.hex(' ')})")


class UnknownClassError(ElfError):
    """``EI_CLASS`` is neither 32-bit nor 64-bit."""

    def __init__(self, value: int) -> None:
        self.value = value
        super().__init__(f"unknown ELF class 0x{value:02x}")


class UnsupportedClassError(ElfError):
    """``EI_CLASS`` is recognised but has no decoding pipeline (ELF32)."""

    def __init__(self, bits: int) -> None:
        self.bits = bits
        super().__init__(f"ELF{bits} objects are not supported")


class UnknownDataEncodingError(ElfError):
    """``EI_DATA`` is neither little- nor big-endian."""

    def __init__(self, value: int) -> None:
        self.value = value
        super().__init__(f"unknown ELF data encoding 0x{value:02x}")


class EntrySizeMismatchError(ElfError):
    """A table section declares an entry size the decoder cannot handle."""

    def __init__(self, section: str, declared: int, expected: int) -> None:
        self.section = section
        self.declared = declared
        self.expected = expected
        super().__init__(
            f"{section}: entry size {declared} does not match "
            f"expected record size {expected}"
        )


class SymbolContextError(ElfError):
    """Symbol values were requested for a file type that does not define them."""

    def __init__(self, object_type: str) -> None:
        self.object_type = object_type
        super().__init__(
            f"symbol values are undefined for object type {object_type}"
        )
