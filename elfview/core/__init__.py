"""
Elfview Core
=============

Exceptions, the byte source and the view models of a decoded object.
"""

from elfview.core.errors import (
    BadMagicError,
    BoundsError,
    DecodeError,
    ElfError,
    EntrySizeMismatchError,
    ShortBufferError,
    SymbolContextError,
    UnknownClassError,
    UnknownDataEncodingError,
    UnsupportedClassError,
)
from elfview.core.models import (
    ElfObject,
    FileHeaderView,
    ProgramHeader,
    Section,
    Symbol,
    SymbolTable,
)

__all__ = [
    "BadMagicError",
    "BoundsError",
    "DecodeError",
    "ElfError",
    "EntrySizeMismatchError",
    "ShortBufferError",
    "SymbolContextError",
    "UnknownClassError",
    "UnknownDataEncodingError",
    "UnsupportedClassError",
    "ElfObject",
    "FileHeaderView",
    "ProgramHeader",
    "Section",
    "Symbol",
    "SymbolTable",
]
