"""
Elfview Data Models
====================

Pydantic view models for a decoded ELF object.  Raw records from
:mod:`elfview.parsers.layout` are resolved into these models by the
parsers; once built, every model is frozen.

Numeric codes whose meaning is open-ended (section types, object types,
section indices, ...) are modelled as a symbolic ``kind`` plus the raw
``code`` so that reserved and unknown ranges survive as data.

References:
    - System V Application Binary Interface, Edition 4.1, chapter 4.
    - Pydantic v2 documentation. https://docs.pydantic.dev/latest/
"""

from __future__ import annotations

import enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from elfview.parsers.strtab import StringTable


class _View(BaseModel):
    model_config = ConfigDict(frozen=True, ser_json_bytes="hex")


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class ElfClass(str, enum.Enum):
    """``EI_CLASS``."""
    NONE = "none"
    ELF32 = "elf32"
    ELF64 = "elf64"
    UNKNOWN = "unknown"


class DataEncoding(str, enum.Enum):
    """``EI_DATA``."""
    NONE = "none"
    LSB = "lsb"
    MSB = "msb"
    UNKNOWN = "unknown"


class ObjectTypeKind(str, enum.Enum):
    """``e_type``."""
    NONE = "none"
    REL = "rel"
    EXEC = "exec"
    DYN = "dyn"
    CORE = "core"
    OS_SPECIFIC = "os_specific"
    PROCESSOR_SPECIFIC = "processor_specific"
    UNKNOWN = "unknown"


class SectionTypeKind(str, enum.Enum):
    """``sh_type``."""
    NULL = "null"
    PROGBITS = "progbits"
    SYMTAB = "symtab"
    STRTAB = "strtab"
    RELA = "rela"
    HASH = "hash"
    DYNAMIC = "dynamic"
    NOTE = "note"
    NOBITS = "nobits"
    REL = "rel"
    SHLIB = "shlib"
    DYNSYM = "dynsym"
    INIT_ARRAY = "init_array"
    FINI_ARRAY = "fini_array"
    PREINIT_ARRAY = "preinit_array"
    GROUP = "group"
    SYMTAB_SHNDX = "symtab_shndx"
    OS_SPECIFIC = "os_specific"
    PROCESSOR_SPECIFIC = "processor_specific"
    USER_SPECIFIC = "user_specific"
    UNKNOWN = "unknown"


class SectionFlag(str, enum.Enum):
    """Single ``sh_flags`` bit."""
    WRITE = "write"
    ALLOC = "alloc"
    EXECINSTR = "execinstr"
    MERGE = "merge"
    STRINGS = "strings"
    INFO_LINK = "info_link"
    LINK_ORDER = "link_order"
    OS_NONCONFORMING = "os_nonconforming"
    GROUP = "group"
    TLS = "tls"


class SymbolBinding(str, enum.Enum):
    """High nibble of ``st_info``."""
    LOCAL = "local"
    GLOBAL = "global"
    WEAK = "weak"
    OS_SPECIFIC = "os_specific"
    PROCESSOR_SPECIFIC = "processor_specific"


class SymbolType(str, enum.Enum):
    """Low nibble of ``st_info``."""
    NOTYPE = "notype"
    OBJECT = "object"
    FUNC = "func"
    SECTION = "section"
    FILE = "file"
    COMMON = "common"
    TLS = "tls"
    OS_SPECIFIC = "os_specific"
    PROCESSOR_SPECIFIC = "processor_specific"


class SymbolVisibility(str, enum.Enum):
    """Low two bits of ``st_other``."""
    DEFAULT = "default"
    INTERNAL = "internal"
    HIDDEN = "hidden"
    PROTECTED = "protected"


class SectionIndexKind(str, enum.Enum):
    """Special section indices (``SHN_*``)."""
    UNDEFINED = "undefined"
    PROCESSOR_RESERVED = "processor_reserved"
    OS_RESERVED = "os_reserved"
    ABSOLUTE = "absolute"
    COMMON = "common"
    EXTENDED_INDEX = "extended_index"
    NORMAL = "normal"


class SymbolValueKind(str, enum.Enum):
    """How ``st_value`` is to be read for a given file type."""
    ALIGNMENT = "alignment"
    SECTION_OFFSET = "section_offset"
    VIRTUAL_ADDRESS = "virtual_address"


class SegmentTypeKind(str, enum.Enum):
    """``p_type``."""
    NULL = "null"
    LOAD = "load"
    DYNAMIC = "dynamic"
    INTERP = "interp"
    NOTE = "note"
    SHLIB = "shlib"
    PHDR = "phdr"
    TLS = "tls"
    OS_SPECIFIC = "os_specific"
    PROCESSOR_SPECIFIC = "processor_specific"
    UNKNOWN = "unknown"


class SegmentFlag(str, enum.Enum):
    """Single ``p_flags`` bit."""
    X = "x"
    W = "w"
    R = "r"


# ---------------------------------------------------------------------------
# Decoded codes
# ---------------------------------------------------------------------------

class ObjectType(_View):
    kind: ObjectTypeKind
    code: int


class SectionType(_View):
    kind: SectionTypeKind
    code: int


class SectionFlags(_View):
    """Decoded ``sh_flags``.

    Attributes:
        flags: Well-known flag bits that are set.
        os_bits: ``raw & SHF_MASKOS`` (0 when none are set).
        processor_bits: ``raw & SHF_MASKPROC``.
        unknown_bits: Set bits that are neither well-known nor masked.
        raw: The undecoded 64-bit value.
    """
    flags: tuple[SectionFlag, ...] = ()
    os_bits: int = 0
    processor_bits: int = 0
    unknown_bits: int = 0
    raw: int = 0

    def __contains__(self, flag: SectionFlag) -> bool:
        return flag in self.flags


class SectionIndex(_View):
    """A 16-bit section index, possibly one of the reserved ``SHN_*`` values."""
    kind: SectionIndexKind
    index: int


class SymbolValue(_View):
    kind: SymbolValueKind
    value: int


class SegmentType(_View):
    kind: SegmentTypeKind
    code: int


class SegmentFlags(_View):
    flags: tuple[SegmentFlag, ...] = ()
    os_bits: int = 0
    processor_bits: int = 0
    raw: int = 0


# ---------------------------------------------------------------------------
# Headers
# ---------------------------------------------------------------------------

class IdentView(_View):
    """The 16-byte identification block."""
    magic: bytes
    elf_class: ElfClass
    data: DataEncoding
    version: int
    osabi: int
    abiversion: int
    nident: int


class FileHeaderView(_View):
    """``Elf64_Ehdr`` with symbolic decodes.

    ``shstrndx`` is kept both raw and as a :class:`SectionIndex`, since
    it may itself be the extended-index escape.
    """
    ident: IdentView
    type: ObjectType
    machine: int
    machine_name: str
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
    shstrndx: SectionIndex


class Section(_View):
    """A resolved section header."""
    index: int
    name: str
    name_offset: int
    type: SectionType
    flags: SectionFlags
    addr: int
    offset: int
    size: int
    link: int
    info: int
    addralign: int
    entsize: int


class ProgramHeader(_View):
    """A decoded program header.  Segment contents are not resolved."""
    index: int
    type: SegmentType
    flags: SegmentFlags
    offset: int
    vaddr: int
    paddr: int
    filesz: int
    memsz: int
    align: int


# ---------------------------------------------------------------------------
# Symbols
# ---------------------------------------------------------------------------

class Symbol(_View):
    """A resolved symbol table entry."""
    index: int
    name: str
    name_offset: int
    info: int
    other: int
    binding: SymbolBinding
    type: SymbolType
    visibility: SymbolVisibility
    section_index: SectionIndex
    value: SymbolValue
    size: int


class SymbolTable(_View):
    """Symbols of one symbol-table section, in file order.

    ``section`` is the name of the section the table was read from; it is
    kept even when that section is absent and the table is empty.
    """
    section: str
    symbols: tuple[Symbol, ...] = ()

    def __len__(self) -> int:
        return len(self.symbols)

    def find(self, name: str) -> Optional[Symbol]:
        """Return the first symbol called *name*, or ``None``."""
        for sym in self.symbols:
            if sym.name == name:
                return sym
        return None


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------

class ElfObject(_View):
    """Everything decoded from one ELF file.

    Attributes:
        path: Where the bytes came from (``"<memory>"`` for buffers).
        size: Size of the input in bytes.
        header: File header, including the identification block.
        shstrtab: Section-name string table.
        sections: Section headers ordered by index.
        strtab: ``.strtab``, names for :attr:`symtab`.
        symtab: ``.symtab``.
        dynstr: ``.dynstr``, names for :attr:`dynsym`.
        dynsym: ``.dynsym``.
        program_headers: Decoded program headers.
    """
    path: str = "<memory>"
    size: int = 0
    header: FileHeaderView
    shstrtab: StringTable = Field(default_factory=StringTable.empty)
    sections: tuple[Section, ...] = ()
    strtab: StringTable = Field(default_factory=StringTable.empty)
    symtab: SymbolTable = Field(default_factory=lambda: SymbolTable(section=".symtab"))
    dynstr: StringTable = Field(default_factory=StringTable.empty)
    dynsym: SymbolTable = Field(default_factory=lambda: SymbolTable(section=".dynsym"))
    program_headers: tuple[ProgramHeader, ...] = ()

    @property
    def ident(self) -> IdentView:
        return self.header.ident

    def section(self, name: str) -> Optional[Section]:
        """Return the first section called *name*, or ``None``."""
        for sec in self.sections:
            if sec.name == name:
                return sec
        return None
