"""
ELF Code Decoding
==================

Total mappings from the raw numeric fields of ELF records onto the
symbolic categories of :mod:`elfview.core.models`.  Every function
accepts the whole input domain of its field: reserved and unknown codes
come back as an ``*_SPECIFIC`` / ``UNKNOWN`` kind carrying the raw code,
never as a neighbouring well-known value.

References:
    - System V Application Binary Interface, Edition 4.1, chapter 4.
    - Linux man page: elf(5).
"""

from __future__ import annotations

from elfview.core.models import (
    DataEncoding,
    ElfClass,
    ObjectType,
    ObjectTypeKind,
    SectionFlag,
    SectionFlags,
    SectionIndex,
    SectionIndexKind,
    SectionType,
    SectionTypeKind,
    SegmentFlag,
    SegmentFlags,
    SegmentType,
    SegmentTypeKind,
    SymbolBinding,
    SymbolType,
    SymbolVisibility,
)


# ---------------------------------------------------------------------------
# Identification
# ---------------------------------------------------------------------------

ELFCLASSNONE: int = 0
ELFCLASS32: int = 1
ELFCLASS64: int = 2

ELFDATANONE: int = 0
ELFDATA2LSB: int = 1  # Little-endian
ELFDATA2MSB: int = 2  # Big-endian

_CLASSES: dict[int, ElfClass] = {
    ELFCLASSNONE: ElfClass.NONE,
    ELFCLASS32: ElfClass.ELF32,
    ELFCLASS64: ElfClass.ELF64,
}

_ENCODINGS: dict[int, DataEncoding] = {
    ELFDATANONE: DataEncoding.NONE,
    ELFDATA2LSB: DataEncoding.LSB,
    ELFDATA2MSB: DataEncoding.MSB,
}


def decode_class(value: int) -> ElfClass:
    return _CLASSES.get(value, ElfClass.UNKNOWN)


def decode_data_encoding(value: int) -> DataEncoding:
    return _ENCODINGS.get(value, DataEncoding.UNKNOWN)


# ---------------------------------------------------------------------------
# Object type
# ---------------------------------------------------------------------------

ET_NONE: int = 0
ET_REL: int = 1   # Relocatable
ET_EXEC: int = 2  # Executable
ET_DYN: int = 3   # Shared object / PIE
ET_CORE: int = 4  # Core dump
ET_LOOS: int = 0xFE00
ET_HIOS: int = 0xFEFF
ET_LOPROC: int = 0xFF00
ET_HIPROC: int = 0xFFFF

_ET_KINDS: dict[int, ObjectTypeKind] = {
    ET_NONE: ObjectTypeKind.NONE,
    ET_REL: ObjectTypeKind.REL,
    ET_EXEC: ObjectTypeKind.EXEC,
    ET_DYN: ObjectTypeKind.DYN,
    ET_CORE: ObjectTypeKind.CORE,
}


def decode_object_type(value: int) -> ObjectType:
    if value in _ET_KINDS:
        kind = _ET_KINDS[value]
    elif ET_LOOS <= value <= ET_HIOS:
        kind = ObjectTypeKind.OS_SPECIFIC
    elif ET_LOPROC <= value <= ET_HIPROC:
        kind = ObjectTypeKind.PROCESSOR_SPECIFIC
    else:
        kind = ObjectTypeKind.UNKNOWN
    return ObjectType(kind=kind, code=value)


# ---------------------------------------------------------------------------
# Machine
# ---------------------------------------------------------------------------

_EM_NAMES: dict[int, str] = {
    0: "None",
    2: "SPARC",
    3: "x86",
    7: "Intel 80860",
    8: "MIPS",
    19: "Intel 80960",
    20: "PowerPC",
    21: "PowerPC64",
    40: "ARM",
    50: "IA-64",
    51: "MIPS-X",
    62: "x86_64",
    91: "picoJava",
    183: "AArch64",
    243: "RISC-V",
    258: "LoongArch",
}


def machine_name(value: int) -> str:
    return _EM_NAMES.get(value, f"unknown({value})")


# ---------------------------------------------------------------------------
# Section type
# ---------------------------------------------------------------------------

SHT_NULL: int = 0
SHT_PROGBITS: int = 1
SHT_SYMTAB: int = 2
SHT_STRTAB: int = 3
SHT_RELA: int = 4
SHT_HASH: int = 5
SHT_DYNAMIC: int = 6
SHT_NOTE: int = 7
SHT_NOBITS: int = 8
SHT_REL: int = 9
SHT_SHLIB: int = 10
SHT_DYNSYM: int = 11
SHT_INIT_ARRAY: int = 14
SHT_FINI_ARRAY: int = 15
SHT_PREINIT_ARRAY: int = 16
SHT_GROUP: int = 17
SHT_SYMTAB_SHNDX: int = 18
SHT_LOOS: int = 0x6000_0000
SHT_HIOS: int = 0x6FFF_FFFF
SHT_LOPROC: int = 0x7000_0000
SHT_HIPROC: int = 0x7FFF_FFFF
SHT_LOUSER: int = 0x8000_0000
SHT_HIUSER: int = 0xFFFF_FFFF

_SHT_KINDS: dict[int, SectionTypeKind] = {
    SHT_NULL: SectionTypeKind.NULL,
    SHT_PROGBITS: SectionTypeKind.PROGBITS,
    SHT_SYMTAB: SectionTypeKind.SYMTAB,
    SHT_STRTAB: SectionTypeKind.STRTAB,
    SHT_RELA: SectionTypeKind.RELA,
    SHT_HASH: SectionTypeKind.HASH,
    SHT_DYNAMIC: SectionTypeKind.DYNAMIC,
    SHT_NOTE: SectionTypeKind.NOTE,
    SHT_NOBITS: SectionTypeKind.NOBITS,
    SHT_REL: SectionTypeKind.REL,
    SHT_SHLIB: SectionTypeKind.SHLIB,
    SHT_DYNSYM: SectionTypeKind.DYNSYM,
    SHT_INIT_ARRAY: SectionTypeKind.INIT_ARRAY,
    SHT_FINI_ARRAY: SectionTypeKind.FINI_ARRAY,
    SHT_PREINIT_ARRAY: SectionTypeKind.PREINIT_ARRAY,
    SHT_GROUP: SectionTypeKind.GROUP,
    SHT_SYMTAB_SHNDX: SectionTypeKind.SYMTAB_SHNDX,
}


def decode_section_type(value: int) -> SectionType:
    if value in _SHT_KINDS:
        kind = _SHT_KINDS[value]
    elif SHT_LOOS <= value <= SHT_HIOS:
        kind = SectionTypeKind.OS_SPECIFIC
    elif SHT_LOPROC <= value <= SHT_HIPROC:
        kind = SectionTypeKind.PROCESSOR_SPECIFIC
    elif SHT_LOUSER <= value <= SHT_HIUSER:
        kind = SectionTypeKind.USER_SPECIFIC
    else:
        kind = SectionTypeKind.UNKNOWN
    return SectionType(kind=kind, code=value)


def section_type_name(sec_type: SectionType) -> str:
    """``"PROGBITS"`` for known types, ``"os_specific(0x6ffffff6)"`` otherwise."""
    if sec_type.kind in (SectionTypeKind.OS_SPECIFIC,
                         SectionTypeKind.PROCESSOR_SPECIFIC,
                         SectionTypeKind.USER_SPECIFIC,
                         SectionTypeKind.UNKNOWN):
        return f"{sec_type.kind.value}(0x{sec_type.code:x})"
    return sec_type.kind.name


# ---------------------------------------------------------------------------
# Section flags
# ---------------------------------------------------------------------------

SHF_WRITE: int = 0x1
SHF_ALLOC: int = 0x2
SHF_EXECINSTR: int = 0x4
SHF_MERGE: int = 0x10
SHF_STRINGS: int = 0x20
SHF_INFO_LINK: int = 0x40
SHF_LINK_ORDER: int = 0x80
SHF_OS_NONCONFORMING: int = 0x100
SHF_GROUP: int = 0x200
SHF_TLS: int = 0x400
SHF_MASKOS: int = 0x0FF0_0000
SHF_MASKPROC: int = 0xF000_0000

# Ordered so that decoded flag tuples follow bit order.
_SHF_BITS: tuple[tuple[int, SectionFlag], ...] = (
    (SHF_WRITE, SectionFlag.WRITE),
    (SHF_ALLOC, SectionFlag.ALLOC),
    (SHF_EXECINSTR, SectionFlag.EXECINSTR),
    (SHF_MERGE, SectionFlag.MERGE),
    (SHF_STRINGS, SectionFlag.STRINGS),
    (SHF_INFO_LINK, SectionFlag.INFO_LINK),
    (SHF_LINK_ORDER, SectionFlag.LINK_ORDER),
    (SHF_OS_NONCONFORMING, SectionFlag.OS_NONCONFORMING),
    (SHF_GROUP, SectionFlag.GROUP),
    (SHF_TLS, SectionFlag.TLS),
)
_SHF_KNOWN: int = sum(bit for bit, _ in _SHF_BITS) | SHF_MASKOS | SHF_MASKPROC


def decode_section_flags(value: int) -> SectionFlags:
    return SectionFlags(
        flags=tuple(flag for bit, flag in _SHF_BITS if value & bit),
        os_bits=value & SHF_MASKOS,
        processor_bits=value & SHF_MASKPROC,
        unknown_bits=value & ~_SHF_KNOWN,
        raw=value,
    )


def section_flags_str(flags: SectionFlags) -> str:
    """readelf-style flag letters, e.g. ``"WAX"``.

    ``o`` and ``p`` mark OS- and processor-specific bits, ``x`` unknown ones.
    """
    letters = {
        SectionFlag.WRITE: "W",
        SectionFlag.ALLOC: "A",
        SectionFlag.EXECINSTR: "X",
        SectionFlag.MERGE: "M",
        SectionFlag.STRINGS: "S",
        SectionFlag.INFO_LINK: "I",
        SectionFlag.LINK_ORDER: "L",
        SectionFlag.OS_NONCONFORMING: "O",
        SectionFlag.GROUP: "G",
        SectionFlag.TLS: "T",
    }
    parts = [letters[flag] for flag in flags.flags]
    if flags.os_bits:
        parts.append("o")
    if flags.processor_bits:
        parts.append("p")
    if flags.unknown_bits:
        parts.append("x")
    return "".join(parts)


# ---------------------------------------------------------------------------
# Special section indices
# ---------------------------------------------------------------------------

SHN_UNDEF: int = 0
SHN_LOPROC: int = 0xFF00
SHN_HIPROC: int = 0xFF1F
SHN_LOOS: int = 0xFF20
SHN_HIOS: int = 0xFF3F
SHN_ABS: int = 0xFFF1
SHN_COMMON: int = 0xFFF2
SHN_XINDEX: int = 0xFFFF


def decode_section_index(value: int) -> SectionIndex:
    if value == SHN_UNDEF:
        kind = SectionIndexKind.UNDEFINED
    elif SHN_LOPROC <= value <= SHN_HIPROC:
        kind = SectionIndexKind.PROCESSOR_RESERVED
    elif SHN_LOOS <= value <= SHN_HIOS:
        kind = SectionIndexKind.OS_RESERVED
    elif value == SHN_ABS:
        kind = SectionIndexKind.ABSOLUTE
    elif value == SHN_COMMON:
        kind = SectionIndexKind.COMMON
    elif value == SHN_XINDEX:
        kind = SectionIndexKind.EXTENDED_INDEX
    else:
        kind = SectionIndexKind.NORMAL
    return SectionIndex(kind=kind, index=value)


# ---------------------------------------------------------------------------
# Symbol info / other
# ---------------------------------------------------------------------------

STB_LOCAL: int = 0
STB_GLOBAL: int = 1
STB_WEAK: int = 2
STB_LOOS: int = 10
STB_HIOS: int = 12

STT_NOTYPE: int = 0
STT_OBJECT: int = 1
STT_FUNC: int = 2
STT_SECTION: int = 3
STT_FILE: int = 4
STT_COMMON: int = 5
STT_TLS: int = 6
STT_LOOS: int = 10
STT_HIOS: int = 12

STV_DEFAULT: int = 0
STV_INTERNAL: int = 1
STV_HIDDEN: int = 2
STV_PROTECTED: int = 3

_STB_KINDS: dict[int, SymbolBinding] = {
    STB_LOCAL: SymbolBinding.LOCAL,
    STB_GLOBAL: SymbolBinding.GLOBAL,
    STB_WEAK: SymbolBinding.WEAK,
}

_STT_KINDS: dict[int, SymbolType] = {
    STT_NOTYPE: SymbolType.NOTYPE,
    STT_OBJECT: SymbolType.OBJECT,
    STT_FUNC: SymbolType.FUNC,
    STT_SECTION: SymbolType.SECTION,
    STT_FILE: SymbolType.FILE,
    STT_COMMON: SymbolType.COMMON,
    STT_TLS: SymbolType.TLS,
}

_STV_KINDS: tuple[SymbolVisibility, ...] = (
    SymbolVisibility.DEFAULT,
    SymbolVisibility.INTERNAL,
    SymbolVisibility.HIDDEN,
    SymbolVisibility.PROTECTED,
)


def decode_symbol_binding(info: int) -> SymbolBinding:
    bind = (info >> 4) & 0xF
    if bind in _STB_KINDS:
        return _STB_KINDS[bind]
    if STB_LOOS <= bind <= STB_HIOS:
        return SymbolBinding.OS_SPECIFIC
    return SymbolBinding.PROCESSOR_SPECIFIC


def decode_symbol_type(info: int) -> SymbolType:
    st_type = info & 0xF
    if st_type in _STT_KINDS:
        return _STT_KINDS[st_type]
    if STT_LOOS <= st_type <= STT_HIOS:
        return SymbolType.OS_SPECIFIC
    return SymbolType.PROCESSOR_SPECIFIC


def decode_symbol_visibility(other: int) -> SymbolVisibility:
    return _STV_KINDS[other & 0x3]


# ---------------------------------------------------------------------------
# Program headers
# ---------------------------------------------------------------------------

PT_NULL: int = 0
PT_LOAD: int = 1
PT_DYNAMIC: int = 2
PT_INTERP: int = 3
PT_NOTE: int = 4
PT_SHLIB: int = 5
PT_PHDR: int = 6
PT_TLS: int = 7
PT_LOOS: int = 0x6000_0000
PT_HIOS: int = 0x6FFF_FFFF
PT_LOPROC: int = 0x7000_0000
PT_HIPROC: int = 0x7FFF_FFFF

_PT_KINDS: dict[int, SegmentTypeKind] = {
    PT_NULL: SegmentTypeKind.NULL,
    PT_LOAD: SegmentTypeKind.LOAD,
    PT_DYNAMIC: SegmentTypeKind.DYNAMIC,
    PT_INTERP: SegmentTypeKind.INTERP,
    PT_NOTE: SegmentTypeKind.NOTE,
    PT_SHLIB: SegmentTypeKind.SHLIB,
    PT_PHDR: SegmentTypeKind.PHDR,
    PT_TLS: SegmentTypeKind.TLS,
}

# GNU extensions living in the OS range, for display only
_PT_GNU_NAMES: dict[int, str] = {
    0x6474E550: "GNU_EH_FRAME",
    0x6474E551: "GNU_STACK",
    0x6474E552: "GNU_RELRO",
    0x6474E553: "GNU_PROPERTY",
}

PF_X: int = 0x1  # Execute
PF_W: int = 0x2  # Write
PF_R: int = 0x4  # Read
PF_MASKOS: int = 0x0FF0_0000
PF_MASKPROC: int = 0xF000_0000


def decode_segment_type(value: int) -> SegmentType:
    if value in _PT_KINDS:
        kind = _PT_KINDS[value]
    elif PT_LOOS <= value <= PT_HIOS:
        kind = SegmentTypeKind.OS_SPECIFIC
    elif PT_LOPROC <= value <= PT_HIPROC:
        kind = SegmentTypeKind.PROCESSOR_SPECIFIC
    else:
        kind = SegmentTypeKind.UNKNOWN
    return SegmentType(kind=kind, code=value)


def segment_type_name(seg_type: SegmentType) -> str:
    if seg_type.code in _PT_GNU_NAMES:
        return _PT_GNU_NAMES[seg_type.code]
    if seg_type.kind in (SegmentTypeKind.OS_SPECIFIC,
                         SegmentTypeKind.PROCESSOR_SPECIFIC,
                         SegmentTypeKind.UNKNOWN):
        return f"{seg_type.kind.value}(0x{seg_type.code:x})"
    return seg_type.kind.name


def decode_segment_flags(value: int) -> SegmentFlags:
    flags: list[SegmentFlag] = []
    if value & PF_R:
        flags.append(SegmentFlag.R)
    if value & PF_W:
        flags.append(SegmentFlag.W)
    if value & PF_X:
        flags.append(SegmentFlag.X)
    return SegmentFlags(
        flags=tuple(flags),
        os_bits=value & PF_MASKOS,
        processor_bits=value & PF_MASKPROC,
        raw=value,
    )


def segment_flags_str(flags: SegmentFlags) -> str:
    """Flag letters such as ``"RWX"``, ``"-"`` when none are set."""
    parts = [flag.value.upper() for flag in flags.flags]
    return "".join(parts) if parts else "-"
