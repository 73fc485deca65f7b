"""Synthetic 64-bit ELF images for the test suite.

Images are laid out as::

    Elf64_Ehdr | program headers | section bytes ... | section header table

Section 0 (SHT_NULL) is added automatically, and so is ``.shstrtab``,
which always comes last.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass

ET_NONE = 0
ET_REL = 1
ET_EXEC = 2
ET_DYN = 3
ET_CORE = 4

SHT_PROGBITS = 1
SHT_SYMTAB = 2
SHT_STRTAB = 3
SHT_NOBITS = 8
SHT_DYNSYM = 11

SHF_WRITE = 0x1
SHF_ALLOC = 0x2
SHF_EXECINSTR = 0x4

SHN_COMMON = 0xFFF2
SHN_ABS = 0xFFF1
SHN_XINDEX = 0xFFFF

EHDR_FORMAT = "16sHHIQQQIHHHHHH"
SHDR_FORMAT = "IIQQQQIIQQ"
SYM_FORMAT = "IBBHQQ"
PHDR_FORMAT = "IIQQQQQQ"


@dataclass
class SectionDef:
    name: str
    type: int
    data: bytes = b""
    flags: int = 0
    addr: int = 0
    link: int = 0
    info: int = 0
    addralign: int = 1
    entsize: int = 0
    # Overrides the sh_name offset computed from .shstrtab
    name_offset: int | None = None


def string_table(*names: str) -> tuple[bytes, dict[str, int]]:
    """Return string-table bytes and the offset of each name."""
    data = bytearray(b"\x00")
    offsets: dict[str, int] = {"": 0}
    for name in names:
        if name in offsets:
            continue
        offsets[name] = len(data)
        data += name.encode() + b"\x00"
    return bytes(data), offsets


def symbol_entries(entries, endian: str = "<") -> bytes:
    """Pack ``(name, info, other, shndx, value, size)`` tuples."""
    return b"".join(struct.pack(endian + SYM_FORMAT, *entry) for entry in entries)


def ident(
    *,
    magic: bytes = b"\x7fELF",
    elf_class: int = 2,
    data: int = 1,
    version: int = 1,
    osabi: int = 0,
) -> bytes:
    return magic + bytes([elf_class, data, version, osabi, 0]) + b"\x00" * 7


def build_elf(
    sections=(),
    *,
    etype: int = ET_REL,
    machine: int = 62,
    endian: str = "<",
    entry: int = 0,
    program_headers=(),
    use_xindex: bool = False,
    extended_count: bool = False,
    shentsize: int = 64,
    with_section_table: bool = True,
    ident_bytes: bytes | None = None,
) -> bytes:
    """Assemble a complete ELF64 image."""
    if ident_bytes is None:
        ident_bytes = ident(data=1 if endian == "<" else 2)

    specs = list(sections)
    names_data, name_offsets = string_table(
        *(spec.name for spec in specs), ".shstrtab"
    )
    specs.append(SectionDef(name=".shstrtab", type=SHT_STRTAB, data=names_data))
    count = len(specs) + 1
    shstrndx = count - 1

    phoff = 64 if program_headers else 0
    cursor = 64 + 56 * len(program_headers)
    body = bytearray()
    offsets: list[int] = []
    for spec in specs:
        offsets.append(cursor + len(body))
        body += spec.data
    while (cursor + len(body)) % 8:
        body += b"\x00"
    shoff = cursor + len(body) if with_section_table else 0

    headers = bytearray()
    if with_section_table:
        headers += struct.pack(
            endian + SHDR_FORMAT,
            0, 0, 0, 0, 0,
            count if extended_count else 0,
            shstrndx if use_xindex else 0,
            0, 0, 0,
        ).ljust(shentsize, b"\x00")
        for spec, offset in zip(specs, offsets):
            name = (
                spec.name_offset
                if spec.name_offset is not None
                else name_offsets[spec.name]
            )
            headers += struct.pack(
                endian + SHDR_FORMAT,
                name,
                spec.type,
                spec.flags,
                spec.addr,
                offset,
                len(spec.data),
                spec.link,
                spec.info,
                spec.addralign,
                spec.entsize,
            ).ljust(shentsize, b"\x00")

    ehdr = struct.pack(
        endian + EHDR_FORMAT,
        ident_bytes,
        etype,
        machine,
        1,
        entry,
        phoff,
        shoff,
        0,
        64,
        56,
        len(program_headers),
        shentsize,
        0 if extended_count or not with_section_table else count,
        SHN_XINDEX if use_xindex else (shstrndx if with_section_table else 0),
    )
    phdrs = b"".join(
        struct.pack(endian + PHDR_FORMAT, *ph) for ph in program_headers
    )
    return ehdr + phdrs + bytes(body) + bytes(headers)


# ---------------------------------------------------------------------------
# A small relocatable object
# ---------------------------------------------------------------------------

SYMBOL_NAMES = ("main", "counter", "buf")


def sample_sections(endian: str = "<") -> list[SectionDef]:
    """``.text .data .strtab .symtab`` at indices 1 to 4.

    Symbols::

        0  <null>
        1  main     GLOBAL FUNC    .text    value 0x0   size 16
        2  counter  GLOBAL OBJECT  .data    value 0x4   size 4   hidden
        3  buf      GLOBAL OBJECT  COMMON   value 0x10  size 64
    """
    strtab, offs = string_table(*SYMBOL_NAMES)
    symtab = symbol_entries(
        [
            (0, 0, 0, 0, 0, 0),
            (offs["main"], 0x12, 0, 1, 0x0, 16),
            (offs["counter"], 0x11, 2, 2, 0x4, 4),
            (offs["buf"], 0x11, 0, SHN_COMMON, 0x10, 64),
        ],
        endian,
    )
    return [
        SectionDef(".text", SHT_PROGBITS, b"\x90" * 16,
                    flags=SHF_ALLOC | SHF_EXECINSTR, addralign=16),
        SectionDef(".data", SHT_PROGBITS, b"\x00" * 8,
                    flags=SHF_WRITE | SHF_ALLOC, addralign=8),
        SectionDef(".strtab", SHT_STRTAB, strtab),
        SectionDef(".symtab", SHT_SYMTAB, symtab, link=3, info=1,
                    addralign=8, entsize=24),
    ]


def sample_object(etype: int = ET_REL, endian: str = "<", **kwargs) -> bytes:
    return build_elf(sample_sections(endian), etype=etype, endian=endian, **kwargs)
