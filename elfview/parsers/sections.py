"""
Section Header Table Resolution
================================

Decodes the section header table and resolves everything needed to
present it: the section-name string table (including the extended-index
escape), each section's display name and its decoded type and flags.

Order of resolution:

1. ``e_shoff == 0``: there is no table; nothing else happens.
2. Decode ``e_shnum`` records of ``e_shentsize`` bytes from ``e_shoff``.
   When ``e_shnum`` is 0 the real count lives in ``sh_size`` of record 0.
3. Find the name table: ``e_shstrndx``, or ``sh_link`` of record 0 when
   ``e_shstrndx`` is ``SHN_XINDEX``.  ``SHN_UNDEF`` means there is none
   and every section is named ``""``.
4. Name every record, the name table itself included.

References:
    - System V ABI, chapter 4, "Sections" and "Extended Section Indexes".
"""

from __future__ import annotations

from typing import Iterable, Optional

from shared.logger import ElfviewLogger

from elfview.core.errors import BoundsError, ShortBufferError
from elfview.core.models import Section, SectionIndexKind
from elfview.core.source import ByteSource
from elfview.parsers.enums import (
    SHN_UNDEF,
    decode_section_flags,
    decode_section_index,
    decode_section_type,
)
from elfview.parsers.layout import (
    LITTLE_ENDIAN,
    FileHeaderRecord,
    SectionHeaderRecord,
)
from elfview.parsers.strtab import StringTable

DEFAULT_NAME_PLACEHOLDER: str = "<invalid-name:0x{offset:x}>"


def find_section(sections: Iterable[Section], name: str) -> Optional[Section]:
    """Linear scan for the first section called *name*."""
    for sec in sections:
        if sec.name == name:
            return sec
    return None


def load_string_table(
    source: ByteSource,
    sections: Iterable[Section],
    name: str,
) -> StringTable:
    """Read the section called *name* as a string table.

    An absent section yields an empty table rather than an error.

    Raises:
        BoundsError: If the section's bytes lie outside the file.
    """
    sec = find_section(sections, name)
    if sec is None:
        return StringTable.empty(name)
    return StringTable(section=name, data=source.slice(sec.offset, sec.size, name))


class SectionTableResolver:
    """Resolves the section header table of one file.

    Args:
        logger: Where degraded name lookups are reported.
        name_placeholder: Format string used as the name of a section
            whose name offset is outside the name table.
    """

    def __init__(
        self,
        logger: ElfviewLogger | None = None,
        name_placeholder: str = DEFAULT_NAME_PLACEHOLDER,
    ) -> None:
        self._logger = logger or ElfviewLogger("sections")
        self._placeholder = name_placeholder

    def resolve(
        self,
        source: ByteSource,
        header: FileHeaderRecord,
        endian: str = LITTLE_ENDIAN,
    ) -> tuple[StringTable, tuple[Section, ...]]:
        """Return ``(section-name string table, sections by index)``."""
        if header.shoff == 0:
            self._logger.debug("No section header table")
            return StringTable.empty(), ()

        records = self.read_headers(source, header, endian)
        if not records:
            self._logger.debug("Section header table is empty")
            return StringTable.empty(), ()
        if header.shstrndx == SHN_UNDEF:
            # No name table: every section is unnamed
            self._logger.debug("No section-name string table")
            shstrtab = StringTable.empty()
            named = False
        else:
            shstrtab = self.name_table(source, records, header.shstrndx)
            named = True
        sections = tuple(
            self._section(index, rec, shstrtab, named)
            for index, rec in enumerate(records)
        )
        self._logger.debug(
            "Resolved %d sections, names from %s",
            len(sections),
            shstrtab.section or "<none>",
        )
        return shstrtab, sections

    # ------------------------------------------------------------------ #
    #  Raw table
    # ------------------------------------------------------------------ #

    def read_headers(
        self,
        source: ByteSource,
        header: FileHeaderRecord,
        endian: str = LITTLE_ENDIAN,
    ) -> list[SectionHeaderRecord]:
        """Decode every section header record.

        Raises:
            ShortBufferError: If ``e_shentsize`` is smaller than a record.
            BoundsError: If the table runs past the end of the file.
        """
        entsize = header.shentsize
        if entsize < SectionHeaderRecord.record_size():
            raise ShortBufferError(
                "SectionHeaderRecord", SectionHeaderRecord.record_size(), entsize
            )

        count = header.shnum
        if count == 0:
            # Extended numbering: the real count is sh_size of entry 0.
            first = SectionHeaderRecord.decode(
                source.slice(header.shoff, entsize, "section header 0"), endian
            )
            count = first.size
            self._logger.debug("Extended section count %d", count)

        source.check(header.shoff, count * entsize, "section header table")
        return [
            SectionHeaderRecord.decode(
                source.slice(header.shoff + i * entsize, entsize), endian
            )
            for i in range(count)
        ]

    def name_table(
        self,
        source: ByteSource,
        records: list[SectionHeaderRecord],
        shstrndx: int,
    ) -> StringTable:
        """Load the section-name string table.

        Raises:
            BoundsError: If the index does not name a decoded section or
                the section's bytes lie outside the file.
        """
        sid = decode_section_index(shstrndx)
        if sid.kind is SectionIndexKind.EXTENDED_INDEX:
            if not records:
                raise BoundsError(0, 1, 0, "section header 0")
            index = records[0].link
            self._logger.debug("Name table index escaped to %d", index)
        else:
            index = shstrndx

        if index >= len(records):
            raise BoundsError(index, 1, len(records), "section-name table index")

        rec = records[index]
        data = source.slice(rec.offset, rec.size, "section-name string table")
        name = StringTable(data=data).get(rec.name) or ""
        return StringTable(section=name, data=data)

    # ------------------------------------------------------------------ #
    #  Views
    # ------------------------------------------------------------------ #

    def _section(
        self,
        index: int,
        rec: SectionHeaderRecord,
        shstrtab: StringTable,
        named: bool = True,
    ) -> Section:
        name = shstrtab.get(rec.name) if named else ""
        if name is None:
            name = self._placeholder.format(offset=rec.name)
            self._logger.warning(
                "Section %d: name offset 0x%x outside name table (%d bytes)",
                index,
                rec.name,
                len(shstrtab),
                section=index,
            )
        return Section(
            index=index,
            name=name,
            name_offset=rec.name,
            type=decode_section_type(rec.type),
            flags=decode_section_flags(rec.flags),
            addr=rec.addr,
            offset=rec.offset,
            size=rec.size,
            link=rec.link,
            info=rec.info,
            addralign=rec.addralign,
            entsize=rec.entsize,
        )
