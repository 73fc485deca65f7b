"""
Symbol Table Construction
==========================

Builds a :class:`~elfview.core.models.SymbolTable` from a named symbol
section (``.symtab`` or ``.dynsym``) and the string table paired with it
(``.strtab`` or ``.dynstr``).

``st_value`` has no fixed meaning; it depends on the type of the *file*:

========================  ==================================================
file type                 meaning of ``st_value``
========================  ==================================================
``ET_REL``                alignment if ``st_shndx == SHN_COMMON``,
                          otherwise an offset into the symbol's section
``ET_EXEC`` / ``ET_DYN``  virtual address
anything else             undefined; :class:`SymbolContextError`
========================  ==================================================

References:
    - System V ABI, chapter 4, "Symbol Table" and "Symbol Values".
"""

from __future__ import annotations

from typing import Iterable

from shared.logger import ElfviewLogger

from elfview.core.errors import EntrySizeMismatchError, SymbolContextError
from elfview.core.models import (
    ObjectType,
    ObjectTypeKind,
    Section,
    SectionIndex,
    SectionIndexKind,
    Symbol,
    SymbolTable,
    SymbolValue,
    SymbolValueKind,
)
from elfview.core.source import ByteSource
from elfview.parsers.enums import (
    decode_section_index,
    decode_symbol_binding,
    decode_symbol_type,
    decode_symbol_visibility,
)
from elfview.parsers.layout import LITTLE_ENDIAN, SymbolRecord
from elfview.parsers.sections import find_section
from elfview.parsers.strtab import StringTable

# File types whose symbol values have a defined meaning.
SYMBOL_FILE_TYPES: frozenset[ObjectTypeKind] = frozenset(
    {ObjectTypeKind.REL, ObjectTypeKind.EXEC, ObjectTypeKind.DYN}
)


def symbol_value(
    object_type: ObjectType,
    section_index: SectionIndex,
    value: int,
) -> SymbolValue:
    """Interpret raw ``st_value`` for a file of *object_type*.

    Raises:
        SymbolContextError: For file types other than REL, EXEC and DYN.
    """
    kind = object_type.kind
    if kind is ObjectTypeKind.REL:
        if section_index.kind is SectionIndexKind.COMMON:
            return SymbolValue(kind=SymbolValueKind.ALIGNMENT, value=value)
        return SymbolValue(kind=SymbolValueKind.SECTION_OFFSET, value=value)
    if kind in (ObjectTypeKind.EXEC, ObjectTypeKind.DYN):
        return SymbolValue(kind=SymbolValueKind.VIRTUAL_ADDRESS, value=value)
    raise SymbolContextError(f"{kind.value}(0x{object_type.code:x})")


class SymbolTableBuilder:
    """Decodes symbol-table sections of one file.

    Args:
        source: The file's bytes.
        sections: Resolved section headers.
        object_type: ``e_type`` of the file.
        endian: Byte order of the file.
        logger: Optional logger.
    """

    def __init__(
        self,
        source: ByteSource,
        sections: Iterable[Section],
        object_type: ObjectType,
        endian: str = LITTLE_ENDIAN,
        logger: ElfviewLogger | None = None,
    ) -> None:
        self._source = source
        self._sections = tuple(sections)
        self._object_type = object_type
        self._endian = endian
        self._logger = logger or ElfviewLogger("symbols")

    def build(self, section_name: str, strings: StringTable) -> SymbolTable:
        """Decode the section called *section_name*.

        Returns an empty table when the section does not exist.

        Raises:
            EntrySizeMismatchError: If ``sh_entsize`` is not the size of
                an ``Elf64_Sym``.
            BoundsError: If the section's entries lie outside the file.
            SymbolContextError: If the file type gives symbol values no
                meaning.
        """
        sec = find_section(self._sections, section_name)
        if sec is None:
            self._logger.debug("No %s section", section_name)
            return SymbolTable(section=section_name)

        record_size = SymbolRecord.record_size()
        if sec.entsize != record_size:
            raise EntrySizeMismatchError(section_name, sec.entsize, record_size)

        count = sec.size // record_size
        data = self._source.slice(sec.offset, count * record_size, section_name)
        symbols = tuple(
            self._symbol(
                index,
                SymbolRecord.decode(
                    data[index * record_size:(index + 1) * record_size],
                    self._endian,
                ),
                strings,
            )
            for index in range(count)
        )
        self._logger.debug(
            "%s: %d symbols, names from %s",
            section_name,
            len(symbols),
            strings.section or "<none>",
        )
        return SymbolTable(section=section_name, symbols=symbols)

    def _symbol(self, index: int, rec: SymbolRecord, strings: StringTable) -> Symbol:
        section_index = decode_section_index(rec.shndx)
        return Symbol(
            index=index,
            name=strings.get(rec.name) or "",
            name_offset=rec.name,
            info=rec.info,
            other=rec.other,
            binding=decode_symbol_binding(rec.info),
            type=decode_symbol_type(rec.info),
            visibility=decode_symbol_visibility(rec.other),
            section_index=section_index,
            value=symbol_value(self._object_type, section_index, rec.value),
            size=rec.size,
        )
