"""Tests for code decoding."""

from __future__ import annotations

import pytest

from elfview.core.models import (
    DataEncoding,
    ElfClass,
    ObjectTypeKind,
    SectionFlag,
    SectionIndexKind,
    SectionTypeKind,
    SegmentFlag,
    SegmentTypeKind,
    SymbolBinding,
    SymbolType,
    SymbolVisibility,
)
from elfview.parsers import enums


def test_class_and_encoding():
    assert enums.decode_class(2) is ElfClass.ELF64
    assert enums.decode_class(1) is ElfClass.ELF32
    assert enums.decode_class(9) is ElfClass.UNKNOWN
    assert enums.decode_data_encoding(2) is DataEncoding.MSB
    assert enums.decode_data_encoding(7) is DataEncoding.UNKNOWN


@pytest.mark.parametrize(
    "code, kind",
    [
        (0, ObjectTypeKind.NONE),
        (1, ObjectTypeKind.REL),
        (2, ObjectTypeKind.EXEC),
        (3, ObjectTypeKind.DYN),
        (4, ObjectTypeKind.CORE),
        (0xFE10, ObjectTypeKind.OS_SPECIFIC),
        (0xFF05, ObjectTypeKind.PROCESSOR_SPECIFIC),
        (0x50, ObjectTypeKind.UNKNOWN),
    ],
)
def test_object_type(code, kind):
    decoded = enums.decode_object_type(code)
    assert decoded.kind is kind
    assert decoded.code == code


def test_machine_name():
    assert enums.machine_name(62) == "x86_64"
    assert enums.machine_name(50) == "IA-64"
    assert enums.machine_name(9999) == "unknown(9999)"


@pytest.mark.parametrize(
    "code, kind",
    [
        (0, SectionTypeKind.NULL),
        (2, SectionTypeKind.SYMTAB),
        (8, SectionTypeKind.NOBITS),
        (11, SectionTypeKind.DYNSYM),
        (14, SectionTypeKind.INIT_ARRAY),
        (15, SectionTypeKind.FINI_ARRAY),
        (16, SectionTypeKind.PREINIT_ARRAY),
        (17, SectionTypeKind.GROUP),
        (18, SectionTypeKind.SYMTAB_SHNDX),
        (12, SectionTypeKind.UNKNOWN),
        (0x6FFFFFF6, SectionTypeKind.OS_SPECIFIC),
        (0x70000001, SectionTypeKind.PROCESSOR_SPECIFIC),
        (0x80000000, SectionTypeKind.USER_SPECIFIC),
    ],
)
def test_section_type(code, kind):
    assert enums.decode_section_type(code).kind is kind


def test_section_type_name():
    assert enums.section_type_name(enums.decode_section_type(1)) == "PROGBITS"
    assert (
        enums.section_type_name(enums.decode_section_type(0x6FFFFFF6))
        == "os_specific(0x6ffffff6)"
    )


class TestSectionFlags:
    def test_well_known_bits(self):
        flags = enums.decode_section_flags(0x6)
        assert flags.flags == (SectionFlag.ALLOC, SectionFlag.EXECINSTR)
        assert SectionFlag.ALLOC in flags
        assert SectionFlag.WRITE not in flags
        assert enums.section_flags_str(flags) == "AX"

    def test_masked_bits_keep_their_value(self):
        flags = enums.decode_section_flags(0x0010_0000 | 0x8000_0000 | 0x1)
        assert flags.os_bits == 0x0010_0000
        assert flags.processor_bits == 0x8000_0000
        assert flags.unknown_bits == 0
        assert enums.section_flags_str(flags) == "Wop"

    def test_unknown_bits(self):
        flags = enums.decode_section_flags(0x800)
        assert flags.flags == ()
        assert flags.unknown_bits == 0x800
        assert flags.raw == 0x800
        assert enums.section_flags_str(flags) == "x"


@pytest.mark.parametrize(
    "value, kind",
    [
        (0, SectionIndexKind.UNDEFINED),
        (1, SectionIndexKind.NORMAL),
        (0xFEFF, SectionIndexKind.NORMAL),
        (0xFF00, SectionIndexKind.PROCESSOR_RESERVED),
        (0xFF1F, SectionIndexKind.PROCESSOR_RESERVED),
        (0xFF20, SectionIndexKind.OS_RESERVED),
        (0xFF3F, SectionIndexKind.OS_RESERVED),
        (0xFFF1, SectionIndexKind.ABSOLUTE),
        (0xFFF2, SectionIndexKind.COMMON),
        (0xFFFF, SectionIndexKind.EXTENDED_INDEX),
    ],
)
def test_section_index(value, kind):
    sid = enums.decode_section_index(value)
    assert sid.kind is kind
    assert sid.index == value


class TestSymbolFields:
    def test_global_function(self):
        assert enums.decode_symbol_binding(0x12) is SymbolBinding.GLOBAL
        assert enums.decode_symbol_type(0x12) is SymbolType.FUNC

    def test_weak_object(self):
        assert enums.decode_symbol_binding(0x21) is SymbolBinding.WEAK
        assert enums.decode_symbol_type(0x21) is SymbolType.OBJECT

    def test_reserved_ranges(self):
        assert enums.decode_symbol_binding(0xA0) is SymbolBinding.OS_SPECIFIC
        assert enums.decode_symbol_binding(0xD0) is SymbolBinding.PROCESSOR_SPECIFIC
        assert enums.decode_symbol_type(0x0B) is SymbolType.OS_SPECIFIC
        assert enums.decode_symbol_type(0x0F) is SymbolType.PROCESSOR_SPECIFIC

    def test_visibility_uses_low_bits(self):
        assert enums.decode_symbol_visibility(0x02) is SymbolVisibility.HIDDEN
        assert enums.decode_symbol_visibility(0xF3) is SymbolVisibility.PROTECTED
        assert enums.decode_symbol_visibility(0) is SymbolVisibility.DEFAULT


class TestSegments:
    def test_types(self):
        assert enums.decode_segment_type(1).kind is SegmentTypeKind.LOAD
        assert enums.decode_segment_type(7).kind is SegmentTypeKind.TLS
        stack = enums.decode_segment_type(0x6474E551)
        assert stack.kind is SegmentTypeKind.OS_SPECIFIC
        assert enums.segment_type_name(stack) == "GNU_STACK"
        assert enums.decode_segment_type(0x70000000).kind is SegmentTypeKind.PROCESSOR_SPECIFIC
        assert enums.decode_segment_type(99).kind is SegmentTypeKind.UNKNOWN

    def test_flags(self):
        flags = enums.decode_segment_flags(0x5)
        assert flags.flags == (SegmentFlag.R, SegmentFlag.X)
        assert enums.segment_flags_str(flags) == "RX"
        assert enums.segment_flags_str(enums.decode_segment_flags(0)) == "-"
