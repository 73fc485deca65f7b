"""Tests for section header table resolution."""

from __future__ import annotations

import logging

import pytest

from elfview.core.errors import BoundsError, ShortBufferError
from elfview.core.models import SectionFlag, SectionTypeKind
from elfview.core.source import ByteSource
from elfview.parsers.layout import FileHeaderRecord
from elfview.parsers.sections import (
    SectionTableResolver,
    find_section,
    load_string_table,
)

from elfimage import (
    SHT_PROGBITS,
    SectionDef,
    build_elf,
    sample_object,
    sample_sections,
)


def _resolve(image: bytes, logger, **kwargs):
    source = ByteSource(image)
    header = FileHeaderRecord.decode(image)
    resolver = SectionTableResolver(logger=logger, **kwargs)
    return resolver.resolve(source, header)


def test_sections_by_index(logger):
    shstrtab, sections = _resolve(sample_object(), logger)
    assert [s.name for s in sections] == [
        "", ".text", ".data", ".strtab", ".symtab", ".shstrtab",
    ]
    assert [s.index for s in sections] == list(range(6))
    assert sections[0].type.kind is SectionTypeKind.NULL
    assert sections[4].type.kind is SectionTypeKind.SYMTAB
    assert SectionFlag.EXECINSTR in sections[1].flags
    assert sections[4].entsize == 24
    assert sections[4].link == 3


def test_name_table_is_named_after_itself(logger):
    shstrtab, sections = _resolve(sample_object(), logger)
    assert shstrtab.section == ".shstrtab"
    assert shstrtab.get(sections[5].name_offset) == ".shstrtab"
    assert len(shstrtab) == sections[5].size


def test_section_bytes_match_image(logger):
    image = sample_object()
    _, sections = _resolve(image, logger)
    text = find_section(sections, ".text")
    assert image[text.offset:text.offset + text.size] == b"\x90" * 16


def test_no_section_table(logger):
    image = build_elf(sample_sections(), with_section_table=False)
    shstrtab, sections = _resolve(image, logger)
    assert sections == ()
    assert len(shstrtab) == 0


def test_extended_index_escape(logger):
    image = build_elf(sample_sections(), use_xindex=True)
    assert FileHeaderRecord.decode(image).shstrndx == 0xFFFF
    shstrtab, sections = _resolve(image, logger)
    assert shstrtab.section == ".shstrtab"
    assert sections[1].name == ".text"


def test_extended_section_count(logger):
    image = build_elf(sample_sections(), extended_count=True)
    assert FileHeaderRecord.decode(image).shnum == 0
    _, sections = _resolve(image, logger)
    assert len(sections) == 6
    assert sections[0].size == 6


def test_larger_entry_stride(logger):
    image = build_elf(sample_sections(), shentsize=80)
    _, sections = _resolve(image, logger)
    assert [s.name for s in sections][1:3] == [".text", ".data"]


def test_short_entry_size(logger):
    image = build_elf(sample_sections(), shentsize=40)
    with pytest.raises(ShortBufferError):
        _resolve(image, logger)


def test_truncated_table(logger):
    image = sample_object()
    with pytest.raises(BoundsError):
        _resolve(image[:-10], logger)


def test_name_index_out_of_range(logger):
    image = bytearray(sample_object())
    # e_shstrndx lives at offset 62
    image[62:64] = (40).to_bytes(2, "little")
    with pytest.raises(BoundsError):
        _resolve(bytes(image), logger)


def test_bad_name_offset_degrades(logger):
    sections = [SectionDef(".text", SHT_PROGBITS, b"\x00" * 4, name_offset=0x999)]
    records: list[logging.LogRecord] = []

    class _Collect(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            records.append(record)

    logger.logger.addHandler(_Collect())
    _, resolved = _resolve(build_elf(sections), logger)
    assert resolved[1].name == "<invalid-name:0x999>"
    assert resolved[1].name_offset == 0x999
    assert any(r.levelno == logging.WARNING for r in records)


def test_custom_placeholder(logger):
    sections = [SectionDef(".text", SHT_PROGBITS, name_offset=0x500)]
    _, resolved = _resolve(
        build_elf(sections), logger, name_placeholder="?{offset}"
    )
    assert resolved[1].name == "?1280"


def test_load_string_table(logger):
    image = sample_object()
    _, sections = _resolve(image, logger)
    source = ByteSource(image)
    strtab = load_string_table(source, sections, ".strtab")
    assert strtab.section == ".strtab"
    assert list(strtab.names()) == ["main", "counter", "buf"]

    dynstr = load_string_table(source, sections, ".dynstr")
    assert dynstr.section == ".dynstr"
    assert len(dynstr) == 0


def test_undefined_name_index_leaves_names_empty(logger):
    image = bytearray(sample_object())
    image[62:64] = (0).to_bytes(2, "little")
    records: list[logging.LogRecord] = []

    class _Collect(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            records.append(record)

    logger.logger.addHandler(_Collect())
    shstrtab, sections = _resolve(bytes(image), logger)
    assert len(sections) == 6
    assert [s.name for s in sections] == [""] * 6
    assert sections[1].name_offset != 0
    assert len(shstrtab) == 0
    assert not [r for r in records if r.levelno >= logging.WARNING]
