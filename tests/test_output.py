"""Tests for the console and JSON reports."""

from __future__ import annotations

import json

from shared.config import ViewConfig
from shared.console import ElfviewConsole

from elfview.output.console import ElfviewConsoleOutput, section_index_label
from elfview.output.report import ElfviewReportGenerator
from elfview.parsers.enums import decode_section_index

from elfimage import ET_EXEC, build_elf, sample_object


def _render(obj, **view) -> str:
    console = ElfviewConsole(record=True, width=200)
    ElfviewConsoleOutput(console=console, view=ViewConfig(**view)).display(obj)
    return console.export_text()


def test_section_index_label():
    assert section_index_label(decode_section_index(0)) == "UND"
    assert section_index_label(decode_section_index(0xFFF1)) == "ABS"
    assert section_index_label(decode_section_index(0xFFF2)) == "COM"
    assert section_index_label(decode_section_index(0xFF20)) == "OS(0xff20)"
    assert section_index_label(decode_section_index(0xFF01)) == "PROC(0xff01)"
    assert section_index_label(decode_section_index(7)) == "7"


def test_console_report(parser):
    text = _render(parser.parse(sample_object()))
    assert "ELF Header" in text
    assert "x86_64" in text
    for name in (".text", ".symtab", ".shstrtab", "main", "counter", "buf"):
        assert name in text
    assert "COM" in text
    assert "No .dynsym symbols." in text


def test_console_report_limits_symbols(parser):
    text = _render(parser.parse(sample_object()), max_symbols=2)
    assert "Showing 2 of 4 symbols in .symtab." in text
    assert "counter" not in text.split("Symbol Table .symtab")[1]


def test_console_report_without_string_tables(parser):
    text = _render(parser.parse(sample_object()), show_string_tables=False)
    assert "String Table" not in text


def test_console_report_without_sections(parser):
    text = _render(parser.parse(build_elf(with_section_table=False)))
    assert "There are no sections in this file." in text


def test_console_program_headers(parser):
    phdrs = [(1, 0x5, 0, 0x400000, 0x400000, 0x200, 0x200, 0x1000)]
    obj = parser.parse(sample_object(ET_EXEC, program_headers=phdrs))
    text = _render(obj)
    assert "Program Headers" in text
    assert "LOAD" in text
    assert "RX" in text
    assert "Program Headers" not in _render(obj, show_program_headers=False)


def test_json_report(parser, tmp_path):
    obj = parser.parse(sample_object())
    generator = ElfviewReportGenerator()
    doc = json.loads(generator.to_json(obj))
    assert doc["report_type"] == "elfview_object"
    assert doc["summary"]["sections"] == 6
    assert doc["summary"]["symtab_symbols"] == 4
    assert doc["summary"]["type"] == "rel"
    assert doc["object"]["symtab"]["symbols"][1]["name"] == "main"

    path = generator.generate_json(obj, tmp_path / "out" / "report.json")
    saved = json.loads((tmp_path / "out" / "report.json").read_text(encoding="utf-8"))
    assert path.endswith("report.json")
    assert saved["summary"] == doc["summary"]
