"""Tests for :class:`ElfviewLogger` handlers and record context."""

from __future__ import annotations

import json
import logging

from shared.logger import ElfviewLogger

from elfview.parsers.elf_parser import ElfParser

from elfimage import SHT_PROGBITS, SectionDef, build_elf


def _close(log: ElfviewLogger) -> None:
    for handler in log.logger.handlers:
        handler.close()


def _bad_name_image() -> bytes:
    return build_elf([SectionDef(".text", SHT_PROGBITS, b"\xc3", name_offset=0x999)])


def test_json_log_file(tmp_path):
    path = tmp_path / "x.log"
    log = ElfviewLogger("parser", log_file=path, json_logs=True, console_output=False)
    obj = ElfParser(logger=log).parse(_bad_name_image())
    _close(log)

    assert obj.sections[1].name == "<invalid-name:0x999>"
    lines = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    warnings = [line for line in lines if line["level"] == "WARNING"]
    assert len(warnings) == 1
    warning = warnings[0]
    assert warning["logger"] == "elfview.parser"
    assert warning["component"] == "parser"
    assert warning["operation"] == "sections"
    assert warning["extra"] == {"section": 1}
    assert "0x999" in warning["message"]


def test_text_log_file(tmp_path):
    path = tmp_path / "nested" / "x.log"
    log = ElfviewLogger("parser", log_file=path, console_output=False)
    ElfParser(logger=log).parse(_bad_name_image())
    _close(log)

    text = path.read_text(encoding="utf-8")
    assert "| WARNING  | elfview.parser [sections] |" in text
    assert "name offset 0x999" in text


def test_level_filters_file(tmp_path):
    path = tmp_path / "x.log"
    log = ElfviewLogger("quiet", log_level="ERROR", log_file=path, console_output=False)
    log.warning("dropped")
    log.error("kept")
    _close(log)
    assert path.read_text(encoding="utf-8").count("\n") == 1


def test_unknown_level_falls_back_to_warning():
    log = ElfviewLogger("fallback", log_level="chatty", console_output=False)
    assert log.logger.level == logging.WARNING


def test_operation_and_timed(tmp_path):
    path = tmp_path / "x.log"
    log = ElfviewLogger("ops", log_level="DEBUG", log_file=path, json_logs=True,
                        console_output=False)
    with log.operation("outer"):
        with log.operation("inner"), log.timed("step"):
            log.info("inside", item=3)
        log.info("after")
    log.info("outside")
    _close(log)

    lines = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    by_message = {line["message"]: line for line in lines}
    assert by_message["inside"]["operation"] == "inner"
    assert by_message["inside"]["extra"] == {"item": 3}
    assert by_message["after"]["operation"] == "outer"
    assert by_message["outside"]["operation"] == "-"
    assert "extra" not in by_message["outside"]
    assert by_message["Started: step"]["level"] == "DEBUG"
    assert any(m.startswith("Completed: step (") for m in by_message)


def test_second_logger_replaces_handlers():
    ElfviewLogger("dup", console_output=True)
    log = ElfviewLogger("dup", console_output=True)
    assert len(log.logger.handlers) == 1
