"""
Elfview Console Output
=======================

Rich-powered terminal report for a decoded :class:`ElfObject`: the
identification block and file header, the section table, the program
header table, string tables and symbol tables.

The report is meant for people; its layout is not a stable format.  Use
:mod:`elfview.output.report` for machine-readable output.
"""

from __future__ import annotations

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from shared.config import ViewConfig
from shared.console import ElfviewConsole

from elfview.core.models import (
    ElfObject,
    FileHeaderView,
    ProgramHeader,
    Section,
    SectionIndex,
    SectionIndexKind,
    SymbolTable,
    SymbolValueKind,
)
from elfview.parsers.enums import (
    section_flags_str,
    section_type_name,
    segment_flags_str,
    segment_type_name,
)
from elfview.parsers.strtab import StringTable

_SHN_LABELS: dict[SectionIndexKind, str] = {
    SectionIndexKind.UNDEFINED: "UND",
    SectionIndexKind.ABSOLUTE: "ABS",
    SectionIndexKind.COMMON: "COM",
    SectionIndexKind.EXTENDED_INDEX: "XINDEX",
}

_VALUE_LABELS: dict[SymbolValueKind, str] = {
    SymbolValueKind.ALIGNMENT: "align",
    SymbolValueKind.SECTION_OFFSET: "offset",
    SymbolValueKind.VIRTUAL_ADDRESS: "vaddr",
}


def _hex(value: int) -> str:
    return f"0x{value:x}"


def section_index_label(sid: SectionIndex) -> str:
    """``"UND"``, ``"ABS"``, ``"COM"``, ``"OS(0xff20)"`` or the plain index."""
    if sid.kind in _SHN_LABELS:
        return _SHN_LABELS[sid.kind]
    if sid.kind is SectionIndexKind.OS_RESERVED:
        return f"OS({_hex(sid.index)})"
    if sid.kind is SectionIndexKind.PROCESSOR_RESERVED:
        return f"PROC({_hex(sid.index)})"
    return str(sid.index)


class ElfviewConsoleOutput:
    """Rich terminal display for decoded ELF objects.

    Usage::

        output = ElfviewConsoleOutput()
        output.display(obj)
    """

    def __init__(
        self,
        console: ElfviewConsole | None = None,
        view: ViewConfig | None = None,
    ) -> None:
        self._console: ElfviewConsole = console or ElfviewConsole()
        self._view: ViewConfig = view or ViewConfig()

    def display(self, obj: ElfObject) -> None:
        """Display the complete report for *obj*."""
        self.display_header(obj)
        self.display_sections(obj.sections)

        if self._view.show_program_headers:
            self.display_program_headers(obj.program_headers)

        if self._view.show_string_tables:
            for table in (obj.shstrtab, obj.strtab, obj.dynstr):
                self.display_string_table(table)

        self.display_symbols(obj.symtab)
        self.display_symbols(obj.dynsym)
        self._console.divider()

    # ------------------------------------------------------------------ #
    #  Header
    # ------------------------------------------------------------------ #

    def display_header(self, obj: ElfObject) -> None:
        h: FileHeaderView = obj.header
        ident = h.ident
        lines: list[str] = [
            f"[bold]File:[/bold]         {escape(obj.path)} ({obj.size:,} bytes)",
            f"[bold]Magic:[/bold]        {ident.magic.hex(' ')}",
            f"[bold]Class:[/bold]        {ident.elf_class.value.upper()}",
            f"[bold]Data:[/bold]         {ident.data.value.upper()}",
            f"[bold]Version:[/bold]      {ident.version} (ident), {h.version} (header)",
            f"[bold]OS/ABI:[/bold]       {ident.osabi}, ABI version {ident.abiversion}",
            f"[bold]Type:[/bold]         {h.type.kind.name} ({_hex(h.type.code)})",
            f"[bold]Machine:[/bold]      {h.machine_name} ({h.machine})",
            f"[bold]Entry:[/bold]        {_hex(h.entry)}",
            f"[bold]Flags:[/bold]        {_hex(h.flags)}",
            f"[bold]Header size:[/bold]  {h.ehsize} bytes",
            f"[bold]Program hdrs:[/bold] {h.phnum} x {h.phentsize} bytes at {_hex(h.phoff)}",
            f"[bold]Section hdrs:[/bold] {h.shnum} x {h.shentsize} bytes at {_hex(h.shoff)}",
            f"[bold]Names index:[/bold]  {section_index_label(h.shstrndx)}",
        ]
        panel = Panel(
            "\n".join(lines),
            title="[bold bright_cyan]ELF Header[/bold bright_cyan]",
            border_style="bright_cyan",
            padding=(1, 2),
        )
        self._console.rich.print(panel)
        self._console.blank()

    # ------------------------------------------------------------------ #
    #  Sections
    # ------------------------------------------------------------------ #

    def display_sections(self, sections: tuple[Section, ...]) -> None:
        self._console.section("Sections")
        if not sections:
            self._console.info("There are no sections in this file.")
            self._console.blank()
            return

        tbl = Table(
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            show_lines=False,
            padding=(0, 1),
        )
        tbl.add_column("#", style="dim", justify="right")
        tbl.add_column("Name", style="bold")
        tbl.add_column("Type")
        tbl.add_column("Flags")
        tbl.add_column("Address", justify="right")
        tbl.add_column("Offset", justify="right")
        tbl.add_column("Size", justify="right")
        tbl.add_column("EntSz", justify="right")
        tbl.add_column("Link", justify="right")
        tbl.add_column("Info", justify="right")
        tbl.add_column("Align", justify="right")

        for sec in sections:
            tbl.add_row(
                str(sec.index),
                escape(sec.name),
                section_type_name(sec.type),
                section_flags_str(sec.flags) or "-",
                _hex(sec.addr),
                _hex(sec.offset),
                f"{sec.size:,}",
                str(sec.entsize),
                str(sec.link),
                str(sec.info),
                str(sec.addralign),
            )

        self._console.rich.print(tbl)
        self._console.print(
            "[dim]W write, A alloc, X execute, M merge, S strings, I info, "
            "L link order, O OS nonconforming, G group, T TLS, "
            "o OS, p processor, x unknown[/dim]"
        )
        self._console.blank()

    # ------------------------------------------------------------------ #
    #  Program headers
    # ------------------------------------------------------------------ #

    def display_program_headers(self, headers: tuple[ProgramHeader, ...]) -> None:
        if not headers:
            return
        self._console.section("Program Headers")
        self._console.table(
            "",
            ["#", "Type", "Flags", "Offset", "VAddr", "PAddr", "FileSz", "MemSz", "Align"],
            [
                (
                    ph.index,
                    segment_type_name(ph.type),
                    segment_flags_str(ph.flags),
                    _hex(ph.offset),
                    _hex(ph.vaddr),
                    _hex(ph.paddr),
                    _hex(ph.filesz),
                    _hex(ph.memsz),
                    _hex(ph.align),
                )
                for ph in headers
            ],
            justify=["right", "left", "left"] + ["right"] * 6,
        )
        self._console.blank()

    # ------------------------------------------------------------------ #
    #  String tables
    # ------------------------------------------------------------------ #

    def display_string_table(self, table: StringTable) -> None:
        if len(table) == 0:
            return
        title = table.section or "<section names>"
        self._console.section(f"String Table {title}")
        self._console.table(
            "",
            ["Offset", "String"],
            [(_hex(offset), escape(text)) for offset, text in table.entries()],
            justify=["right", "left"],
        )
        self._console.blank()

    # ------------------------------------------------------------------ #
    #  Symbols
    # ------------------------------------------------------------------ #

    def display_symbols(self, table: SymbolTable) -> None:
        self._console.section(f"Symbol Table {table.section}")
        if len(table) == 0:
            self._console.info(f"No {table.section} symbols.")
            self._console.blank()
            return

        limit = self._view.max_symbols
        shown = table.symbols[:limit] if limit > 0 else table.symbols

        tbl = Table(
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            show_lines=False,
            padding=(0, 1),
        )
        tbl.add_column("#", style="dim", justify="right")
        tbl.add_column("Value", justify="right")
        tbl.add_column("Kind")
        tbl.add_column("Size", justify="right")
        tbl.add_column("Type")
        tbl.add_column("Bind")
        tbl.add_column("Vis")
        tbl.add_column("Ndx", justify="right")
        tbl.add_column("Name", style="bold")

        for sym in shown:
            tbl.add_row(
                str(sym.index),
                _hex(sym.value.value),
                _VALUE_LABELS[sym.value.kind],
                str(sym.size),
                sym.type.name,
                sym.binding.name,
                sym.visibility.name,
                section_index_label(sym.section_index),
                escape(sym.name),
            )

        self._console.rich.print(tbl)
        if len(shown) < len(table):
            self._console.info(
                f"Showing {len(shown)} of {len(table)} symbols in {table.section}."
            )
        self._console.blank()
