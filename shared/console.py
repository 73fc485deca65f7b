"""
Elfview Console Interface
==========================

Rich-powered console abstraction used by the report renderer and the
CLI.  Wraps :class:`rich.console.Console` with a shared theme and a few
helpers for section rules, severity-coloured messages and tables.

References:
    - Rich library: https://github.com/Textualize/rich
"""

from __future__ import annotations

from typing import Any, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

_ELFVIEW_THEME = Theme(
    {
        "elfview.section": "bold bright_magenta",
        "elfview.success": "bold green",
        "elfview.warning": "bold yellow",
        "elfview.error": "bold red",
        "elfview.info": "bold bright_blue",
        "elfview.dim": "dim white",
        "elfview.highlight": "bold bright_white",
        "elfview.addr": "bright_cyan",
        "elfview.name": "bold",
    }
)


class ElfviewConsole:
    """Themed console shared by every elfview output.

    Usage::

        con = ElfviewConsole()
        con.section("Sections")
        con.table("Sections", ["#", "Name"], rows)
        con.error("not an ELF file")
    """

    def __init__(
        self,
        *,
        quiet: bool = False,
        record: bool = False,
        stderr: bool = False,
        width: int | None = None,
    ) -> None:
        """Initialise the console.

        Args:
            quiet:  Suppress all output.
            record: Enable Rich recording for text / HTML export.
            stderr: Write to stderr instead of stdout.
            width:  Fixed width; ``None`` lets Rich detect the terminal.
        """
        self._console = Console(
            theme=_ELFVIEW_THEME,
            quiet=quiet,
            record=record,
            stderr=stderr,
            width=width,
            highlight=False,
        )

    @property
    def rich(self) -> Console:
        """Direct access to the underlying Rich Console instance."""
        return self._console

    # ------------------------------------------------------------------ #
    #  Section header
    # ------------------------------------------------------------------ #

    def section(self, title: str) -> None:
        """Print a horizontal rule titled *title*."""
        self._console.rule(
            f"  {title}  ",
            style="elfview.section",
            characters="─",
        )
        self._console.print()

    # ------------------------------------------------------------------ #
    #  Message helpers (severity-coloured)
    # ------------------------------------------------------------------ #

    def success(self, message: str) -> None:
        self._console.print(
            f"[elfview.success][✔] SUCCESS:[/elfview.success] {escape(message)}"
        )

    def warning(self, message: str) -> None:
        self._console.print(
            f"[elfview.warning][⚠] WARNING:[/elfview.warning] {escape(message)}"
        )

    def error(self, message: str) -> None:
        self._console.print(
            f"[elfview.error][✘] ERROR:[/elfview.error] {escape(message)}",
        )

    def info(self, message: str) -> None:
        self._console.print(
            f"[elfview.info][ℹ] INFO:[/elfview.info] {escape(message)}"
        )

    # ------------------------------------------------------------------ #
    #  Table display
    # ------------------------------------------------------------------ #

    def table(
        self,
        title: str,
        columns: Sequence[str],
        rows: Sequence[Sequence[Any]],
        *,
        caption: str | None = None,
        justify: Sequence[str] | None = None,
    ) -> None:
        """Render a styled Rich table.

        Args:
            title:    Table title.
            columns:  Column header labels.
            rows:     Row tuples; each cell is stringified.
            caption:  Optional footer caption.
            justify:  Optional per-column justification
                      (``"left"``, ``"right"``, ``"center"``).
        """
        tbl = Table(
            title=title,
            caption=caption,
            border_style="bright_cyan",
            header_style="bold bright_magenta",
            show_lines=False,
            padding=(0, 1),
        )
        for idx, col_name in enumerate(columns):
            just = justify[idx] if justify and idx < len(justify) else "left"
            tbl.add_column(col_name, justify=just)  # type: ignore[arg-type]

        for row in rows:
            tbl.add_row(*(str(cell) for cell in row))

        self._console.print(tbl)

    # ------------------------------------------------------------------ #
    #  Utility
    # ------------------------------------------------------------------ #

    def print(self, *args: Any, **kwargs: Any) -> None:
        """Proxy to :meth:`rich.console.Console.print`."""
        self._console.print(*args, **kwargs)

    def blank(self, count: int = 1) -> None:
        for _ in range(count):
            self._console.print()

    def divider(self, style: str = "dim") -> None:
        self._console.rule(style=style)

    def export_text(self) -> str:
        """Export recorded output as plain text (requires ``record=True``)."""
        return self._console.export_text()
