"""
Elfview Output
===============

Rendering of decoded objects.

- ``console`` -- Rich-based terminal report
- ``report``  -- JSON report generation
"""

from elfview.output.console import ElfviewConsoleOutput
from elfview.output.report import ElfviewReportGenerator

__all__ = [
    "ElfviewConsoleOutput",
    "ElfviewReportGenerator",
]
