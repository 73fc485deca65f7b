"""
Elfview -- ELF Object Inspector
================================

Elfview decodes the on-disk layout of 64-bit ELF object files into a
typed, immutable in-memory model and renders it for inspection.

Capabilities:
    - Identification block validation and class / byte-order dispatch
    - File header decoding with symbolic object type and machine
    - Section header table resolution, including the extended-index
      escape for the section-name string table
    - String tables addressed by byte offset
    - ``.symtab`` / ``.dynsym`` symbol tables with binding, type,
      visibility, special section indices and context-typed values
    - Program header type and flag decoding
    - Rich console and JSON reports

References:
    - TIS Committee. (1995). ELF Specification, Version 1.2.
    - System V Application Binary Interface, Edition 4.1.
"""

from elfview.core.errors import ElfError
from elfview.core.models import ElfObject
from elfview.parsers.elf_parser import ElfParser

__version__ = "0.1.0"
__all__ = [
    "ElfError",
    "ElfObject",
    "ElfParser",
]
