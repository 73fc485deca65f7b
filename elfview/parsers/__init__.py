"""
Elfview Parsers
================

Decoding pipeline for 64-bit ELF objects.

- ``layout``     -- fixed-width raw records
- ``enums``      -- numeric code to symbolic category mappings
- ``strtab``     -- string tables
- ``sections``   -- section header table resolution
- ``symbols``    -- symbol table construction
- ``elf_parser`` -- the pipeline entry point
"""
