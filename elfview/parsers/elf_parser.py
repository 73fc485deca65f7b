"""
ELF Object Parser
==================

Entry point of the decoding pipeline.  Turns a file (or an in-memory
buffer) into an immutable :class:`~elfview.core.models.ElfObject`.

Pipeline, each stage consuming the output of the previous ones:

1. Identification block (always first; it is class- and byte-order
   independent): magic check, class dispatch, byte order.
2. ``Elf64_Ehdr``.
3. Section header table and section-name string table.
4. ``.strtab`` / ``.dynstr`` string tables.
5. ``.symtab`` / ``.dynsym`` symbol tables, for REL, EXEC and DYN files.
6. Program headers (type and flags only).

Only 64-bit objects are decoded.  Both byte orders are supported; the
order recorded in ``EI_DATA`` is threaded through every record decode.

Usage::

    parser = ElfParser()
    obj = parser.load("/usr/bin/ls")
    for sym in obj.dynsym.symbols:
        print(sym.name, sym.value.kind)

References:
    - TIS Committee. (1995). Tool Interface Standard (TIS) Executable and
      Linkable Format (ELF) Specification, Version 1.2.
    - System V Application Binary Interface, Edition 4.1.
"""

from __future__ import annotations

from pathlib import Path

from shared.config import ElfviewConfig
from shared.logger import ElfviewLogger

from elfview.core.errors import (
    BadMagicError,
    ShortBufferError,
    UnknownClassError,
    UnknownDataEncodingError,
    UnsupportedClassError,
)
from elfview.core.models import (
    DataEncoding,
    ElfClass,
    ElfObject,
    FileHeaderView,
    IdentView,
    ProgramHeader,
    Section,
    SymbolTable,
)
from elfview.core.source import ByteSource
from elfview.parsers.enums import (
    decode_class,
    decode_data_encoding,
    decode_object_type,
    decode_section_index,
    decode_segment_flags,
    decode_segment_type,
    machine_name,
)
from elfview.parsers.layout import (
    BIG_ENDIAN,
    LITTLE_ENDIAN,
    FileHeaderRecord,
    IdentRecord,
    ProgramHeaderRecord,
)
from elfview.parsers.sections import SectionTableResolver, load_string_table
from elfview.parsers.symbols import SYMBOL_FILE_TYPES, SymbolTableBuilder

# e_phnum value meaning "the real count is in sh_info of section 0"
PN_XNUM: int = 0xFFFF

_ENDIAN: dict[DataEncoding, str] = {
    DataEncoding.LSB: LITTLE_ENDIAN,
    DataEncoding.MSB: BIG_ENDIAN,
}


class ElfParser:
    """Decodes 64-bit ELF objects.

    Args:
        config: Elfview configuration.  Defaults are used if not provided.
        logger: Logger instance.  A new one is created if not provided.
    """

    def __init__(
        self,
        config: ElfviewConfig | None = None,
        logger: ElfviewLogger | None = None,
    ) -> None:
        self._config: ElfviewConfig = config or ElfviewConfig()
        self._logger: ElfviewLogger = logger or ElfviewLogger("parser")

    # ------------------------------------------------------------------ #
    #  Public interface
    # ------------------------------------------------------------------ #

    def load(self, path: str | Path) -> ElfObject:
        """Decode the file at *path*.

        The file is mapped for the duration of the call only.

        Raises:
            OSError: If the file cannot be opened.
            ElfError: On any decoding failure.
        """
        with self._logger.timed(f"load {path}"):
            with ByteSource.open(path, use_mmap=self._config.view.use_mmap) as source:
                return self.parse_source(source)

    def parse(self, data: bytes, name: str = "<memory>") -> ElfObject:
        """Decode an in-memory image."""
        with ByteSource(data, name=name) as source:
            return self.parse_source(source)

    def parse_source(self, source: ByteSource) -> ElfObject:
        """Identify *source* and dispatch on its class."""
        ident = self.identify(source)
        elf_class = decode_class(ident.elf_class)

        if elf_class is ElfClass.ELF64:
            return self._load_64(source, ident)
        if elf_class is ElfClass.ELF32:
            raise UnsupportedClassError(32)
        raise UnknownClassError(ident.elf_class)

    @staticmethod
    def identify(source: ByteSource) -> IdentRecord:
        """Decode and validate the identification block.

        Raises:
            BoundsError: If the input is shorter than 16 bytes.
            BadMagicError: If the input does not start with ``\\x7fELF``.
        """
        ident = IdentRecord.read(source, 0)
        if not ident.magic_ok:
            raise BadMagicError(ident.magic)
        return ident

    @staticmethod
    def byte_order(ident: IdentRecord) -> str:
        """``struct`` byte-order prefix for ``EI_DATA``.

        Raises:
            UnknownDataEncodingError: If ``EI_DATA`` is not LSB or MSB.
        """
        encoding = decode_data_encoding(ident.data)
        if encoding not in _ENDIAN:
            raise UnknownDataEncodingError(ident.data)
        return _ENDIAN[encoding]

    # ------------------------------------------------------------------ #
    #  64-bit pipeline
    # ------------------------------------------------------------------ #

    def _load_64(self, source: ByteSource, ident: IdentRecord) -> ElfObject:
        endian = self.byte_order(ident)
        log = self._logger

        with log.operation("header"):
            header = FileHeaderRecord.read(source, 0, endian)
            header_view = self._header_view(header)
            log.debug(
                "%s %s, %d sections at 0x%x",
                header_view.type.kind.value,
                header_view.machine_name,
                header.shnum,
                header.shoff,
            )

        with log.operation("sections"):
            resolver = SectionTableResolver(
                logger=log,
                name_placeholder=self._config.view.name_placeholder,
            )
            shstrtab, sections = resolver.resolve(source, header, endian)

        with log.operation("strings"):
            strtab = load_string_table(source, sections, ".strtab")
            dynstr = load_string_table(source, sections, ".dynstr")

        with log.operation("symbols"):
            if header_view.type.kind in SYMBOL_FILE_TYPES:
                builder = SymbolTableBuilder(
                    source, sections, header_view.type, endian, logger=log
                )
                symtab = builder.build(".symtab", strtab)
                dynsym = builder.build(".dynsym", dynstr)
            else:
                log.debug(
                    "Object type %s has no symbol values; skipping symbol tables",
                    header_view.type.kind.value,
                )
                symtab = SymbolTable(section=".symtab")
                dynsym = SymbolTable(section=".dynsym")

        with log.operation("segments"):
            program_headers = self._program_headers(source, header, sections, endian)

        return ElfObject(
            path=source.name,
            size=len(source),
            header=header_view,
            shstrtab=shstrtab,
            sections=sections,
            strtab=strtab,
            symtab=symtab,
            dynstr=dynstr,
            dynsym=dynsym,
            program_headers=program_headers,
        )

    @staticmethod
    def _header_view(header: FileHeaderRecord) -> FileHeaderView:
        ident = header.ident
        return FileHeaderView(
            ident=IdentView(
                magic=ident.magic,
                elf_class=decode_class(ident.elf_class),
                data=decode_data_encoding(ident.data),
                version=ident.version,
                osabi=ident.osabi,
                abiversion=ident.abiversion,
                nident=ident.nident,
            ),
            type=decode_object_type(header.type),
            machine=header.machine,
            machine_name=machine_name(header.machine),
            version=header.version,
            entry=header.entry,
            phoff=header.phoff,
            shoff=header.shoff,
            flags=header.flags,
            ehsize=header.ehsize,
            phentsize=header.phentsize,
            phnum=header.phnum,
            shentsize=header.shentsize,
            shnum=header.shnum,
            shstrndx=decode_section_index(header.shstrndx),
        )

    def _program_headers(
        self,
        source: ByteSource,
        header: FileHeaderRecord,
        sections: tuple[Section, ...],
        endian: str,
    ) -> tuple[ProgramHeader, ...]:
        if header.phoff == 0:
            return ()

        count = header.phnum
        if count == PN_XNUM and sections:
            count = sections[0].info

        entsize = header.phentsize
        if count and entsize < ProgramHeaderRecord.record_size():
            raise ShortBufferError(
                "ProgramHeaderRecord", ProgramHeaderRecord.record_size(), entsize
            )
        source.check(header.phoff, count * entsize, "program header table")

        result: list[ProgramHeader] = []
        for index in range(count):
            rec = ProgramHeaderRecord.decode(
                source.slice(header.phoff + index * entsize, entsize), endian
            )
            result.append(ProgramHeader(
                index=index,
                type=decode_segment_type(rec.type),
                flags=decode_segment_flags(rec.flags),
                offset=rec.offset,
                vaddr=rec.vaddr,
                paddr=rec.paddr,
                filesz=rec.filesz,
                memsz=rec.memsz,
                align=rec.align,
            ))
        self._logger.debug("Decoded %d program headers", len(result))
        return tuple(result)
