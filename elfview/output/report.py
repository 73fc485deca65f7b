"""
Elfview Report Generator
=========================

Serialises a decoded :class:`ElfObject` to JSON.  The document embeds the
pydantic dump of the object under ``"object"``; string tables are listed
as ``[offset, string]`` pairs rather than raw bytes.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from elfview.core.models import ElfObject

REPORT_TYPE: str = "elfview_object"
REPORT_VERSION: str = "1.0.0"


class ElfviewReportGenerator:
    """Generate JSON reports from decoded objects.

    Usage::

        generator = ElfviewReportGenerator()
        text = generator.to_json(obj)
        generator.generate_json(obj, "report.json")
    """

    def build(self, obj: ElfObject) -> dict[str, Any]:
        """Return the report as plain JSON-compatible data."""
        return {
            "report_type": REPORT_TYPE,
            "version": REPORT_VERSION,
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "summary": {
                "path": obj.path,
                "size": obj.size,
                "type": obj.header.type.kind.value,
                "machine": obj.header.machine_name,
                "sections": len(obj.sections),
                "symtab_symbols": len(obj.symtab),
                "dynsym_symbols": len(obj.dynsym),
                "program_headers": len(obj.program_headers),
            },
            "object": obj.model_dump(mode="json"),
        }

    def to_json(self, obj: ElfObject, indent: int | None = 2) -> str:
        return json.dumps(self.build(obj), indent=indent)

    def generate_json(self, obj: ElfObject, output_path: str | Path) -> str:
        """Write the JSON report to *output_path*.

        Returns:
            The absolute path of the generated report.
        """
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json(obj), encoding="utf-8")
        return str(path.resolve())
