"""
JSON Report Exporter — writes a run summary with per-application outcomes.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

import aiofiles

from store_app_importer.models.result import ImportResult

logger = logging.getLogger(__name__)


class JSONReportExporter:
    """
    Writes one JSON document per run.

    Output structure:
        {
          "generated_at": "...",
          "total": 2, "succeeded": 1, "failed": 1,
          "results": [{...}, {...}]
        }
    """

    def __init__(self, path: Path):
        self.path = path

    def build_report(self, results: list[ImportResult]) -> dict:
        succeeded = sum(1 for r in results if r.succeeded)
        return {
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "total": len(results),
            "succeeded": succeeded,
            "failed": len(results) - succeeded,
            "results": [r.to_dict() for r in results],
        }

    async def export(self, results: list[ImportResult]) -> None:
        """Write the report, creating parent directories as needed."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(self.path, "w") as f:
            await f.write(json.dumps(self.build_report(results), indent=2))

        logger.info(f"[Report] Wrote {len(results)} result(s) to {self.path}")
