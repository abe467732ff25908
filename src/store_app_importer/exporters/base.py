"""
Exporter Protocol — Base interface for import result exporters.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from store_app_importer.models.result import ImportResult


@runtime_checkable
class ResultExporter(Protocol):
    """
    Protocol that all result exporters must implement.

    Exporters receive the full list of ImportResult objects of one run and
    persist them in their respective format.
    """

    async def export(self, results: list[ImportResult]) -> None:
        """Export the results of a run."""
        ...
