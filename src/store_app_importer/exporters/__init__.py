"""Export backends for import results."""

from store_app_importer.exporters.base import ResultExporter
from store_app_importer.exporters.json_report import JSONReportExporter

__all__ = ["ResultExporter", "JSONReportExporter"]
