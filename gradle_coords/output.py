"""
Output formatters for artifact records.

Provides different output formats: CSV, JSON and text.
"""

import csv
import io
import json
from enum import Enum
from typing import Dict, List, Optional

from gradle_coords.exceptions import ConfigurationError
from gradle_coords.parser import ArtifactRecord

CSV_HEADER = ["group", "name", "version"]


class OutputFormat(str, Enum):
    """Supported output formats."""

    CSV = "csv"
    JSON = "json"
    TEXT = "text"


class OutputFormatter:
    """Base class for output formatters."""

    def format(self, records: List[ArtifactRecord], statistics: Optional[Dict] = None) -> str:
        """
        Format the artifact records.

        Args:
            records: Records in first-seen order
            statistics: Optional dependency graph statistics

        Returns:
            Formatted string
        """
        raise NotImplementedError


class CSVFormatter(OutputFormatter):
    """CSV-based output formatter."""

    def format(self, records: List[ArtifactRecord], statistics: Optional[Dict] = None) -> str:
        """
        Format records as CSV.

        Columns: group, name, version

        Args:
            records: Records in first-seen order
            statistics: Not used in CSV

        Returns:
            Formatted CSV string
        """
        output = io.StringIO()
        writer = csv.writer(output, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for record in records:
            writer.writerow([record.group, record.name, record.version])
        return output.getvalue()


class JSONFormatter(OutputFormatter):
    """JSON-based output formatter."""

    def format(self, records: List[ArtifactRecord], statistics: Optional[Dict] = None) -> str:
        output = {
            "artifacts": [record.to_dict() for record in records],
            "total_artifacts": len(records),
        }
        if statistics:
            output["statistics"] = statistics
        return json.dumps(output, indent=2) + "\n"


class TextFormatter(OutputFormatter):
    """Text-based output formatter."""

    def format(self, records: List[ArtifactRecord], statistics: Optional[Dict] = None) -> str:
        lines = []
        lines.append("=" * 80)
        lines.append("Dependencies")
        lines.append("=" * 80)

        if statistics:
            lines.append(f"Total Artifacts: {statistics.get('total_artifacts', 'N/A')}")
            lines.append(f"Direct Dependencies: {statistics.get('direct_dependencies', 'N/A')}")
            lines.append(f"Maximum Depth: {statistics.get('max_depth', 'N/A')}")
            lines.append("")

        for idx, record in enumerate(records, 1):
            lines.append(f"{idx}. {record.coordinate}")

        return "\n".join(lines) + "\n"


_FORMATTERS = {
    OutputFormat.CSV: CSVFormatter,
    OutputFormat.JSON: JSONFormatter,
    OutputFormat.TEXT: TextFormatter,
}


def get_formatter(format_type: str) -> OutputFormatter:
    """
    Get a formatter by type name.

    Args:
        format_type: Format type ('csv', 'json' or 'text')

    Returns:
        OutputFormatter instance

    Raises:
        ConfigurationError: If format type is not supported
    """
    try:
        output_format = OutputFormat(format_type.lower())
    except ValueError as exc:
        raise ConfigurationError(
            f"Unsupported format: {format_type}. "
            f"Supported formats: {', '.join(fmt.value for fmt in OutputFormat)}"
        ) from exc
    return _FORMATTERS[output_format]()
