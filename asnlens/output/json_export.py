"""
JSON export for asnlens
"""

import json
from dataclasses import asdict
from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional, Union

from .. import __version__
from ..errors import CymruError
from ..models import AsInfoRecord, MergedResult


Record = Union[MergedResult, AsInfoRecord]


class JsonExporter:
    """
    Export lookup results to JSON format.

    Each target becomes one entry holding either its results or the
    error that stopped it.
    """

    def __init__(self):
        self.data_sources = []
        self.entries = []

    def add_data_source(self, source: str):
        """Record data source used"""
        if source not in self.data_sources:
            self.data_sources.append(source)

    def add_results(self, target: str, kind: str, records: list[Record]):
        """Record a successful lookup"""
        self.entries.append({
            "target": target,
            "type": kind,
            "results": [self._serialize_record(r) for r in records],
        })

    def add_error(self, target: str, kind: str, error: CymruError):
        """Record a failed lookup"""
        self.entries.append({
            "target": target,
            "type": kind,
            "error": {
                "kind": type(error).__name__,
                "message": str(error),
                "query": error.query,
            },
        })

    def export(self, output_path: Optional[Path] = None) -> dict:
        """
        Export collected entries to JSON.

        Args:
            output_path: Optional file path to write

        Returns:
            JSON-serializable dict
        """
        data = {
            "meta": {
                "version": __version__,
                "generator": "asnlens",
                "data_sources": self.data_sources or ["team_cymru"],
                "generated_at": datetime.now().isoformat(),
            },
            "lookups": self.entries,
        }

        if output_path:
            self._write_file(data, output_path)

        return data

    def _serialize_record(self, record: Record) -> dict:
        """Serialize a single record"""
        return {key: self._serialize_value(value) for key, value in asdict(record).items()}

    def _serialize_value(self, value: Any) -> Any:
        if isinstance(value, (datetime, date)):
            return value.isoformat()
        if value is None or isinstance(value, (int, str)):
            return value
        return str(value)

    def _write_file(self, data: dict, path: Path):
        """Write JSON to file"""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
