from __future__ import annotations

import csv
import json
import logging
import tempfile
import unicodedata
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .collection import ListingCollection


logger = logging.getLogger("abnb.export")

FORMATS = ("json", "csv")


def _is_relative_to(path: Path, base: Path) -> bool:
    try:
        path.relative_to(base)
        return True
    except ValueError:
        return False


def resolve_export_path(path_str: str, root: Path) -> Path:
    """Resolve an export target, keeping it under ``root`` or the temp dir."""

    if not path_str or not path_str.strip():
        raise ValueError("export path required")
    normalized = unicodedata.normalize("NFKC", path_str.strip())
    if ".." in Path(normalized).parts:
        raise ValueError("path traversal not allowed")

    root = Path(root).resolve()
    raw = Path(normalized)
    resolved = raw.resolve() if raw.is_absolute() else (root / raw).resolve()
    tmp_root = Path(tempfile.gettempdir()).resolve()
    if not any(_is_relative_to(resolved, base) for base in (root, tmp_root)):
        raise ValueError(f"export path outside allowed roots: {resolved}")
    return resolved


def neutralize_csv_field(value: Any) -> str:
    text = "" if value is None else str(value)
    if text.startswith(("=", "+", "-", "@")):
        return "'" + text
    return text


def listing_rows(listings: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    return [dict(item) for item in listings]


def build_export_payload(
    collection: ListingCollection,
    *,
    top_hosts_limit: Optional[int] = None,
    min_host_listings: Optional[int] = None,
) -> Dict[str, Any]:
    top_kwargs: Dict[str, int] = {}
    if top_hosts_limit is not None:
        top_kwargs["limit"] = top_hosts_limit
    if min_host_listings is not None:
        top_kwargs["min_host_listings"] = min_host_listings
    return {
        "data": listing_rows(collection.get_data()),
        "stats": collection.compute_stats().to_dict(),
        "ranking": [r.to_dict() for r in collection.compute_hosts_ranking()],
        "top_hosts": [h.to_dict() for h in collection.compute_top_hosts_by_rating(**top_kwargs)],
    }


class Exporter:
    name = ""

    def export(self, payload: Any, path: Path) -> Path:
        raise NotImplementedError


class JsonExporter(Exporter):
    name = "json"

    def __init__(self, indent: int = 2):
        self.indent = indent

    def export(self, payload: Any, path: Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload, indent=self.indent, default=str), encoding="utf-8")
        logger.info("wrote json export to %s", path)
        return path


class CsvExporter(Exporter):
    """Write listing rows as CSV.

    Accepts either a list of rows or an export payload carrying ``data``.
    Columns are the union of row keys in first-seen order.
    """

    name = "csv"

    def export(self, payload: Any, path: Path) -> Path:
        if isinstance(payload, Mapping):
            if "data" not in payload:
                raise ValueError("csv export needs listing rows")
            payload = payload["data"]
        rows = listing_rows(payload)

        fieldnames: List[str] = []
        for row in rows:
            for key in row:
                if key not in fieldnames:
                    fieldnames.append(key)

        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", newline="", encoding="utf-8") as handle:
            writer = csv.DictWriter(handle, fieldnames=fieldnames)
            writer.writeheader()
            for row in rows:
                writer.writerow({k: neutralize_csv_field(row.get(k)) for k in fieldnames})
        logger.info("wrote %d csv rows to %s", len(rows), path)
        return path


_EXPORTERS = {"json": JsonExporter, "csv": CsvExporter}


def exporter_for(path: Path, fmt: Optional[str] = None) -> Exporter:
    if fmt is None:
        fmt = Path(path).suffix.lower().lstrip(".") or "json"
        if fmt not in _EXPORTERS:
            fmt = "json"
    if fmt not in _EXPORTERS:
        raise ValueError(f"unsupported export format: {fmt}")
    return _EXPORTERS[fmt]()
