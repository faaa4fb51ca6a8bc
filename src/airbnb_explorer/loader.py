from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Dict, List, Union

from .collection import ListingCollection


logger = logging.getLogger("abnb.loader")


class LoaderError(ValueError):
    """Raised when a listings file cannot be read as a CSV table."""


def load_listings(path: Union[str, Path], *, encoding: str = "utf-8-sig") -> List[Dict[str, str]]:
    """Read a listings CSV into one dict per row, keyed by header.

    Values stay as text; numeric interpretation happens at query time.
    Rows with no non-empty cell are skipped.
    """

    csv_path = Path(path)
    if not csv_path.is_file():
        raise LoaderError(f"listings file not found: {csv_path}")

    records: List[Dict[str, str]] = []
    try:
        with csv_path.open(encoding=encoding, newline="") as handle:
            reader = csv.DictReader(handle)
            if not reader.fieldnames:
                raise LoaderError(f"listings file has no header row: {csv_path}")
            for row in reader:
                if not any((value or "").strip() for value in row.values() if isinstance(value, str)):
                    continue
                # Overflow cells from ragged rows land under the None key.
                row.pop(None, None)
                records.append({k: ("" if v is None else v) for k, v in row.items()})
    except UnicodeDecodeError as exc:
        raise LoaderError(f"listings file is not valid {encoding}: {csv_path}") from exc

    logger.info("loaded %d listings from %s", len(records), csv_path)
    return records


def load_collection(path: Union[str, Path], *, encoding: str = "utf-8-sig") -> ListingCollection:
    return ListingCollection.from_records(load_listings(path, encoding=encoding))
