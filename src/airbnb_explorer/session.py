from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .coerce import parse_number
from .collection import ListingCollection
from .exporters import build_export_payload, exporter_for, resolve_export_path
from .settings import Settings, get_settings


logger = logging.getLogger("abnb.session")

MENU = (
    "\nOptions:\n"
    "1. Filter listings\n"
    "2. Compute statistics\n"
    "3. Compute hosts ranking\n"
    "4. Top hosts by rating\n"
    "5. Reset filters\n"
    "6. Export current data\n"
    "7. Exit"
)

FILTER_PROMPTS = (
    ("price", "Max price (or leave blank): "),
    ("bedrooms", "Exact number of bedrooms (or leave blank): "),
    ("review_scores_rating", "Minimum review score (or leave blank): "),
)


def _dumps(value: Any) -> str:
    return json.dumps(value, indent=2, default=str)


class Session:
    """Menu-driven exploration over a ListingCollection.

    Each step rebinds ``self.collection`` to the value the operation returns,
    so earlier values stay valid for whoever still holds them.
    """

    def __init__(
        self,
        collection: ListingCollection,
        *,
        settings: Optional[Settings] = None,
        input_fn: Callable[[str], str] = input,
        output_fn: Callable[[str], None] = print,
    ):
        self.collection = collection
        self.settings = settings or get_settings()
        self._input = input_fn
        self._output = output_fn

    def ask_criteria(self) -> Dict[str, float]:
        criteria: Dict[str, float] = {}
        for key, prompt in FILTER_PROMPTS:
            answer = parse_number(self._input(prompt))
            if answer.ok:
                criteria[key] = answer.value
        return criteria

    def do_filter(self) -> None:
        criteria = self.ask_criteria()
        self.collection = self.collection.filter(criteria)
        self._output(
            f"Filter applied. {len(self.collection)} of "
            f"{self.collection.original_count} listings in view."
        )

    def do_stats(self) -> None:
        self._output("Statistics: " + _dumps(self.collection.compute_stats().to_dict()))

    def do_ranking(self) -> None:
        ranking = [r.to_dict() for r in self.collection.compute_hosts_ranking()]
        self._output("Hosts Ranking: " + _dumps(ranking))

    def do_top_hosts(self) -> None:
        top = self.collection.compute_top_hosts_by_rating(
            limit=self.settings.top_hosts_limit,
            min_host_listings=self.settings.min_host_listings,
        )
        self._output("Top Hosts: " + _dumps([h.to_dict() for h in top]))

    def do_reset(self) -> None:
        self.collection = self.collection.reset_filters()
        self._output(f"Filters reset. {len(self.collection)} listings in view.")

    def do_export(self) -> None:
        filename = self._input("Enter export filename: ").strip()
        try:
            path = resolve_export_path(filename, self.settings.export_root)
            payload = build_export_payload(
                self.collection,
                top_hosts_limit=self.settings.top_hosts_limit,
                min_host_listings=self.settings.min_host_listings,
            )
            exporter_for(path).export(payload, path)
        except (ValueError, OSError) as exc:
            logger.warning("export to %r failed: %s", filename, exc)
            self._output(f"Export failed: {exc}")
            return
        self._output(f"Results exported to {Path(path)}")

    def run(self) -> ListingCollection:
        actions = {
            "1": self.do_filter,
            "2": self.do_stats,
            "3": self.do_ranking,
            "4": self.do_top_hosts,
            "5": self.do_reset,
            "6": self.do_export,
        }
        while True:
            self._output(MENU)
            try:
                answer = self._input("Select an option: ").strip()
                if answer == "7":
                    break
                action = actions.get(answer)
                if action is None:
                    self._output("Invalid option.")
                    continue
                action()
            except EOFError:
                break
        return self.collection
