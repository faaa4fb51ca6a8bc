import argparse
import json
import logging
import sys

from .collection import ListingCollection
from .exporters import FORMATS, build_export_payload, exporter_for, resolve_export_path
from .loader import load_collection
from .session import Session
from .settings import get_settings

REPORTS = ("stats", "ranking", "top-hosts", "data", "all")


def build_parser():
    parser = argparse.ArgumentParser(
        description="Explore short-term rental listings from a CSV export",
    )

    parser.add_argument("csv_path", help="Path to the listings CSV file")

    parser.add_argument(
        "--price",
        type=float,
        default=None,
        help="Maximum price, inclusive",
    )
    parser.add_argument(
        "--bedrooms",
        type=float,
        default=None,
        help="Exact number of bedrooms",
    )
    parser.add_argument(
        "--min-rating",
        dest="review_scores_rating",
        type=float,
        default=None,
        help="Minimum review score, inclusive",
    )

    parser.add_argument(
        "--report",
        choices=REPORTS,
        default=None,
        help="Print a report instead of starting the interactive menu",
    )
    parser.add_argument(
        "--interactive",
        action="store_true",
        help="Start the interactive menu after applying any filter flags",
    )

    parser.add_argument(
        "--output",
        default=None,
        help="Write the report to a file (path)",
    )
    parser.add_argument(
        "--format",
        choices=FORMATS,
        default=None,
        help="Output format for --output (defaults to the file suffix)",
    )

    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, etc.)",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        default=None,
        help="Emit one JSON line per executed operation",
    )
    return parser


def build_report(collection: ListingCollection, report: str, settings):
    if report == "stats":
        return collection.compute_stats().to_dict()
    if report == "ranking":
        return [r.to_dict() for r in collection.compute_hosts_ranking()]
    if report == "top-hosts":
        top = collection.compute_top_hosts_by_rating(
            limit=settings.top_hosts_limit,
            min_host_listings=settings.min_host_listings,
        )
        return [h.to_dict() for h in top]
    if report == "data":
        return [dict(item) for item in collection.get_data()]
    return build_export_payload(
        collection,
        top_hosts_limit=settings.top_hosts_limit,
        min_host_listings=settings.min_host_listings,
    )


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = get_settings()

    logging.basicConfig(
        level=(args.log_level or settings.log_level).upper(),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    log_json = settings.log_json if args.log_json is None else args.log_json

    def emit(op, **fields):
        if log_json:
            print(json.dumps({"op": op, **fields}))

    collection = load_collection(args.csv_path)
    emit("load", count=collection.original_count)

    criteria = {
        key: value
        for key, value in (
            ("price", args.price),
            ("bedrooms", args.bedrooms),
            ("review_scores_rating", args.review_scores_rating),
        )
        if value is not None
    }
    if criteria:
        collection = collection.filter(criteria)
        emit("filter", criteria=criteria, count=len(collection))

    interactive = args.interactive or (args.report is None and sys.stdin.isatty())
    if interactive:
        Session(collection, settings=settings).run()
        return

    report = args.report or "all"
    payload = build_report(collection, report, settings)
    emit("report", report=report, count=len(collection))

    if args.output:
        output_path = resolve_export_path(args.output, settings.export_root)
        exporter = exporter_for(output_path, args.format)
        if exporter.name == "csv" and report not in ("data", "all"):
            parser.error("csv output only applies to the data and all reports")
        exporter.export(payload, output_path)
        emit("export", path=str(output_path), format=exporter.name)
    else:
        print(json.dumps(payload, indent=2, default=str))


def _safe_main():
    try:
        main()
    except SystemExit:
        raise
    except Exception as exc:
        print(json.dumps({"error": str(exc)}))
        raise SystemExit(1)


if __name__ == "__main__":
    _safe_main()
