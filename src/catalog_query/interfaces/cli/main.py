import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import colorlog
import pandas as pd

from catalog_query import __version__ as _PACKAGE_VERSION
from catalog_query.config import get_preset, list_presets, load_raw_records, load_schema
from catalog_query.core.coercion import is_missing
from catalog_query.core.formatting import format_field_value
from catalog_query.core.items import CatalogItem, build_items, items_to_frame
from catalog_query.core.query import (
    GROUP_ORDERS,
    RangeCriterion,
    filter_items,
    flatten_key,
    group_by,
    paginate,
    sort_groups,
    sort_items,
)
from catalog_query.core.schemas import CatalogSchema
from catalog_query.statistics import aggregate_stats, catalog_stats, group_stats

DEFAULT_PRESET = "default-library"
DEFAULT_VALUE_FIELD = "word-count"
DEFAULT_DATE_FIELD = "year"


def setup_logging(
    verbose: bool = False, warnings_only: bool = False, errors_only: bool = False
) -> None:
    logger = logging.getLogger()
    for h in list(logger.handlers):
        logger.removeHandler(h)
    log_format = "%(asctime)s:%(levelname)s:%(name)s: %(message)s"
    log_colors = {
        "DEBUG": "cyan",
        "INFO": "green",
        "WARNING": "yellow",
        "ERROR": "red",
        "CRITICAL": "bold_red",
    }
    # stderr keeps stdout clean for JSON/CSV output
    stream_handler = colorlog.StreamHandler(sys.stderr)
    formatter = colorlog.ColoredFormatter(f"%(log_color)s{log_format}", log_colors=log_colors)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)
    if errors_only:
        logger.setLevel(logging.ERROR)
    elif warnings_only:
        logger.setLevel(logging.WARNING)
    else:
        logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def _resolve_schema(args: argparse.Namespace) -> Optional[CatalogSchema]:
    """Schema from --schema, else from --preset. Logs and returns None on failure."""
    try:
        if getattr(args, "schema", None):
            return load_schema(Path(args.schema))
        return get_preset(getattr(args, "preset", None) or DEFAULT_PRESET)
    except FileNotFoundError as e:
        logging.error("Schema file not found: %s", e)
    except ValueError as e:
        logging.error("Invalid schema: %s", e)
    return None


def _load_catalog(
    args: argparse.Namespace, schema: CatalogSchema
) -> Optional[Tuple[List[Dict[str, Any]], List[CatalogItem]]]:
    """Raw rows and built items from --records. Logs and returns None on failure."""
    records_path = Path(args.records)
    try:
        rows = load_raw_records(records_path)
    except FileNotFoundError as e:
        logging.error("Records file not found: %s", e)
        return None
    except ValueError as e:
        logging.error("Cannot read records: %s", e)
        return None
    items = build_items(rows, schema)
    logging.debug("Built %d items with schema %r", len(items), schema.catalog_name)
    return [raw for raw, _ in rows], items


def _warn_undeclared(schema: CatalogSchema, keys: List[str]) -> None:
    for key in keys:
        if key and not schema.has_field(key):
            logging.warning("Field '%s' is not declared in schema %r; every item reads it as unset", key, schema.catalog_name)


def _split_assignment(text: str, option: str) -> Tuple[str, str]:
    key, sep, value = text.partition("=")
    if not sep or not key.strip():
        raise ValueError(f"{option} expects key=value, got {text!r}")
    return key.strip(), value


def _parse_criteria(args: argparse.Namespace) -> Dict[str, Any]:
    """Turn --where/--range/--contains options into a criteria mapping.

    Raises:
        ValueError: If an option is not in ``key=value`` form.
    """
    criteria: Dict[str, Any] = {}
    for text in args.where or []:
        key, value = _split_assignment(text, "--where")
        criteria[key] = [v.strip() for v in value.split(",") if v.strip()]
    for text in args.range or []:
        key, value = _split_assignment(text, "--range")
        low, _, high = value.partition(":")
        criteria[key] = RangeCriterion(low.strip() or None, high.strip() or None)
    for text in args.contains or []:
        key, value = _split_assignment(text, "--contains")
        criteria[key] = value
    return criteria


def _display_frame(items: List[CatalogItem], schema: CatalogSchema) -> pd.DataFrame:
    """Tabular export with every schema column rendered as display text; unset cells are blank."""
    frame = items_to_frame(items, schema)
    for field in schema.fields:
        if field.key in frame.columns:
            frame[field.key] = frame[field.key].map(
                lambda v, f=field: "" if is_missing(v) else format_field_value(v, f, use_grouping=False)
            )
    return frame


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def cmd_stats(args: argparse.Namespace) -> int:
    """Print catalog statistics with completeness counters as JSON.

    Returns:
        0 on success, 1 if no records were loaded, 2 on input errors,
        3 on schema errors.
    """
    schema = _resolve_schema(args)
    if schema is None:
        return 3
    loaded = _load_catalog(args, schema)
    if loaded is None:
        return 2
    _, items = loaded
    if not items:
        logging.error("No records loaded from %s", args.records)
        return 1

    distributions = list(args.distribution or [])
    if not distributions and schema.core_fields.status_field:
        distributions = [schema.core_fields.status_field]
    _warn_undeclared(schema, [args.value_field, args.date_field] + distributions)

    stats = catalog_stats(items, args.value_field, args.date_field, distributions, schema)
    aggregate = aggregate_stats(items, args.value_field, args.date_field, schema)
    data = stats.to_dict()
    data["valid_value_count"] = aggregate.valid_value_count
    data["valid_date_count"] = aggregate.valid_date_count
    _print_json(data)
    logging.info(
        "%d items, %d with %s, %d with %s",
        aggregate.count,
        aggregate.valid_value_count,
        args.value_field,
        aggregate.valid_date_count,
        args.date_field,
    )
    return 0


def cmd_query(args: argparse.Namespace) -> int:
    """Filter, sort and page items; print full-object rows as JSON or CSV.

    Returns:
        0 on success (even with no matches), 1 if no records were loaded,
        2 on input errors, 3 on schema errors.
    """
    schema = _resolve_schema(args)
    if schema is None:
        return 3
    try:
        criteria = _parse_criteria(args)
    except ValueError as e:
        logging.error("%s", e)
        return 2
    loaded = _load_catalog(args, schema)
    if loaded is None:
        return 2
    _, items = loaded
    if not items:
        logging.error("No records loaded from %s", args.records)
        return 1

    _warn_undeclared(schema, list(criteria) + ([args.sort] if args.sort else []))
    matched = filter_items(items, criteria, schema)
    logging.info("%d of %d items match", len(matched), len(items))
    if args.sort:
        matched = sort_items(matched, args.sort, descending=args.desc, schema=schema)

    per_page = args.limit if args.limit and args.limit > 0 else 0
    page = paginate(matched, max(args.page, 1) - 1, per_page)

    if args.format == "csv":
        sys.stdout.write(_display_frame(page.items, schema).to_csv(index=False))
        return 0

    _print_json(
        {
            "total_items": page.total_items,
            "page": page.current_page + 1,
            "total_pages": page.total_pages,
            "items": [item.to_full_object(schema, json_safe=True) for item in page.items],
        }
    )
    return 0


def cmd_group(args: argparse.Namespace) -> int:
    """Group items by a field and print per-group statistics as JSON."""
    schema = _resolve_schema(args)
    if schema is None:
        return 3
    loaded = _load_catalog(args, schema)
    if loaded is None:
        return 2
    _, items = loaded
    if not items:
        logging.error("No records loaded from %s", args.records)
        return 1

    _warn_undeclared(schema, [args.field])
    groups = group_by(items, args.field, schema)
    output = []
    for key, members in sort_groups(groups, args.order):
        stats = group_stats(members, args.value_field, args.date_field, schema)
        output.append({"key": flatten_key(key), "count": len(members), "stats": stats.to_dict()})
    _print_json({"field": args.field, "order": args.order, "groups": output})
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Run data-quality checks over the built catalog.

    Returns:
        0 if validation passed, 1 if errors were found (warnings too with
        --strict) or no records were loaded, 2 on input errors, 3 on schema
        errors.
    """
    from catalog_query.validation import print_report, run_validation

    schema = _resolve_schema(args)
    if schema is None:
        return 3
    loaded = _load_catalog(args, schema)
    if loaded is None:
        return 2
    raw_rows, items = loaded
    if not items:
        logging.error("No records loaded from %s", args.records)
        return 1

    records_path = Path(args.records)
    report = run_validation(items, schema, raw_rows, records_path=records_path)
    print_report(report)

    if args.report_json:
        if args.report_json is True:
            report_path = records_path.with_name(f"{records_path.stem}_validation.json")
        else:
            report_path = Path(args.report_json)
        try:
            report_path.parent.mkdir(parents=True, exist_ok=True)
            with open(report_path, "w", encoding="utf-8") as f:
                f.write(report.to_json())
        except OSError as e:
            logging.error("Cannot write JSON report %s: %s", report_path, e)
            return 2
        logging.info("JSON report saved: %s", report_path)

    if report.has_errors(strict=args.strict):
        logging.error(
            "Validation found %d errors and %d warnings.",
            report.get_error_count(),
            report.get_warning_count(),
        )
        return 1
    return 0


def _add_catalog_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--records", required=True, help="YAML or JSON file holding a list of raw records")
    source = p.add_mutually_exclusive_group()
    source.add_argument("--schema", default=None, help="Schema YAML file")
    source.add_argument(
        "--preset",
        default=None,
        choices=list_presets(),
        help=f"Built-in schema to use when --schema is not given (default {DEFAULT_PRESET})",
    )


def _add_stats_fields(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--value-field",
        default=DEFAULT_VALUE_FIELD,
        help=f"Numeric field to total and average (default {DEFAULT_VALUE_FIELD})",
    )
    p.add_argument(
        "--date-field",
        default=DEFAULT_DATE_FIELD,
        help=f"Date or year field for the date range (default {DEFAULT_DATE_FIELD})",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="catalog-query",
        description=f"Catalog Query (v{_PACKAGE_VERSION})",
    )
    p.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    p.add_argument(
        "--warnings-only",
        action="store_true",
        help="Show only warnings and errors (overrides --verbose)",
    )
    p.add_argument(
        "--errors-only",
        action="store_true",
        help="Show only errors (overrides --warnings-only and --verbose)",
    )

    sub = p.add_subparsers(dest="command", required=True)

    p_stats = sub.add_parser("stats", help="Print catalog statistics as JSON")
    _add_catalog_args(p_stats)
    _add_stats_fields(p_stats)
    p_stats.add_argument(
        "--distribution",
        action="append",
        default=None,
        metavar="FIELD",
        help="Count items per value of FIELD (repeatable; defaults to the status field)",
    )
    p_stats.set_defaults(func=cmd_stats)

    p_query = sub.add_parser("query", help="Filter, sort and page items")
    _add_catalog_args(p_query)
    p_query.add_argument(
        "--where",
        action="append",
        metavar="KEY=V1,V2",
        help="Keep items whose KEY (or any of its array elements) is one of the values",
    )
    p_query.add_argument(
        "--range",
        action="append",
        metavar="KEY=MIN:MAX",
        help="Keep items whose KEY lies in the inclusive range; either bound may be empty",
    )
    p_query.add_argument(
        "--contains",
        action="append",
        metavar="KEY=TEXT",
        help="Keep items whose KEY contains TEXT (case-insensitive)",
    )
    p_query.add_argument("--sort", default=None, help="Field to sort by")
    p_query.add_argument("--desc", action="store_true", help="Sort descending")
    p_query.add_argument("--limit", type=int, default=0, help="Items per page (0 = all)")
    p_query.add_argument("--page", type=int, default=1, help="1-based page number (clamped into range)")
    p_query.add_argument("--format", choices=["json", "csv"], default="json", help="Output format")
    p_query.set_defaults(func=cmd_query)

    p_group = sub.add_parser("group", help="Group items and print per-group statistics")
    _add_catalog_args(p_group)
    _add_stats_fields(p_group)
    p_group.add_argument("--field", required=True, help="Field to group by (array fields fan out)")
    p_group.add_argument("--order", choices=list(GROUP_ORDERS), default="count-desc", help="Group order")
    p_group.set_defaults(func=cmd_group)

    p_validate = sub.add_parser("validate", help="Check records for data-quality problems")
    _add_catalog_args(p_validate)
    p_validate.add_argument("--strict", action="store_true", help="Treat warnings as errors")
    p_validate.add_argument(
        "--report-json",
        nargs="?",
        const=True,
        default=False,
        help="Write a JSON report (next to the records file, or at the given path)",
    )
    p_validate.set_defaults(func=cmd_validate)

    return p


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(
        verbose=bool(args.verbose),
        warnings_only=bool(getattr(args, "warnings_only", False)),
        errors_only=bool(getattr(args, "errors_only", False)),
    )
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
