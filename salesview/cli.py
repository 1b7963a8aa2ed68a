#!/usr/bin/env python3
"""
Sales View CLI — summaries, drill-down lists, exports, and the API server.

USAGE:
  python -m salesview.cli summary sales.csv                         # KPI summary
  python -m salesview.cli summary sales.csv --divisions "FOOD,DRINKS"
  python -m salesview.cli summary sales.csv --search cola

  python -m salesview.cli drilldown sales.csv pareto_brands         # One card's list
  python -m salesview.cli drilldown sales.csv new_items --limit 100

  python -m salesview.cli export sales.csv                          # Summary workbook
  python -m salesview.cli export sales.csv --view lost_items        # One list as CSV

  python -m salesview.cli serve                                     # Start API server
  python -m salesview.cli serve --port 8000
"""
from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from salesview.config import DATA_SOURCE, EXPORTS_FOLDER
from salesview.data.loader import CsvParseError, MissingColumnsError
from salesview.data.store import DataStore
from salesview.data.schemas import DimensionKind, FilterState
from salesview.analytics.common import format_growth, format_number, format_number_abbreviated
from salesview.analytics.drilldown import DRILLDOWN_VIEWS, drilldown


def _build_filters(args) -> FilterState | None:
    """Build a FilterState from comma-separated CLI args."""
    values = {}
    for kind in DimensionKind:
        raw = getattr(args, kind.plural, None) or ""
        values[kind.plural] = tuple(v.strip() for v in raw.split(",") if v.strip())
    filters = FilterState(**values, search=getattr(args, "search", None) or "")
    return None if filters.is_empty else filters


def _load(args) -> DataStore:
    source = args.source or DATA_SOURCE
    if not source:
        print("  No data source: pass a CSV path or set SALESVIEW_DATA_SOURCE")
        sys.exit(2)
    try:
        return DataStore().load(source)
    except (MissingColumnsError, CsvParseError) as exc:
        print(f"  {exc}")
        sys.exit(1)
    except OSError as exc:
        print(f"  Could not read {source}: {exc}")
        sys.exit(1)


def _banner(title: str) -> None:
    print("\n" + "=" * 70)
    print(f"  SALES VIEW — {title}")
    print("=" * 70)


def cmd_summary(args):
    """Print the KPI summary for the (optionally filtered) data."""
    store = _load(args)
    snap = store.snapshot(_build_filters(args))
    _banner("SUMMARY")

    if snap.is_empty:
        print("\n  No rows match the current filters.\n")
        return

    print(f"\n  Rows:            {snap.row_count:,}")
    print(f"  2024 Sales:      ${format_number(snap.total_sales_2024, 2)}")
    print(f"  2025 Sales:      ${format_number(snap.total_sales_2025, 2)}")
    print(f"  Growth:          {format_growth(snap.sales_growth_percentage)}")
    print(f"\n  {'':<10}{'2024':>10}{'2025':>10}")
    print(f"  {'Branches':<10}{snap.branch_count_2024:>10,}{snap.branch_count_2025:>10,}")
    print(f"  {'Brands':<10}{snap.brand_count_2024:>10,}{snap.brand_count_2025:>10,}")
    print(f"  {'Items':<10}{snap.item_count_2024:>10,}{snap.item_count_2025:>10,}")

    print("\n  Pareto (top 20% share of 2025 sales):")
    for label, result in (("Branches", snap.pareto.branches), ("Brands", snap.pareto.brands),
                          ("Items", snap.pareto.items)):
        print(f"    {label:<10} top {result.top_count:>5,} of {result.total_contributors:>6,}"
              f"  ->  {result.sales_percent:.1f}%")

    print("\n  New / lost:")
    print(f"    New brands   {snap.new_entities.brands.count:>6,}  "
          f"{format_number_abbreviated(snap.new_entities.brands.sales):>10}")
    print(f"    Lost brands  {snap.lost_entities.brands.count:>6,}  "
          f"{format_number_abbreviated(snap.lost_entities.brands.sales):>10}")
    print(f"    New items    {snap.new_entities.items.count:>6,}  "
          f"{format_number_abbreviated(snap.new_entities.items.sales):>10}")
    print(f"    Lost items   {snap.lost_entities.items.count:>6,}  "
          f"{format_number_abbreviated(snap.lost_entities.items.sales):>10}")

    if snap.top_division is not None:
        print(f"\n  Top division: {snap.top_division.name} "
              f"({format_number_abbreviated(snap.top_division.sales2025)})")
    print()


def cmd_drilldown(args):
    """Print one drill-down list."""
    store = _load(args)
    listing = drilldown(store.snapshot(_build_filters(args)), args.view)
    _banner(listing["title"].upper())

    records = listing["records"]
    print(f"\n  {len(records):,} entries\n")
    for i, rec in enumerate(records[:args.limit], 1):
        label = f"{rec['code']}  {rec['name']}" if rec.get("code") else rec["name"]
        if "growth" in rec:
            print(f"  {i:<5}{label[:48]:<50}{format_number(rec['sales2024'], 2):>16}"
                  f"{format_number(rec['sales2025'], 2):>16}  {format_growth(rec['growth'])}")
        else:
            value = rec.get("sales2025", rec.get("sales2024", 0.0))
            print(f"  {i:<5}{label[:48]:<50}{format_number(value, 2):>16}")

    rate = listing["performance_rate"]
    if rate:
        print(f"\n  {rate['label']}: {rate['rate']:.1f}% ({rate['sold']:,} of {rate['total']:,} {rate['unit']})")
    print()


def cmd_export(args):
    """Write the summary workbook, or one list as CSV."""
    from salesview.reports.summary_report import generate_excel, listing_csv

    store = _load(args)
    filters = _build_filters(args)
    out_dir = Path(args.output) if args.output else EXPORTS_FOLDER
    out_dir.mkdir(parents=True, exist_ok=True)

    if args.view:
        out = out_dir / f"{args.view}.csv"
        out.write_text(listing_csv(store, args.view, filters), encoding="utf-8")
    else:
        out = generate_excel(store, out_dir / "Sales_Summary.xlsx", filters)
    print(f"\n  Saved: {out}\n")


def cmd_serve(args):
    """Start the API server."""
    import uvicorn
    print(f"\nStarting Sales View API on port {args.port}...")
    uvicorn.run("salesview.main:app", host="0.0.0.0", port=args.port, reload=args.reload,
                timeout_keep_alive=65)


def _add_source_and_filters(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("source", nargs="?", help="CSV path or URL (default: SALESVIEW_DATA_SOURCE)")
    for kind in DimensionKind:
        parser.add_argument(f"--{kind.plural}", help=f"Comma-separated {kind.plural} to keep")
    parser.add_argument("--search", help="Free-text search across text columns")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Sales View — 2024 vs 2025 sales comparison",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    summary_parser = subparsers.add_parser("summary", help="Print KPI summary")
    _add_source_and_filters(summary_parser)
    summary_parser.set_defaults(func=cmd_summary)

    drill_parser = subparsers.add_parser("drilldown", help="Print one drill-down list")
    _add_source_and_filters(drill_parser)
    drill_parser.add_argument("view", choices=list(DRILLDOWN_VIEWS), help="List to print")
    drill_parser.add_argument("--limit", type=int, default=25, help="Rows to print (default 25)")
    drill_parser.set_defaults(func=cmd_drilldown)

    export_parser = subparsers.add_parser("export", help="Export summary workbook or one list as CSV")
    _add_source_and_filters(export_parser)
    export_parser.add_argument("--view", choices=list(DRILLDOWN_VIEWS), help="Export this list as CSV")
    export_parser.add_argument("--output", help="Output directory (default: exports folder)")
    export_parser.set_defaults(func=cmd_export)

    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--port", type=int, default=int(os.environ.get("PORT", "8000")), help="Port (default 8000)")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")
    serve_parser.set_defaults(func=cmd_serve)

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return

    args.func(args)


if __name__ == "__main__":
    main()
