"""
Catalog Data Validation Suite

Integrity checks over the comparison unit and budget item tables. Run it
after editing anything under catalog/data/ (or as a CI step).

Usage:
    python validate_catalog.py                        # Validate packaged catalog
    python validate_catalog.py --data-dir path/to/dir # Custom catalog directory
    python validate_catalog.py --strict               # Non-zero exit on warnings
    python validate_catalog.py --json                 # Output as JSON
"""

import json
import sys
from pathlib import Path

from catalog.loader import BUDGET_ITEMS_FILE, UNITS_FILE
from catalog.validation import validate_budget_items, validate_comparison_units
from utils.config import DEFAULT_CATALOG_DIR


def _read_table(path: Path, key: str) -> list[dict]:
    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)
    return data.get(key, []) if isinstance(data, dict) else data


def validate_all(data_dir: Path = DEFAULT_CATALOG_DIR, strict: bool = False) -> dict:
    """Validate both catalog tables and return a summary dict."""
    units_path = data_dir / UNITS_FILE
    items_path = data_dir / BUDGET_ITEMS_FILE
    for path in (units_path, items_path):
        if not path.exists():
            print(f"ERROR: Catalog table not found: {path}")
            sys.exit(1)

    results = {
        "comparison_units": validate_comparison_units(_read_table(units_path, "units")),
        "budget_items": validate_budget_items(_read_table(items_path, "items")),
    }

    total_errors = sum(r.error_count() for r in results.values())
    total_warnings = sum(r.warning_count() for r in results.values())
    failed = total_errors > 0 or (strict and total_warnings > 0)

    return {
        "data_dir": str(data_dir),
        "tables": {name: r.to_dict() for name, r in results.items()},
        "summaries": {name: r.summary_text() for name, r in results.items()},
        "total_errors": total_errors,
        "total_warnings": total_warnings,
        "exit_code": 1 if failed else 0,
    }


def print_report(summary: dict) -> None:
    """Print a human-readable validation report."""
    print(f"\n{'='*60}")
    print("  Catalog Validation Report")
    print(f"  Data directory: {summary['data_dir']}")
    print(f"{'='*60}\n")

    for name, table in summary["tables"].items():
        status = "OK" if table["is_valid"] else "FAIL"
        print(f"  [{status:4s}] {name}")
        for line in summary["summaries"][name].splitlines():
            print(f"         {line}")
        issues = table["errors"] + table["warnings"]
        for issue in issues[:10]:
            print(f"           {issue['severity'].upper()} {issue['record_id']}: {issue['detail']}")
        if len(issues) > 10:
            print(f"           ... and {len(issues) - 10} more")
        print()

    print(f"  Summary: {summary['total_errors']} error(s), "
          f"{summary['total_warnings']} warning(s)\n")


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser(description="Validate catalog data")
    parser.add_argument("--data-dir", type=Path, default=DEFAULT_CATALOG_DIR)
    parser.add_argument("--strict", action="store_true",
                        help="Exit non-zero on any warnings as well as errors")
    parser.add_argument("--json", action="store_true", dest="output_json",
                        help="Output results as JSON")
    args = parser.parse_args()

    summary = validate_all(args.data_dir, strict=args.strict)

    if args.output_json:
        print(json.dumps(summary["tables"], indent=2))
    else:
        print_report(summary)

    sys.exit(summary["exit_code"])
