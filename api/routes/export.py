"""
Export endpoints.

GET /api/v1/export/comparison?budgetId=&unitId=&format=   → one comparison
GET /api/v1/export/{dataset}?format=csv|json              → units, budget,
                                                            categories or featured

CSV downloads start with ``#``-prefixed source attribution rows followed by
a header row; JSON downloads are one document with a ``_metadata`` object
and the ``records`` list. Every response carries ``X-Total-Count``.
"""

import csv
import io
import json
from datetime import datetime, timezone
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import StreamingResponse

from api.dependencies import get_service
from engine.export import (
    BUDGET_ITEM_COLUMNS,
    CATEGORY_COLUMNS,
    COMPARISON_COLUMNS,
    UNIT_COLUMNS,
    budget_item_rows,
    category_rows,
    export_comparison,
    unit_rows,
)
from engine.service import ComparisonService

router = APIRouter(prefix="/export", tags=["export"])

EXPORT_SOURCE = "Budget Comparisons"

Dataset = Literal["units", "budget", "categories", "featured"]


def _export_date() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _export_response(rows: list[dict], columns: list[str], fmt: str,
                     name: str, export_date: str, url: str) -> StreamingResponse:
    headers = {"X-Total-Count": str(len(rows))}

    if fmt == "csv":
        def csv_stream():
            buf = io.StringIO()
            writer_raw = csv.writer(buf)
            writer_raw.writerow([f"# Source: {EXPORT_SOURCE}"])
            writer_raw.writerow([f"# Export Date: {export_date}"])
            writer_raw.writerow([f"# URL: {url}"])
            writer_raw.writerow([f"# Total Records: {len(rows)}"])
            yield buf.getvalue()
            buf.seek(0)
            buf.truncate()
            writer = csv.DictWriter(buf, fieldnames=columns)
            writer.writeheader()
            yield buf.getvalue()
            for row in rows:
                buf.seek(0)
                buf.truncate()
                writer.writerow(row)
                yield buf.getvalue()

        return StreamingResponse(
            csv_stream(),
            media_type="text/csv",
            headers={"Content-Disposition": f"attachment; filename={name}.csv", **headers},
        )

    document = {
        "_metadata": {
            "source": EXPORT_SOURCE,
            "export_date": export_date,
            "url": url,
            "total_records": len(rows),
        },
        "records": rows,
    }
    content = json.dumps(document, indent=2, default=str)
    return StreamingResponse(
        iter([content]),
        media_type="application/json",
        headers={"Content-Disposition": f"attachment; filename={name}.json", **headers},
    )


@router.get("/comparison", summary="Export one comparison as CSV or JSON")
def export_single_comparison(
    request: Request,
    budget_id: str = Query(..., alias="budgetId", min_length=1),
    unit_id: str = Query(..., alias="unitId", min_length=1),
    fmt: str = Query("json", alias="format", pattern="^(csv|json)$", description="Output format"),
    service: ComparisonService = Depends(get_service),
) -> StreamingResponse:
    outcome = service.compare(budget_id, unit_id)
    if outcome is None:
        raise HTTPException(
            status_code=404,
            detail=f"Unknown budget item '{budget_id}' or unit '{unit_id}'",
        )
    export_date = _export_date()
    row = export_comparison(outcome.item, outcome.unit, outcome.result, export_date)
    return _export_response([row], COMPARISON_COLUMNS, fmt,
                            f"comparison-{budget_id}-{unit_id}", export_date, str(request.url))


@router.get("/{dataset}", summary="Export a catalog table as CSV or JSON")
def export_dataset(
    request: Request,
    dataset: Dataset,
    fmt: str = Query("csv", alias="format", pattern="^(csv|json)$", description="Output format"),
    service: ComparisonService = Depends(get_service),
) -> StreamingResponse:
    """Download the unit catalog, budget items, category hierarchy or featured comparisons."""
    catalog = service.catalog
    export_date = _export_date()

    if dataset == "units":
        rows, columns = unit_rows(catalog.units), UNIT_COLUMNS
    elif dataset == "budget":
        rows, columns = budget_item_rows(catalog.budget_items), BUDGET_ITEM_COLUMNS
    elif dataset == "categories":
        rows = [
            {"fiscalYear": year, **row}
            for year in catalog.fiscal_years()
            for row in category_rows(catalog.categories[year])
        ]
        columns = ["fiscalYear"] + CATEGORY_COLUMNS
    else:
        rows = [
            export_comparison(o.item, o.unit, o.result, export_date, o.featured.headline)
            for o in service.featured()
        ]
        columns = COMPARISON_COLUMNS

    return _export_response(rows, columns, fmt, f"{dataset}-export", export_date, str(request.url))
