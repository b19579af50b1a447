from __future__ import annotations

import csv
from dataclasses import asdict, fields, is_dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Sequence

from .models import ExposureReports
from .periods import Period


def _jsonable(v: Any) -> Any:
    if isinstance(v, (date, datetime)):
        return v.isoformat()
    if isinstance(v, list):
        return [_jsonable(x) for x in v]
    if isinstance(v, dict):
        return {k: _jsonable(x) for k, x in v.items()}
    return v


def to_row(report: Any) -> Dict[str, Any]:
    """Une ligne par entité ; l'ordre des colonnes suit celui des champs."""
    return {k: _jsonable(v) for k, v in asdict(report).items()}


def to_rows(reports: Sequence[Any]) -> List[Dict[str, Any]]:
    return [to_row(r) for r in reports]


def columns(report_type: type) -> List[str]:
    return [f.name for f in fields(report_type)]


def reports_to_dict(
    reports: ExposureReports,
    period: Period,
    totals: Dict[str, Any] | None = None,
    financial: Sequence[Any] = (),
) -> Dict:
    out: Dict[str, Any] = {
        "period": {
            "kind": period.kind,
            "start": _jsonable(period.start),
            "end": _jsonable(period.end),
            "multiplier": period.multiplier,
        },
        "media": to_rows(reports.media),
        "advertisers": to_rows(reports.advertisers),
        "locations": to_rows(reports.locations),
        "playlists": to_rows(reports.playlists),
    }
    if financial:
        out["financial"] = to_rows(financial)
    if totals is not None:
        out["totals"] = totals
    return out


def write_csv(reports: Sequence[Any], path: str | Path, report_type: type | None = None) -> int:
    """Écrit les lignes en CSV, retourne le nombre de lignes écrites."""
    if report_type is None and reports:
        report_type = type(reports[0])
    if report_type is None or not is_dataclass(report_type):
        raise ValueError("Cannot infer CSV columns from an empty report list")

    cols = columns(report_type)
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=cols)
        writer.writeheader()
        for r in reports:
            writer.writerow(to_row(r))
    return len(reports)
