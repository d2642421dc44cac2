"""
Result shape classification.

Maps tabular rows to a chart kind and chart-ready records with one
decision table, checked top to bottom:

    time field + numeric field(s)        -> line
    categorical field + numeric field(s) -> pie (<= 10 rows) / bar
    two or more numeric fields           -> bar, "Item N" labels
    one numeric field, <= 20 rows        -> bar, "Item N" labels
    anything else                        -> no chart
"""
import math
import re
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from app.schemas.chat import ChartData
from core.config import settings

TIME_FIELD = re.compile(r"year|month|date|week|quarter", re.IGNORECASE)

MAX_CATEGORY_VALUE_LENGTH = 100
MAX_LABEL_LENGTH = 40
MAX_SHAPED_RECORDS = 30
PIE_MAX_ROWS = 10
SINGLE_SERIES_MAX_ROWS = 20

WANTS_CHART = re.compile(
    r"chart|graph|plot|visuali[sz]e|visuali[sz]ation|visual|diagram",
    re.IGNORECASE,
)
PREFERRED_KIND = [
    (re.compile(r"\bline\s+(chart|graph)\b", re.IGNORECASE), "line"),
    (re.compile(r"\bpie\s+(chart|graph)\b", re.IGNORECASE), "pie"),
    (re.compile(r"\b(bar|column)\s+(chart|graph)\b", re.IGNORECASE), "bar"),
]


def wants_chart(question: str) -> bool:
    return bool(WANTS_CHART.search(question or ""))


def preferred_chart_type(question: str) -> Optional[str]:
    for pattern, kind in PREFERRED_KIND:
        if pattern.search(question or ""):
            return kind
    return None


def to_number(value: Any) -> Optional[float]:
    """Numeric value of a cell, or None when it is not a finite number."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, (float, Decimal)):
        number = float(value)
        return number if math.isfinite(number) else None
    if isinstance(value, str):
        try:
            number = float(value.replace(",", "").strip())
        except ValueError:
            return None
        return number if math.isfinite(number) else None
    return None


def _numeric(value: Any) -> float:
    number = to_number(value)
    return 0 if number is None else number


def format_time_value(value: Any) -> Any:
    # YYYYMMDD integer date keys
    if isinstance(value, int) and not isinstance(value, bool) and value > 100000:
        digits = str(value)
        if len(digits) == 8:
            return f"{digits[:4]}-{digits[4:6]}-{digits[6:]}"
        return value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    return value


def _label(value: Any) -> str:
    text = str(value)
    if len(text) > MAX_LABEL_LENGTH:
        return text[:MAX_LABEL_LENGTH - 3] + "..."
    return text


def find_time_field(fields: Sequence[str]) -> Optional[str]:
    return next((f for f in fields if TIME_FIELD.search(f)), None)


def find_numeric_fields(row: Dict[str, Any], exclude: Sequence[str] = ()) -> List[str]:
    return [f for f, v in row.items() if f not in exclude and to_number(v) is not None]


def find_categorical_fields(row: Dict[str, Any], exclude: Sequence[str] = ()) -> List[str]:
    return [
        f for f, v in row.items()
        if f not in exclude and isinstance(v, str) and len(v) < MAX_CATEGORY_VALUE_LENGTH
    ]


def classify_result_shape(
    rows: Sequence[Dict[str, Any]],
    preferred: Optional[str] = None,
    sample_limit: Optional[int] = None,
) -> Optional[ChartData]:
    """
    Build the chart descriptor for ``rows``, or None when no chart fits.

    Args:
        rows: Result rows, all with the fields of the first row
        preferred: Chart kind named explicitly by the user; replaces the kind
            chosen by the table but never changes the shaping
        sample_limit: Rows inspected at most (defaults to CHART_SAMPLE_LIMIT)
    """
    sample = list(rows[:sample_limit or settings.CHART_SAMPLE_LIMIT])
    if not sample:
        return None

    first = sample[0]
    fields = list(first.keys())
    time_field = find_time_field(fields)
    excluded = [time_field] if time_field else []
    numeric_fields = find_numeric_fields(first, exclude=excluded)
    categorical_fields = find_categorical_fields(first, exclude=excluded + numeric_fields)

    if time_field and numeric_fields:
        data = []
        for row in sample:
            point = {"x": format_time_value(row.get(time_field))}
            for f in numeric_fields:
                point[f] = _numeric(row.get(f))
            data.append(point)
        return ChartData(type=preferred or "line", data=data, xAxis=time_field, yAxis=numeric_fields[0])

    if not time_field and categorical_fields and numeric_fields:
        category = categorical_fields[0]
        data = []
        for row in sample[:MAX_SHAPED_RECORDS]:
            point = {"name": _label(row.get(category)), "value": _numeric(row.get(numeric_fields[0]))}
            for f in numeric_fields:
                point[f] = _numeric(row.get(f))
            data.append(point)
        kind = "pie" if len(sample) <= PIE_MAX_ROWS else "bar"
        return ChartData(type=preferred or kind, data=data, xAxis=category, yAxis=numeric_fields[0])

    if not time_field and not categorical_fields and len(numeric_fields) >= 2:
        data = []
        for idx, row in enumerate(sample[:MAX_SHAPED_RECORDS]):
            point = {"name": f"Item {idx + 1}"}
            for f in numeric_fields:
                point[f] = _numeric(row.get(f))
            data.append(point)
        return ChartData(type=preferred or "bar", data=data, xAxis="name", yAxis=numeric_fields[0])

    if len(numeric_fields) == 1 and not categorical_fields and len(sample) <= SINGLE_SERIES_MAX_ROWS:
        field = numeric_fields[0]
        data = []
        for idx, row in enumerate(sample):
            value = _numeric(row.get(field))
            data.append({"name": f"Item {idx + 1}", "value": value, field: value})
        return ChartData(type=preferred or "bar", data=data, xAxis="name", yAxis=field)

    return None
