# erp_backend/app/services/normalization.py
"""
Maps the loosely-typed rows of the legacy exports onto OrderRecord and
StockRecord. Export and local sales orders use different column names;
both end up in the same shape here.
"""
import math
import re
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd
from loguru import logger

from erp_backend.app.db.schemas import ExcelDataset, OrderRecord, StockRecord

UNKNOWN = "Unknown"
OTHER_PRODUCT = "Other"

# Checked in order; the first category with a matching keyword wins.
PRODUCT_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    ("PSF", ("PSF", "STAPLE FIBER")),
    ("DTY", ("DTY", "TEXTURED YARN")),
    ("FDY", ("FDY", "FULLY DRAWN")),
    ("POY", ("POY", "PARTIALLY ORIENTED")),
]

_LEGACY_DATE_RE = re.compile(r"(\d{1,2})-([A-Z]{3})-(\d{2})$")
_MONTHS = {
    "JAN": 1, "FEB": 2, "MAR": 3, "APR": 4, "MAY": 5, "JUN": 6,
    "JUL": 7, "AUG": 8, "SEP": 9, "OCT": 10, "NOV": 11, "DEC": 12,
}

EXPORT_ORDER_FIELDS = {
    "order_number": "SOE_PINUMBER",
    "customer": "SOE_CONSIGNEE",
    "description": "SOE_PRODUCTDESC",
    "quantity": "SOE_QTY",
    "value": "SOE_TOTALAMOUNT",
    "date": "SOE_PIDATE",
    "country": "SOE_COUNTRY",
}

LOCAL_ORDER_FIELDS = {
    "order_number": "SOL_NUMBER",
    "customer": "SOL_CUSTOMERNAME",
    "description": "SOL_PRODUCTDESCRIPTION",
    "quantity": "SOL_QTY",
    "value": "SOL_TOTALAMOUNT",
    "date": "SOL_DATE",
    "country": "SOL_CUSTOMERCOUNTRY",
}


def classify_product(description: Any) -> str:
    """Returns the product category for a free-text description or product code."""
    text = to_text(description)
    if not text:
        return UNKNOWN

    upper_text = text.upper()
    for category, keywords in PRODUCT_KEYWORDS:
        if any(keyword in upper_text for keyword in keywords):
            return category
    return OTHER_PRODUCT


def to_number(value: Any) -> float:
    """Numeric cell value, or 0 for blanks, NaN and anything non-numeric."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return 0.0 if math.isnan(value) else float(value)
    try:
        number = float(str(value).replace(",", "").strip())
    except ValueError:
        return 0.0
    return 0.0 if math.isnan(number) else number


def to_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, float):
        if math.isnan(value):
            return None
        # Excel stores numeric codes as floats: 150.0 -> "150"
        if value.is_integer():
            return str(int(value))
    text = str(value).strip()
    return text or None


def parse_order_date(value: Any) -> Optional[datetime]:
    """
    Parses the date cell of an order row.

    Legacy exports write dates as DD-MON-YY (e.g. 05-JAN-24, read as 2024);
    workbooks with real date cells come back from pandas as Timestamps.
    Returns None when the value cannot be understood.
    """
    if value is None:
        return None
    if isinstance(value, pd.Timestamp):
        return None if pd.isna(value) else value.to_pydatetime().replace(tzinfo=None)
    if isinstance(value, datetime):
        if pd.isna(value):
            return None
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    text = to_text(value)
    if not text:
        return None

    match = _LEGACY_DATE_RE.match(text.upper())
    if match:
        day, month, year = match.groups()
        try:
            return datetime(int(year) + 2000, _MONTHS[month], int(day))
        except (KeyError, ValueError):
            logger.warning(f"Invalid legacy order date: {text}")
            return None

    try:
        parsed = pd.to_datetime(text)
    except (ValueError, TypeError, OverflowError):
        logger.debug(f"Unparseable order date: {text}")
        return None
    if pd.isna(parsed):
        return None
    return parsed.to_pydatetime().replace(tzinfo=None)


def _format_order_date(value: Any) -> Optional[str]:
    parsed = parse_order_date(value)
    if parsed is not None:
        return parsed.date().isoformat()
    return to_text(value)


def _normalize_order(
    row: Dict[str, Any], fields: Dict[str, str], order_type: str
) -> OrderRecord:
    return OrderRecord(
        order_number=to_text(row.get(fields["order_number"])),
        customer=to_text(row.get(fields["customer"])) or UNKNOWN,
        product=classify_product(row.get(fields["description"])),
        quantity=to_number(row.get(fields["quantity"])),
        value=to_number(row.get(fields["value"])),
        date=_format_order_date(row.get(fields["date"])),
        type=order_type,
        country=to_text(row.get(fields["country"])) or UNKNOWN,
    )


def normalize_orders(dataset: ExcelDataset) -> List[OrderRecord]:
    """Export orders first, then local orders, each in sheet order."""
    orders = [
        _normalize_order(row, EXPORT_ORDER_FIELDS, "export")
        for row in dataset.export_orders
    ]
    orders.extend(
        _normalize_order(row, LOCAL_ORDER_FIELDS, "local")
        for row in dataset.local_orders
    )
    return orders


def normalize_stock(dataset: ExcelDataset) -> List[StockRecord]:
    return [
        StockRecord(
            product_code=to_text(box.get("PRODUCTCODE")) or UNKNOWN,
            product=classify_product(box.get("PRODUCTCODE")),
            denier=to_text(box.get("DENIER")) or UNKNOWN,
            net_weight=to_number(box.get("NETWT")),
            location=to_text(box.get("FGWLOCATION")) or UNKNOWN,
            grade=to_text(box.get("GRADECODE")) or UNKNOWN,
        )
        for box in dataset.box_in_hand
    ]
