"""CartLift — Instacart Ads Manager CSV Parser.

Reads a campaign export into typed rows. Column headers are matched loosely
(lower-cased substring match against known variants) because export
layouts drift between report types.
"""

import io
from typing import Dict, List, Optional

import pandas as pd
from pydantic import BaseModel

from cartlift.core.logging import get_logger

logger = get_logger("instacart.csv")

# First variant found in any header wins
COLUMN_VARIANTS: Dict[str, List[str]] = {
    "status": ["status"],
    "product": ["product", "product_name"],
    "upc": ["upc", "upc_code"],
    "spend": ["spend", "ad_spend"],
    "sales": ["attributed_sales", "sales"],
    "units": ["attributed_quantities", "units", "quantity"],
    "roas": ["roas"],
    "impressions": ["impressions"],
    "clicks": ["clicks"],
    "ctr": ["ctr", "click_through_rate"],
    "ntb_percent": ["percent_ntb_attributed_sales", "ntb_percent", "ntb_%"],
}

INACTIVE_STATUSES = ("paused", "unavailable")


class CSVImportError(ValueError):
    """Raised when an export cannot be turned into SKU rows."""


class AdsCSVRow(BaseModel):
    """One active product line from an export. Rates are decimals."""

    status: str = "active"
    product: str
    upc: str
    spend: float = 0.0
    attributed_sales: float = 0.0
    attributed_quantities: float = 0.0
    roas: float = 0.0
    impressions: float = 0.0
    clicks: float = 0.0
    ctr: float = 0.0
    ntb_percent: float = 0.0


def _find_column(headers: List[str], field: str) -> Optional[str]:
    for variant in COLUMN_VARIANTS[field]:
        for header in headers:
            if variant in header:
                return header
    return None


def _numeric(frame: pd.DataFrame, column: Optional[str]) -> pd.Series:
    """Parse a column as floats; currency symbols, commas and % are ignored."""
    if column is None:
        return pd.Series(0.0, index=frame.index)
    cleaned = frame[column].astype(str).str.replace(r"[,%$\s]", "", regex=True)
    return pd.to_numeric(cleaned, errors="coerce").fillna(0.0)


def _text(frame: pd.DataFrame, column: Optional[str], default: str = "") -> pd.Series:
    if column is None:
        return pd.Series(default, index=frame.index)
    return frame[column].astype(str).str.strip()


def read_export(text: str) -> pd.DataFrame:
    """Load export text as strings with lower-cased, trimmed headers."""
    try:
        frame = pd.read_csv(
            io.StringIO(text.strip()),
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
        )
    except pd.errors.EmptyDataError as e:
        raise CSVImportError("CSV file is empty or invalid") from e
    if frame.empty:
        raise CSVImportError("CSV file is empty or invalid")
    frame.columns = [str(c).strip().lower() for c in frame.columns]
    return frame.fillna("")


def parse_ads_csv(text: str) -> List[AdsCSVRow]:
    """Parse an export into active product rows.

    Skips rows without UPC or product, paused/unavailable rows and rows with
    neither spend nor sales.
    """
    frame = read_export(text)
    headers = list(frame.columns)
    columns = {field: _find_column(headers, field) for field in COLUMN_VARIANTS}

    if columns["upc"] is None or columns["product"] is None:
        raise CSVImportError("CSV must contain UPC and Product columns")

    status = _text(frame, columns["status"], default="active")
    product = _text(frame, columns["product"])
    upc = _text(frame, columns["upc"])
    spend = _numeric(frame, columns["spend"])
    sales = _numeric(frame, columns["sales"])
    units = _numeric(frame, columns["units"])
    roas = _numeric(frame, columns["roas"])
    impressions = _numeric(frame, columns["impressions"])
    clicks = _numeric(frame, columns["clicks"])
    ctr_given = _text(frame, columns["ctr"]) != ""
    ctr_pct = _numeric(frame, columns["ctr"])
    ntb_pct = _numeric(frame, columns["ntb_percent"])

    rows: List[AdsCSVRow] = []
    for i in frame.index:
        if not upc[i] or not product[i]:
            continue
        if any(word in status[i].lower() for word in INACTIVE_STATUSES):
            continue
        if spend[i] == 0 and sales[i] == 0:
            continue

        # Exported CTR is a whole percent; otherwise derive it
        if columns["ctr"] is not None and ctr_given[i]:
            ctr = ctr_pct[i] / 100
        elif clicks[i] > 0 and impressions[i] > 0:
            ctr = clicks[i] / impressions[i]
        else:
            ctr = 0.0

        rows.append(
            AdsCSVRow(
                status=status[i] or "active",
                product=product[i],
                upc=upc[i],
                spend=spend[i],
                attributed_sales=sales[i],
                attributed_quantities=units[i],
                roas=roas[i],
                impressions=impressions[i],
                clicks=clicks[i],
                ctr=ctr,
                ntb_percent=ntb_pct[i] / 100,
            )
        )

    logger.info(
        f"Parsed {len(rows)} active rows from {len(frame)} CSV lines",
        extra={"entity_count": len(rows)},
    )
    return rows
