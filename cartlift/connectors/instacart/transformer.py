"""CartLift — CSV Rows → UPCData Transformer.

Exports carry no margin, so one gross margin is applied to every SKU. Zero
quantities become "not entered" rather than real zeros.
"""

from datetime import datetime, timezone
from typing import List, Optional

from cartlift.config import settings
from cartlift.connectors.instacart.csv_parser import AdsCSVRow, CSVImportError, parse_ads_csv
from cartlift.core.logging import get_logger
from cartlift.models.input_models import UPCData

logger = get_logger("instacart.transformer")


def _positive_or_none(value: float) -> Optional[float]:
    return value if value > 0 else None


def rows_to_upcs(
    rows: List[AdsCSVRow],
    gross_margin_percent: Optional[float] = None,
) -> List[UPCData]:
    """Convert parsed rows to SKU inputs.

    ``gross_margin_percent`` is kept in its raw form (40 or 0.4); the UPC
    engine normalizes it. Commission is left absent.
    """
    margin = (
        gross_margin_percent
        if gross_margin_percent is not None
        else settings.default_gross_margin_percent
    )
    batch = int(datetime.now(timezone.utc).timestamp() * 1000)
    return [
        UPCData(
            id=f"upc-import-{batch}-{index}",
            upc_code=row.upc,
            product_name=row.product,
            units_sold=_positive_or_none(row.attributed_quantities),
            ad_spend=_positive_or_none(row.spend),
            attributed_sales=_positive_or_none(row.attributed_sales),
            gross_margin_percent=margin,
            instacart_commission_percent=None,
        )
        for index, row in enumerate(rows)
    ]


def import_upcs(text: str, gross_margin_percent: Optional[float] = None) -> List[UPCData]:
    """Parse an export and convert it in one step."""
    rows = parse_ads_csv(text)
    if not rows:
        raise CSVImportError("No active products found in CSV")
    upcs = rows_to_upcs(rows, gross_margin_percent)
    logger.info(f"Imported {len(upcs)} UPCs", extra={"entity_count": len(upcs)})
    return upcs
