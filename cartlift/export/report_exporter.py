"""CartLift — Tabular Metric Export."""

from pathlib import Path
from typing import List, Union

import pandas as pd

from cartlift.core.formatting import format_value
from cartlift.core.logging import get_logger
from cartlift.core.metric_registry import CAMPAIGN_METRICS, UPC_METRICS
from cartlift.models.metric_models import CalculatedMetrics, UPCMetrics

logger = get_logger("export")


def campaign_metrics_frame(metrics: CalculatedMetrics) -> pd.DataFrame:
    """One row per campaign metric: label, raw value, formatted value."""
    values = metrics.model_dump(mode="json")
    return pd.DataFrame(
        [
            {
                "metric": name,
                "label": definition.label,
                "value": values[name],
                "formatted": format_value(values[name], definition.unit),
            }
            for name, definition in CAMPAIGN_METRICS.items()
        ]
    )


def upc_metrics_frame(upc_metrics: List[UPCMetrics]) -> pd.DataFrame:
    """One row per SKU, columns labelled from the registry."""
    columns = ["upc_code", "product_name", *UPC_METRICS.keys()]
    frame = pd.DataFrame(
        [upc.model_dump() for upc in upc_metrics], columns=columns
    )
    labels = {name: definition.label for name, definition in UPC_METRICS.items()}
    labels.update({"upc_code": "UPC", "product_name": "Product"})
    return frame.rename(columns=labels)


def write_csv(frame: pd.DataFrame, path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    frame.to_csv(path, index=False)
    logger.info(f"Wrote {len(frame)} rows to {path}")
    return path
