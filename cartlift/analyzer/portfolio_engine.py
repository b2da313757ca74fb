"""CartLift — Portfolio Aggregator.

Rolls a collection of products up into portfolio totals and ratios. Profit
and NTB sales come from each product's stored metrics; nothing is
recomputed, so stale metrics stay stale.
"""

from typing import List

from cartlift.analyzer.ranking import ProductSortKey, SortDirection, sort_by
from cartlift.core.logging import get_logger
from cartlift.models.history_models import Product
from cartlift.models.metric_models import PortfolioMetrics

logger = get_logger("analyzer.portfolio")


def aggregate_portfolio(products: List[Product]) -> PortfolioMetrics:
    """Sum spend, sales, units, orders, profit; derive ratios once at the end."""
    total_ad_spend = 0.0
    total_sales = 0.0
    total_units = 0.0
    total_orders = 0.0
    total_profit = 0.0
    total_clicks = 0.0
    total_ntb_sales = 0.0

    for product in products:
        total_ad_spend += product.inputs.ad_spend or 0
        total_sales += product.inputs.attributed_sales or 0
        total_units += product.inputs.units_sold or 0
        total_orders += product.inputs.orders or 0
        total_clicks += product.inputs.clicks or 0
        total_profit += product.metrics.profit_after_ads or 0
        total_ntb_sales += product.metrics.ntb_sales or 0

    portfolio = PortfolioMetrics(
        total_ad_spend=total_ad_spend,
        total_attributed_sales=total_sales,
        total_units=total_units,
        total_orders=total_orders,
        total_profit=total_profit,
        portfolio_roas=total_sales / total_ad_spend if total_ad_spend > 0 else None,
        portfolio_margin_percent=total_profit / total_sales if total_sales > 0 else None,
        average_cpc=total_ad_spend / total_clicks if total_clicks > 0 else None,
        average_aov=total_sales / total_orders if total_orders > 0 else None,
        weighted_ntb_percent=total_ntb_sales / total_sales if total_sales > 0 else None,
        product_count=len(products),
    )
    logger.info(
        f"Aggregated portfolio of {len(products)} products",
        extra={"entity_count": len(products)},
    )
    return portfolio


def top_performers(
    products: List[Product],
    metric: ProductSortKey = ProductSortKey.PROFIT,
    count: int = 5,
) -> List[Product]:
    return sort_by(products, metric, SortDirection.DESC)[:count]


def bottom_performers(
    products: List[Product],
    metric: ProductSortKey = ProductSortKey.PROFIT,
    count: int = 5,
) -> List[Product]:
    return sort_by(products, metric, SortDirection.ASC)[:count]
