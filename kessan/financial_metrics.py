"""
Financial Metric Dictionary

Canonical metric keys for 決算短信 data, the XBRL element-name fragments
accepted for each key, and their display names and units.

Element names are resolved by SUBSTRING match in declaration order:
the primary table is searched first, then the forecast table, and the
first definition holding a fragment contained in the element name wins.
Reordering the tables changes which metric an element resolves to.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Optional, Tuple


class MetricUnit(str, Enum):
    """表示単位"""

    MILLIONS = "百万円"
    CURRENCY = "円"
    PERCENT = "%"


@dataclass(frozen=True)
class MetricDefinition:
    key: str
    name: str
    xbrl_names: Tuple[str, ...]
    unit: MetricUnit

    def matches(self, element_name: str) -> bool:
        return any(xbrl_name in element_name for xbrl_name in self.xbrl_names)


# ============================================================
# PRIMARY METRICS (declaration order is significant)
# ============================================================

METRICS: Tuple[MetricDefinition, ...] = (
    MetricDefinition(
        key="revenue",
        name="売上高",
        xbrl_names=("NetSales", "OperatingRevenue", "Sales", "Revenue"),
        unit=MetricUnit.MILLIONS,
    ),
    MetricDefinition(
        key="operating_profit",
        name="営業利益",
        xbrl_names=("OperatingProfit", "OperatingIncome"),
        unit=MetricUnit.MILLIONS,
    ),
    MetricDefinition(
        key="ordinary_profit",
        name="経常利益",
        xbrl_names=("OrdinaryProfit", "OrdinaryIncome"),
        unit=MetricUnit.MILLIONS,
    ),
    MetricDefinition(
        key="net_profit",
        name="当期純利益",
        xbrl_names=("NetIncome", "ProfitAttributableToOwnersOfParent", "NetProfitLoss"),
        unit=MetricUnit.MILLIONS,
    ),
    MetricDefinition(
        key="eps",
        name="一株当たり当期純利益(EPS)",
        xbrl_names=("EarningsPerShare", "BasicEarningsPerShare"),
        unit=MetricUnit.CURRENCY,
    ),
    MetricDefinition(
        key="bps",
        name="一株当たり純資産(BPS)",
        xbrl_names=("BookValuePerShare", "NetAssetsPerShare"),
        unit=MetricUnit.CURRENCY,
    ),
    MetricDefinition(
        key="dividend",
        name="一株当たり配当金",
        xbrl_names=("DividendPerShare", "AnnualDividendsPerShare"),
        unit=MetricUnit.CURRENCY,
    ),
    MetricDefinition(
        key="roe",
        name="自己資本利益率(ROE)",
        xbrl_names=("ReturnOnEquity", "ROE"),
        unit=MetricUnit.PERCENT,
    ),
    MetricDefinition(
        key="roa",
        name="総資産利益率(ROA)",
        xbrl_names=("ReturnOnAssets", "ROA"),
        unit=MetricUnit.PERCENT,
    ),
    MetricDefinition(
        key="equity_ratio",
        name="自己資本比率",
        xbrl_names=("EquityRatio", "EquityToAssetRatio"),
        unit=MetricUnit.PERCENT,
    ),
    MetricDefinition(
        key="revenue_growth",
        name="売上高成長率",
        xbrl_names=("RevenueGrowthRate", "SalesGrowthRate"),
        unit=MetricUnit.PERCENT,
    ),
    MetricDefinition(
        key="profit_growth",
        name="利益成長率",
        xbrl_names=("ProfitGrowthRate", "NetIncomeGrowthRate"),
        unit=MetricUnit.PERCENT,
    ),
)

# ============================================================
# FORECAST METRICS
# ============================================================

FORECAST_METRICS: Tuple[MetricDefinition, ...] = (
    MetricDefinition(
        key="forecast_revenue",
        name="売上高予想",
        xbrl_names=("ForecastNetSales", "ForecastOperatingRevenue"),
        unit=MetricUnit.MILLIONS,
    ),
    MetricDefinition(
        key="forecast_operating_profit",
        name="営業利益予想",
        xbrl_names=("ForecastOperatingProfit", "ForecastOperatingIncome"),
        unit=MetricUnit.MILLIONS,
    ),
    MetricDefinition(
        key="forecast_ordinary_profit",
        name="経常利益予想",
        xbrl_names=("ForecastOrdinaryProfit", "ForecastOrdinaryIncome"),
        unit=MetricUnit.MILLIONS,
    ),
    MetricDefinition(
        key="forecast_net_profit",
        name="当期純利益予想",
        xbrl_names=("ForecastNetIncome", "ForecastProfitAttributableToOwnersOfParent"),
        unit=MetricUnit.MILLIONS,
    ),
)

# Derived metrics are computed, never read from a filing
DERIVED_METRICS: Tuple[MetricDefinition, ...] = (
    MetricDefinition(
        key="operating_profit_margin",
        name="営業利益率",
        xbrl_names=(),
        unit=MetricUnit.PERCENT,
    ),
    MetricDefinition(
        key="payout_ratio",
        name="配当性向",
        xbrl_names=(),
        unit=MetricUnit.PERCENT,
    ),
)

_ALL_METRICS = MappingProxyType(
    {metric.key: metric for metric in METRICS + FORECAST_METRICS + DERIVED_METRICS}
)

SEGMENT_INFO = MappingProxyType({
    "segment_name": "事業セグメント名",
    "segment_revenue": "セグメント売上高",
    "segment_profit": "セグメント利益",
})

PERIOD_TYPES = MappingProxyType({
    "q1": "第1四半期",
    "q2": "第2四半期",
    "q3": "第3四半期",
    "q4": "第4四半期",
    "annual": "通期",
})

# Descriptive analysis patterns shown to readers of the results
_ANALYSIS_PATTERNS_SOURCE = {
    "growth_analysis": {
        "name": "成長性分析",
        "required_metrics": ("revenue", "operating_profit", "net_profit"),
        "conditions": {
            "high_growth": "revenue_growth > 10% AND operating_profit_growth > 15%",
            "stable_growth": "revenue_growth > 0% AND operating_profit_growth > 0%",
            "declining": "revenue_growth < 0% OR operating_profit_growth < 0%",
        },
    },
    "profitability_analysis": {
        "name": "収益性分析",
        "required_metrics": ("roe", "roa", "operating_profit_margin"),
        "conditions": {
            "high_profitability": "roe > 15% AND roa > 5%",
            "moderate_profitability": "roe > 8% AND roa > 3%",
            "low_profitability": "roe < 8% OR roa < 3%",
        },
    },
    "stability_analysis": {
        "name": "安定性分析",
        "required_metrics": ("equity_ratio",),
        "conditions": {
            "high_stability": "equity_ratio > 50%",
            "moderate_stability": "equity_ratio > 30%",
            "low_stability": "equity_ratio < 30%",
        },
    },
    "shareholder_return_analysis": {
        "name": "株主還元分析",
        "required_metrics": ("dividend", "eps"),
        "conditions": {
            "high_return": "payout_ratio > 30%",
            "moderate_return": "payout_ratio > 20%",
            "low_return": "payout_ratio < 20%",
        },
    },
}

ANALYSIS_PATTERNS = MappingProxyType({
    pattern_key: MappingProxyType(dict(pattern, conditions=MappingProxyType(pattern["conditions"])))
    for pattern_key, pattern in _ANALYSIS_PATTERNS_SOURCE.items()
})


def resolve_metric_key(element_name: str) -> Optional[str]:
    """
    Resolve an XBRL element name to a canonical metric key.

    Works on local names ("NetSales") and prefixed names ("jpcrp:NetSales")
    alike since matching is by substring.

    Returns:
        The metric key, or None when no accepted fragment is contained
    """
    if not element_name:
        return None

    for table in (METRICS, FORECAST_METRICS):
        for metric in table:
            if metric.matches(element_name):
                return metric.key

    return None


def get_metric(key: str) -> Optional[MetricDefinition]:
    """Look up a metric definition by key (read-only)"""
    return _ALL_METRICS.get(key)


def display_name(key: str) -> str:
    metric = get_metric(key)
    return metric.name if metric else key


def metric_unit(key: str) -> Optional[MetricUnit]:
    metric = get_metric(key)
    return metric.unit if metric else None


def format_number(value: Optional[float], unit: str = MetricUnit.MILLIONS.value) -> str:
    """
    Format a metric value for display.

    百万円 values are stored in yen and shown in millions with separators,
    percentages are shown as-is, anything else is rounded to 2 decimals.
    """
    if value is None:
        return "N/A"

    unit = unit.value if isinstance(unit, MetricUnit) else unit

    if unit == MetricUnit.MILLIONS.value:
        return f"{round(value / 1_000_000):,}{unit}"
    if unit == MetricUnit.PERCENT.value:
        return f"{value}{unit}"
    return f"{round(value, 2)}{unit}"
