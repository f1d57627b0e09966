"""
Derived Metrics Calculator

Growth rates and ratios computed from the bucketed primary facts.
A metric whose inputs are missing or not positive is omitted from the
result rather than set to zero or None.
"""

from typing import Dict, Optional


def _is_positive(value: Optional[float]) -> bool:
    return value is not None and value > 0


def calculate_growth_rate(current_value: Optional[float], previous_value: Optional[float]) -> Optional[float]:
    """
    Year-over-Year growth rate (percentage, 2 decimals).

    Returns:
        None unless the current value exists and the previous value is positive
    """
    if current_value is None or not _is_positive(previous_value):
        return None
    growth = ((float(current_value) - float(previous_value)) / float(previous_value)) * 100
    return round(growth, 2)


def calculate_ratio(numerator: Optional[float], denominator: Optional[float]) -> Optional[float]:
    """numerator / denominator as a percentage, guarded by a positive denominator"""
    if numerator is None or not _is_positive(denominator):
        return None
    return round((float(numerator) / float(denominator)) * 100, 2)


def calculate_additional_metrics(
    current: Dict[str, float],
    previous: Dict[str, float],
) -> Dict[str, float]:
    """
    Add growth rates, operating margin and payout ratio to the current period.

    Args:
        current: current-period facts
        previous: previous-period facts (never modified)

    Returns:
        A copy of ``current`` with the computable derived metrics added.
        Derived values overwrite any same-named fact read from the filing.
    """
    enriched = dict(current)

    derived = {
        "revenue_growth": calculate_growth_rate(current.get("revenue"), previous.get("revenue")),
        "profit_growth": calculate_growth_rate(current.get("net_profit"), previous.get("net_profit")),
        "operating_profit_margin": calculate_ratio(current.get("operating_profit"), current.get("revenue")),
        "payout_ratio": calculate_ratio(current.get("dividend"), current.get("eps")),
    }

    for key, value in derived.items():
        if value is not None:
            enriched[key] = value

    return enriched
