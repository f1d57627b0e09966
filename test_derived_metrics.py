"""
派生指標計算のテスト

成長率・営業利益率・配当性向の算出と、算出できない場合の省略を検証します。
"""

import pytest

from kessan.derived_metrics import (
    calculate_additional_metrics,
    calculate_growth_rate,
    calculate_ratio,
)


def test_growth_rate():
    assert calculate_growth_rate(110, 100) == 10.0
    assert calculate_growth_rate(50000, 45000) == 11.11
    # 当期がマイナスでも前期が正なら算出
    assert calculate_growth_rate(-50, 100) == -150.0
    assert calculate_growth_rate(0, 100) == -100.0


@pytest.mark.parametrize("current, previous", [
    (None, 100),
    (100, None),
    (100, 0),
    (100, -50),
])
def test_growth_rate_not_computable(current, previous):
    """前期が0以下・欠損の場合は算出しない"""
    assert calculate_growth_rate(current, previous) is None


def test_ratio():
    assert calculate_ratio(5000, 50000) == 10.0
    assert calculate_ratio(1, 3) == 33.33
    assert calculate_ratio(1, 0) is None
    assert calculate_ratio(1, -3) is None
    assert calculate_ratio(None, 3) is None


def test_additional_metrics():
    current = {
        "revenue": 50000.0,
        "operating_profit": 5000.0,
        "net_profit": 3000.0,
        "eps": 300.0,
        "dividend": 90.0,
    }
    previous = {"revenue": 45000.0, "net_profit": 2800.0}

    enriched = calculate_additional_metrics(current, previous)

    assert enriched["revenue_growth"] == 11.11
    assert enriched["profit_growth"] == 7.14
    assert enriched["operating_profit_margin"] == 10.0
    assert enriched["payout_ratio"] == 30.0
    assert enriched["revenue"] == 50000.0


def test_additional_metrics_do_not_modify_inputs():
    current = {"revenue": 100.0}
    previous = {"revenue": 80.0}

    enriched = calculate_additional_metrics(current, previous)

    assert enriched["revenue_growth"] == 25.0
    assert current == {"revenue": 100.0}
    assert previous == {"revenue": 80.0}


def test_additional_metrics_omit_what_cannot_be_computed():
    """ガード条件を満たさない指標はキーごと省略"""
    enriched = calculate_additional_metrics(
        {"revenue": 0.0, "operating_profit": 10.0, "dividend": 50.0, "eps": -5.0},
        {"revenue": 0.0},
    )

    for key in ("revenue_growth", "profit_growth", "operating_profit_margin", "payout_ratio"):
        assert key not in enriched


def test_derived_values_replace_reported_ones():
    """決算短信に記載された同名の値は算出値で上書き"""
    enriched = calculate_additional_metrics(
        {"revenue": 120.0, "revenue_growth": 99.0},
        {"revenue": 100.0},
    )
    assert enriched["revenue_growth"] == 20.0


def test_reported_value_kept_when_not_computable():
    enriched = calculate_additional_metrics({"revenue_growth": 5.5}, {})
    assert enriched["revenue_growth"] == 5.5
