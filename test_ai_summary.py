"""
Gemini AI分析のテスト（APIには接続しない）
"""

from unittest.mock import MagicMock

import pytest

from kessan import ai_summary
from kessan.ai_summary import GeminiSummarizer, build_analysis_prompt

FINANCIAL_DATA = {
    "current_period": {"revenue": 50000 * 10 ** 6, "operating_profit": 5000 * 10 ** 6},
    "previous_period": {"revenue": 45000 * 10 ** 6},
}


def test_build_analysis_prompt():
    prompt = build_analysis_prompt(FINANCIAL_DATA)

    assert "【当期】" in prompt
    assert "売上高: 50,000百万円" in prompt
    assert "営業利益: 5,000百万円" in prompt
    assert "【前期】" in prompt
    assert "売上高: 45,000百万円" in prompt
    assert "200文字以内" in prompt


def test_prompt_without_previous_period():
    prompt = build_analysis_prompt({"current_period": {"net_profit": 3000 * 10 ** 6}})

    assert "純利益: 3,000百万円" in prompt
    assert "【前期】" not in prompt


@pytest.fixture
def fake_genai(monkeypatch):
    genai = MagicMock()
    monkeypatch.setattr(ai_summary, "genai", genai)
    return genai


@pytest.mark.parametrize("api_key", ["", "your-gemini-api-key"])
def test_disabled_without_api_key(fake_genai, api_key):
    """APIキー未設定・プレースホルダーの場合は無効"""
    summarizer = GeminiSummarizer(api_key=api_key)

    assert not summarizer.enabled
    assert summarizer.analyze_financial_data(FINANCIAL_DATA) is None
    fake_genai.configure.assert_not_called()


def test_generates_summary(fake_genai):
    fake_genai.GenerativeModel.return_value.generate_content.return_value.text = "増収増益です。"

    summarizer = GeminiSummarizer(api_key="real-key", model_name="gemini-test")

    assert summarizer.enabled
    assert summarizer.analyze_financial_data(FINANCIAL_DATA) == "増収増益です。"
    fake_genai.configure.assert_called_once_with(api_key="real-key")
    fake_genai.GenerativeModel.assert_called_once_with("gemini-test")


def test_api_error_returns_none(fake_genai):
    fake_genai.GenerativeModel.return_value.generate_content.side_effect = RuntimeError("quota exceeded")

    assert GeminiSummarizer(api_key="real-key").analyze_financial_data(FINANCIAL_DATA) is None
