import logging
from typing import Any, Dict, Optional

import google.generativeai as genai

from config import ExternalAPIConfig
from kessan.financial_metrics import format_number

logger = logging.getLogger(__name__)

PLACEHOLDER_KEYS = ("your-gemini-api-key", "test_gemini_api_key")

PROMPT_LINES = (
    ("revenue", "売上高"),
    ("operating_profit", "営業利益"),
    ("net_profit", "純利益"),
)


def build_analysis_prompt(financial_data: Dict[str, Any]) -> str:
    """決算データから分析用プロンプトを組み立てる"""
    current = financial_data.get("current_period") or {}
    previous = financial_data.get("previous_period") or {}

    prompt = "以下の財務データを分析してください：\n\n"
    prompt += "【当期】\n"
    for key, label in PROMPT_LINES:
        if current.get(key) is not None:
            prompt += f"{label}: {format_number(current[key])}\n"

    if previous.get("revenue") is not None:
        prompt += "\n【前期】\n"
        for key, label in PROMPT_LINES:
            if previous.get(key) is not None:
                prompt += f"{label}: {format_number(previous[key])}\n"

    prompt += "\n企業の財務状況について、成長性、収益性、安全性の観点から分析し、"
    prompt += "投資判断に有用な洞察を200文字以内で簡潔に提供してください。"

    return prompt


class GeminiSummarizer:
    """
    Gemini による決算サマリー生成（任意機能）

    APIキーが未設定またはプレースホルダーの場合は無効化され、常に None を返す。
    """

    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None):
        api_key = api_key if api_key is not None else ExternalAPIConfig.GEMINI_API_KEY
        self.model_name = model_name or ExternalAPIConfig.GEMINI_MODEL
        self.model = None

        if not api_key or any(placeholder in api_key for placeholder in PLACEHOLDER_KEYS):
            logger.warning("GEMINI_API_KEY is not set or is a placeholder.")
            return

        genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(self.model_name)

    @property
    def enabled(self) -> bool:
        return self.model is not None

    def analyze_financial_data(self, financial_data: Dict[str, Any]) -> Optional[str]:
        if not self.enabled:
            return None

        prompt = build_analysis_prompt(financial_data)
        try:
            response = self.model.generate_content(prompt)
            return response.text
        except Exception as e:
            logger.error(f"Gemini API エラー: {e}")
            return None
