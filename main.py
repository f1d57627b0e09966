"""
決算短信分析 CLI

使用例:
    python main.py                 # 前日分
    python main.py 2024-12-27
    python main.py 2024-12-27 --summary
"""

import argparse
import io
import logging
import sys
from datetime import date, datetime, timedelta
from typing import List, Optional

from config import AppConfig, setup_logging, validate_required_env_vars
from kessan.ai_summary import GeminiSummarizer
from kessan.kessan_analyzer import KessanAnalyzer
from locale_ja import msg

logger = logging.getLogger(__name__)


def parse_target_date(value: Optional[str]) -> date:
    """YYYY-MM-DD, or yesterday when omitted (ValueError on bad input)"""
    if not value:
        return date.today() - timedelta(days=1)
    return datetime.strptime(value, AppConfig.DATE_FORMAT).date()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=AppConfig.APP_DESCRIPTION)
    parser.add_argument("date", nargs="?", help="対象日付 (YYYY-MM-DD, 省略時は前日)")
    parser.add_argument("--summary", action="store_true", help="Gemini による AI 分析を付与する")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        target_date = parse_target_date(args.date)
    except ValueError:
        print(msg("ANALYZER", "invalid_date"))
        return 1

    setup_logging()

    for var in validate_required_env_vars():
        logger.warning(f"Environment variable not set: {var}")

    summarizer = GeminiSummarizer() if args.summary else None
    analyzer = KessanAnalyzer(summarizer=summarizer)

    results = analyzer.analyze_kessan_tanshin(target_date)
    return 0 if results is not None else 1


if __name__ == "__main__":
    # Windows環境での日本語出力対応
    if sys.platform == 'win32':
        sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')

    sys.exit(main())
