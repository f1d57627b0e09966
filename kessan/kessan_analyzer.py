"""
決算短信 Batch Analyzer

Fetches the filings of one day from EDINET, keeps the 決算短信, extracts
their XBRL figures, grades growth / profitability / ROE, prints a summary
and saves the results as JSON.
"""

import json
import logging
import os
import time
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

from config import AppConfig, DataConfig
from kessan.edinet_client import EdinetClient, sanitize_filename
from kessan.exceptions import XbrlError
from kessan.financial_metrics import ANALYSIS_PATTERNS, display_name, format_number
from kessan.xbrl_parser import ExtractionResult, parse_archive
from locale_ja import msg

logger = logging.getLogger(__name__)


def analyze_growth(revenue_growth: float) -> Dict[str, str]:
    if revenue_growth >= 10:
        level = msg("ANALYSIS", "high_growth")
    elif revenue_growth >= 0:
        level = msg("ANALYSIS", "stable_growth")
    else:
        level = msg("ANALYSIS", "declining")
    return {"level": level, "comment": msg("ANALYSIS", "growth_comment", value=revenue_growth)}


def analyze_profitability(operating_profit_margin: float) -> Dict[str, str]:
    if operating_profit_margin >= 15:
        level = msg("ANALYSIS", "high_profitability")
    elif operating_profit_margin >= 5:
        level = msg("ANALYSIS", "standard_profitability")
    else:
        level = msg("ANALYSIS", "low_profitability")
    return {"level": level, "comment": msg("ANALYSIS", "profitability_comment", value=operating_profit_margin)}


def analyze_roe(roe: float) -> Dict[str, str]:
    if roe >= 15:
        level = msg("ANALYSIS", "roe_excellent")
    elif roe >= 8:
        level = msg("ANALYSIS", "roe_good")
    else:
        level = msg("ANALYSIS", "roe_needs_improvement")
    return {"level": level, "comment": msg("ANALYSIS", "roe_comment", value=roe)}


def perform_analysis(current: Dict[str, float]) -> Dict[str, Dict[str, str]]:
    """
    Grade the current period. Only metrics present in the data are graded.
    """
    analysis = {}
    if current.get("revenue_growth") is not None:
        analysis["growth"] = analyze_growth(current["revenue_growth"])
    if current.get("operating_profit_margin") is not None:
        analysis["profitability"] = analyze_profitability(current["operating_profit_margin"])
    if current.get("roe") is not None:
        analysis["roe"] = analyze_roe(current["roe"])
    return analysis


def analysis_label(key: str) -> str:
    """成長性分析 / 収益性分析 for pattern-backed keys, the metric name otherwise"""
    pattern = ANALYSIS_PATTERNS.get(f"{key}_analysis")
    if pattern is not None:
        return pattern["name"]
    return display_name(key)


def build_company_info(doc: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "name": doc.get("filerName"),
        "sec_code": doc.get("secCode"),
        "doc_id": doc.get("docID"),
        "submit_date": doc.get("submitDateTime"),
        "doc_description": doc.get("docDescription"),
    }


class KessanAnalyzer:
    """
    決算短信の一括分析

    使用例:
        analyzer = KessanAnalyzer()
        results = analyzer.analyze_kessan_tanshin(date(2024, 12, 27))
    """

    def __init__(
        self,
        client: Optional[EdinetClient] = None,
        data_dir: Optional[str] = None,
        summarizer: Any = None,
        request_interval: Optional[float] = None,
    ):
        """
        Args:
            client: EDINET client (created from config when omitted)
            data_dir: root of the json/pdf/xbrl output directories
            summarizer: optional object with analyze_financial_data(dict) -> str
            request_interval: pause between filings in seconds
        """
        self.client = client or EdinetClient()
        self.data_dir = Path(data_dir or DataConfig.DATA_DIR)
        self.summarizer = summarizer
        self.request_interval = (
            DataConfig.REQUEST_INTERVAL_SECONDS if request_interval is None else request_interval
        )

        for sub_dir in DataConfig.SUB_DIRS:
            (self.data_dir / sub_dir).mkdir(parents=True, exist_ok=True)

    def analyze_kessan_tanshin(self, target_date: date) -> Optional[List[Dict[str, Any]]]:
        """
        Analyze all 決算短信 submitted on ``target_date``.

        Returns:
            The analysis results, or None when the document list could not be fetched
        """
        print(msg("ANALYZER", "title"))
        print(msg("ANALYZER", "target_date", date=target_date))
        print("=" * 50)

        documents = self.client.fetch_documents(target_date)
        if documents is None:
            print(msg("ANALYZER", "fetch_failed"))
            return None

        kessan_docs = self.client.filter_kessan_tanshin(documents)
        print("\n" + msg("ANALYZER", "kessan_count", count=len(kessan_docs)))

        results = []
        for index, doc in enumerate(kessan_docs, start=1):
            print("\n" + msg(
                "ANALYZER", "processing",
                index=index, total=len(kessan_docs),
                name=doc.get("filerName"), sec_code=doc.get("secCode"),
            ))

            result = self.process_document(doc)
            if result:
                results.append(result)

            if self.request_interval and index < len(kessan_docs):
                time.sleep(self.request_interval)

        self.display_summary(results)
        self.save_results(results, target_date)

        return results

    def process_document(self, doc: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """One filing: download (or reuse) its archive, extract, grade"""
        try:
            archive_bytes = self._load_archive(doc)
            if archive_bytes is None:
                return None

            financial_data = self.extract_financial_data(archive_bytes)
            if financial_data is None:
                return None

            return self.build_analysis_result(doc, financial_data)

        except Exception as e:
            logger.exception(f"Failed to process {doc.get('docID')}")
            print(msg("ANALYZER", "error", error=e))
            return None

    def _archive_path(self, doc: Dict[str, Any]) -> Path:
        filename = sanitize_filename(f"{doc.get('secCode')}_{doc.get('docID')}.xbrl.zip")
        return self.data_dir / "xbrl" / filename

    def _load_archive(self, doc: Dict[str, Any]) -> Optional[bytes]:
        archive_path = self._archive_path(doc)
        if archive_path.exists():
            logger.info(f"Using cached archive: {archive_path}")
            return archive_path.read_bytes()

        archive_bytes = self.client.download_xbrl(doc.get("docID"))
        if archive_bytes is None:
            print(msg("ANALYZER", "download_failed"))
            return None

        archive_path.write_bytes(archive_bytes)
        return archive_bytes

    def extract_financial_data(self, archive_bytes: bytes) -> Optional[ExtractionResult]:
        """
        Parse an archive. Unusable archives, malformed documents and filings
        without current-period facts all yield None.
        """
        if len(archive_bytes) > DataConfig.MAX_ARCHIVE_BYTES:
            print(msg("ANALYZER", "archive_too_large", size=len(archive_bytes)))
            return None

        try:
            financial_data = parse_archive(archive_bytes)
        except XbrlError as e:
            logger.warning(f"XBRL extraction failed: {e}")
            print(msg("ANALYZER", "extract_failed"))
            return None

        if not financial_data.has_current_period:
            print(msg("ANALYZER", "extract_failed"))
            return None

        return financial_data

    def build_analysis_result(self, doc: Dict[str, Any], financial_data: ExtractionResult) -> Dict[str, Any]:
        data = financial_data.to_dict()
        result = {
            "company_info": build_company_info(doc),
            "financial_data": data,
            "analysis": perform_analysis(financial_data.current_period),
        }

        if self.summarizer is not None:
            summary = self.summarizer.analyze_financial_data(data)
            if summary:
                result["ai_summary"] = summary

        print(msg("ANALYZER", "completed"))
        return result

    def display_summary(self, results: List[Dict[str, Any]]) -> None:
        print("\n" + "=" * 70)
        print(msg("ANALYZER", "summary_title"))
        print("=" * 70)

        for result in results:
            info = result["company_info"]
            current = result["financial_data"]["current_period"]

            print("\n" + msg("DISPLAY", "company", name=info["name"], sec_code=info["sec_code"]))
            print(msg("DISPLAY", "document", description=info["doc_description"]))

            for key in ("revenue", "operating_profit", "net_profit"):
                if current.get(key) is not None:
                    print(msg("DISPLAY", key, value=format_number(current[key])))

            for key, value in result["analysis"].items():
                label = analysis_label(key)
                print(msg("DISPLAY", "analysis_line", metric=label, level=value["level"], comment=value["comment"]))

            if result.get("ai_summary"):
                print(msg("DISPLAY", "ai_summary", text=result["ai_summary"]))

    def save_results(self, results: List[Dict[str, Any]], target_date: date) -> Path:
        filename = self.data_dir / "json" / f"kessan_analysis_{target_date.strftime('%Y%m%d')}.json"

        payload = {
            "analysis_date": target_date.strftime(AppConfig.DATE_FORMAT),
            "total_count": len(results),
            "results": results,
        }
        with open(filename, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)

        print("\n" + msg("ANALYZER", "saved", path=os.fspath(filename)))
        return filename
