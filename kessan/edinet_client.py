"""
EDINET API Client

Fetches the daily document list and downloads filing archives from the
EDINET API v2. Failures are logged and reported as None so that a batch
can continue with the next filing.
"""

import logging
import os
import re
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

import requests

from config import ExternalAPIConfig
from locale_ja import msg

logger = logging.getLogger(__name__)

DOCUMENTS_PATH = "/api/v2/documents.json"
DOCUMENT_PATH = "/api/v2/documents/{doc_id}"

# documents.json: 1=metadata only, 2=metadata + results
DOCUMENT_LIST_TYPE = 2

# documents/{docID}: 1=XBRL package (ZIP), 2=PDF
XBRL_DOWNLOAD_TYPE = 1
PDF_DOWNLOAD_TYPE = 2

KESSAN_KEYWORDS = ("決算短信", "四半期決算短信")


def sanitize_filename(filename: str) -> str:
    """Keep the basename and replace anything outside [A-Za-z0-9_.-] with '_'"""
    basename = os.path.basename(filename)
    return re.sub(r"[^\w.\-]", "_", basename, flags=re.ASCII)


class EdinetClient:
    """
    EDINET API v2 クライアント

    使用例:
        client = EdinetClient()
        documents = client.fetch_documents(date(2024, 12, 27))
        for doc in client.filter_kessan_tanshin(documents):
            archive = client.download_xbrl(doc["docID"])
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key if api_key is not None else ExternalAPIConfig.EDINET_API_KEY
        self.base_url = (base_url or ExternalAPIConfig.EDINET_BASE_URL).rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": ExternalAPIConfig.EDINET_USER_AGENT,
            "Accept": "application/json",
        })

        if not self.api_key:
            logger.warning(msg("EDINET", "api_key_missing"))
            logger.warning(msg("EDINET", "api_key_hint"))

    def _params(self, **params: Any) -> Dict[str, Any]:
        if self.api_key:
            params["Subscription-Key"] = self.api_key
        return params

    def fetch_documents(self, target_date: Union[date, datetime, str]) -> Optional[Dict[str, Any]]:
        """
        Get the list of documents submitted on a specific date.

        Returns:
            The decoded JSON response (with a "results" list), or None on failure
        """
        if isinstance(target_date, (date, datetime)):
            target_date = target_date.strftime("%Y-%m-%d")

        url = f"{self.base_url}{DOCUMENTS_PATH}"
        params = self._params(date=target_date, type=DOCUMENT_LIST_TYPE)

        try:
            response = self.session.get(url, params=params, timeout=ExternalAPIConfig.REQUEST_TIMEOUT)
        except requests.RequestException as e:
            logger.error(msg("EDINET", "network_error", error=e))
            return None

        if not response.ok:
            self._handle_error_response(response)
            return None

        try:
            return response.json()
        except ValueError:
            logger.error(msg("EDINET", "not_json"))
            logger.error(f"Content-Type: {response.headers.get('content-type')}")
            logger.error(f"Body preview: {response.text[:200]}")
            return None

    def _handle_error_response(self, response: requests.Response) -> None:
        logger.error(msg("EDINET", "http_error", status=response.status_code, reason=response.reason))
        if response.status_code != 401:
            return

        content_type = response.headers.get("content-type", "")
        if "application/json" in content_type:
            try:
                error_data = response.json()
            except ValueError:
                error_data = None
            if isinstance(error_data, dict) and error_data.get("message"):
                logger.error(msg("EDINET", "auth_error", message=error_data["message"]))
        logger.error(msg("EDINET", "api_key_hint"))

    @staticmethod
    def filter_kessan_tanshin(documents: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Select earnings-report (決算短信) filings from a document list response"""
        if not documents or not documents.get("results"):
            return []

        return [
            doc for doc in documents["results"]
            if doc.get("docDescription")
            and any(keyword in doc["docDescription"] for keyword in KESSAN_KEYWORDS)
        ]

    def download_xbrl(self, doc_id: str) -> Optional[bytes]:
        """Download the XBRL package (ZIP bytes) of a filing"""
        return self._download(doc_id, XBRL_DOWNLOAD_TYPE, "xbrl")

    def download_document(self, doc_id: str) -> Optional[bytes]:
        """Download the PDF rendition of a filing"""
        return self._download(doc_id, PDF_DOWNLOAD_TYPE, "pdf")

    def _download(self, doc_id: str, download_type: int, file_format: str) -> Optional[bytes]:
        url = f"{self.base_url}{DOCUMENT_PATH.format(doc_id=doc_id)}"
        params = self._params(type=download_type)

        try:
            response = self.session.get(url, params=params, timeout=ExternalAPIConfig.DOWNLOAD_TIMEOUT)
        except requests.RequestException as e:
            logger.error(msg("EDINET", "download_error", format=file_format.upper(), error=e))
            return None

        if not response.ok:
            logger.error(msg("EDINET", "download_failed", format=file_format.upper(), status=response.status_code))
            return None

        # EDINET answers missing documents with a JSON error body and status 200
        if "application/json" in response.headers.get("content-type", ""):
            logger.error(msg("EDINET", "download_failed", format=file_format.upper(), status=response.text[:200]))
            return None

        logger.info(msg("EDINET", "downloaded", format=file_format.upper(), doc_id=doc_id, size=len(response.content)))
        return response.content
