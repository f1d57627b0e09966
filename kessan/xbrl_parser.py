"""
XBRL Extraction Engine

Extracts 決算短信 figures from an EDINET filing archive:

1. locate the XBRL instance inside the ZIP archive
2. index the xbrli:context declarations by id
3. walk every element, resolve it to a canonical metric, normalize its value
   and bucket it into current / previous / forecast periods
4. derive growth rates and ratios from the bucketed facts

Every call is a pure function of its input bytes and the fixed metric
dictionary. Nothing is shared between calls, so independent archives may be
parsed in parallel.
"""

import io
import logging
import math
import re
import zipfile
import zlib
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from pathlib import PurePosixPath
from typing import Dict, Optional, Union

from lxml import etree

from config import AppConfig, FiscalPeriodConfig
from kessan.derived_metrics import calculate_additional_metrics
from kessan.exceptions import ArchiveFormatError, MalformedDocumentError
from kessan.financial_metrics import resolve_metric_key
from locale_ja import msg

logger = logging.getLogger(__name__)

XBRLI_NS = "http://www.xbrl.org/2003/instance"

PUBLIC_DOC_DIR = "PublicDoc"
XBRL_SUFFIX = ".xbrl"

CURRENT_PERIOD = "current_period"
PREVIOUS_PERIOD = "previous_period"
FORECAST = "forecast"

# Optional minus, digits, optional fraction. Nothing else.
_NUMERIC_PATTERN = re.compile(r"-?[0-9]+(\.[0-9]+)?")

# Leading signed integer of a scale attribute; "6.0" reads as 6, "abc" as 0
_SCALE_PATTERN = re.compile(r"\s*([+-]?[0-9]+)")

# xs:date with an optional timezone: 2023-09-30, 2023-09-30Z, 2023-09-30+09:00
_DATE_PATTERN = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})(Z|[+-][0-9]{2}:[0-9]{2})?")

# Second unit-scaling signal, applied on top of the scale attribute
MILLIONS_UNIT_MARKER = "Millions"
MILLIONS_MULTIPLIER = 1_000_000


# ============================================================
# DATA MODEL
# ============================================================

class ContextKind(str, Enum):
    INSTANT = "instant"
    DURATION = "duration"


@dataclass(frozen=True)
class Context:
    """
    xbrli:context の期間情報

    Dates are kept as the raw text of the document. A context with neither
    an instant nor a start/end pair has no kind and is never bucketed.
    """

    id: str
    kind: Optional[ContextKind] = None
    instant_date: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None


@dataclass
class ExtractionResult:
    """Facts extracted from one archive, bucketed by period"""

    current_period: Dict[str, float] = field(default_factory=dict)
    previous_period: Dict[str, float] = field(default_factory=dict)
    forecast: Dict[str, float] = field(default_factory=dict)
    extracted_at: datetime = field(default_factory=datetime.now)

    @property
    def has_current_period(self) -> bool:
        return bool(self.current_period)

    def to_dict(self) -> Dict[str, object]:
        return {
            CURRENT_PERIOD: dict(self.current_period),
            PREVIOUS_PERIOD: dict(self.previous_period),
            FORECAST: dict(self.forecast),
            "extracted_at": self.extracted_at.strftime(AppConfig.DATETIME_FORMAT),
        }


# ============================================================
# ARCHIVE LOCATOR
# ============================================================

def _is_public_doc_xbrl(name: str) -> bool:
    path = PurePosixPath(name)
    return path.suffix == XBRL_SUFFIX and path.parent.name == PUBLIC_DOC_DIR


def locate_xbrl(archive_bytes: bytes) -> bytes:
    """
    Find the XBRL instance inside a filing archive.

    The first entry sitting directly in a PublicDoc directory wins,
    otherwise the first entry ending in .xbrl (archive order).

    Raises:
        ArchiveFormatError: the bytes are not a ZIP archive, no entry matches,
            or the entry cannot be decompressed
    """
    try:
        with zipfile.ZipFile(io.BytesIO(archive_bytes)) as zip_file:
            names = [info.filename for info in zip_file.infolist() if not info.is_dir()]

            entry = next((name for name in names if _is_public_doc_xbrl(name)), None)
            if entry is None:
                entry = next((name for name in names if name.endswith(XBRL_SUFFIX)), None)

            if entry is None:
                raise ArchiveFormatError(msg("XBRL", "not_found"))

            logger.info(f"Located XBRL entry: {entry}")
            return zip_file.read(entry)

    # Corrupt entry data, unsupported compression and encrypted entries
    except (zipfile.BadZipFile, zlib.error, NotImplementedError, RuntimeError) as e:
        raise ArchiveFormatError(msg("XBRL", "invalid_archive")) from e


# ============================================================
# CONTEXT INDEX
# ============================================================

def _child_text(parent: etree._Element, local_name: str) -> Optional[str]:
    child = parent.find(f"{{{XBRLI_NS}}}{local_name}")
    if child is None or child.text is None:
        return None
    text = child.text.strip()
    return text or None


def build_contexts(root: etree._Element) -> Dict[str, Context]:
    """
    Index every xbrli:context by id.

    Contexts without usable period dates are still indexed so that facts
    referring to them resolve, but they never classify into a period.
    """
    contexts: Dict[str, Context] = {}

    for context_elem in root.iter(f"{{{XBRLI_NS}}}context"):
        context_id = context_elem.get("id")
        if not context_id:
            continue

        period = context_elem.find(f"{{{XBRLI_NS}}}period")
        if period is None:
            contexts[context_id] = Context(id=context_id)
            continue

        instant = _child_text(period, "instant")
        start_date = _child_text(period, "startDate")
        end_date = _child_text(period, "endDate")

        if instant:
            contexts[context_id] = Context(
                id=context_id, kind=ContextKind.INSTANT, instant_date=instant
            )
        elif start_date and end_date:
            contexts[context_id] = Context(
                id=context_id,
                kind=ContextKind.DURATION,
                start_date=start_date,
                end_date=end_date,
            )
        else:
            contexts[context_id] = Context(id=context_id)

    logger.info(f"Indexed {len(contexts)} contexts")
    return contexts


# ============================================================
# PERIOD CLASSIFICATION
# ============================================================

def _parse_date(text: Optional[str]) -> Optional[date]:
    if not text:
        return None
    match = _DATE_PATTERN.fullmatch(text.strip())
    if not match:
        return None
    try:
        return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        return None


def is_current_period(
    context: Context,
    fiscal_year_start: date = FiscalPeriodConfig.CURRENT_FISCAL_YEAR_START,
) -> bool:
    if context.kind != ContextKind.DURATION:
        return False
    end_date = _parse_date(context.end_date)
    return end_date is not None and end_date >= fiscal_year_start


def is_previous_period(
    context: Context,
    fiscal_year_start: date = FiscalPeriodConfig.CURRENT_FISCAL_YEAR_START,
    previous_year_start: date = FiscalPeriodConfig.PREVIOUS_FISCAL_YEAR_START,
) -> bool:
    if context.kind != ContextKind.DURATION:
        return False
    end_date = _parse_date(context.end_date)
    return end_date is not None and previous_year_start <= end_date < fiscal_year_start


def is_forecast(context_id: str) -> bool:
    return "Forecast" in context_id or "forecast" in context_id


def classify_period(context: Context) -> Optional[str]:
    """
    Pick the bucket for a context: current, then previous, then forecast by id.

    A forecast-named context whose end date falls in the current period is
    bucketed as current.
    """
    if is_current_period(context):
        return CURRENT_PERIOD
    if is_previous_period(context):
        return PREVIOUS_PERIOD
    if is_forecast(context.id):
        return FORECAST
    return None


# ============================================================
# VALUE NORMALIZER
# ============================================================

def _scale_exponent(scale: str) -> int:
    match = _SCALE_PATTERN.match(scale)
    return int(match.group(1)) if match else 0


def normalize_value(
    text: Optional[str],
    scale: Optional[str] = None,
    unit_ref: Optional[str] = None,
) -> Optional[float]:
    """
    Convert the text of a fact to a number.

    Args:
        text: element text, thousands separators allowed
        scale: XBRL scale attribute, a signed power-of-ten exponent; only its
            leading integer is read and text without one counts as 0
        unit_ref: unitRef attribute; a "Millions" unit multiplies by 1,000,000
            in addition to the scale

    Returns:
        The normalized finite number, or None when the text is not numeric
    """
    if text is None:
        return None

    text = text.strip()
    if not text:
        return None

    text = text.replace(",", "")
    if not _NUMERIC_PATTERN.fullmatch(text):
        return None

    value = float(text)

    try:
        if scale is not None:
            value *= 10.0 ** _scale_exponent(scale)

        # Stacks with the scale attribute: a scale="6" fact with a Millions
        # unit is multiplied twice.
        if unit_ref and MILLIONS_UNIT_MARKER in unit_ref:
            value *= MILLIONS_MULTIPLIER
    except OverflowError:
        return None

    if not math.isfinite(value):
        return None

    return value


# ============================================================
# FACT EXTRACTOR
# ============================================================

def extract_facts(root: etree._Element, contexts: Dict[str, Context]) -> Dict[str, Dict[str, float]]:
    """
    Walk all elements in document order and bucket recognized facts.

    Elements that are structural, unrecognized, unresolvable or non-numeric
    are skipped. A later fact overwrites an earlier one in the same bucket.
    """
    buckets: Dict[str, Dict[str, float]] = {
        CURRENT_PERIOD: {},
        PREVIOUS_PERIOD: {},
        FORECAST: {},
    }
    skipped = 0

    for elem in root.iter():
        if not isinstance(elem.tag, str):
            continue

        qname = etree.QName(elem)
        if qname.namespace == XBRLI_NS:
            continue

        metric_key = resolve_metric_key(qname.localname)
        if not metric_key:
            continue

        context_ref = elem.get("contextRef")
        context = contexts.get(context_ref) if context_ref else None
        if context is None:
            logger.debug(f"Skipping {qname.localname}: unresolved context {context_ref!r}")
            skipped += 1
            continue

        value = normalize_value(elem.text, elem.get("scale"), elem.get("unitRef"))
        if value is None:
            logger.debug(f"Skipping {qname.localname}: non-numeric value {elem.text!r}")
            skipped += 1
            continue

        period = classify_period(context)
        if period is None:
            continue

        buckets[period][metric_key] = value

    logger.info(
        f"Extracted facts: current={len(buckets[CURRENT_PERIOD])}, "
        f"previous={len(buckets[PREVIOUS_PERIOD])}, "
        f"forecast={len(buckets[FORECAST])}, skipped={skipped}"
    )
    return buckets


# ============================================================
# ENTRY POINTS
# ============================================================

def parse_xbrl(xbrl_content: Union[bytes, str]) -> ExtractionResult:
    """
    Parse an XBRL instance document and return its bucketed facts.

    Raises:
        MalformedDocumentError: the document is not well-formed XML
    """
    if isinstance(xbrl_content, str):
        xbrl_content = xbrl_content.encode("utf-8")

    # One parser per call; lxml parsers must not be shared across threads
    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(xbrl_content, parser=parser)
    except (etree.XMLSyntaxError, ValueError) as e:
        raise MalformedDocumentError(msg("XBRL", "malformed", error=e)) from e

    contexts = build_contexts(root)
    buckets = extract_facts(root, contexts)

    current_period = calculate_additional_metrics(
        buckets[CURRENT_PERIOD], buckets[PREVIOUS_PERIOD]
    )

    return ExtractionResult(
        current_period=current_period,
        previous_period=buckets[PREVIOUS_PERIOD],
        forecast=buckets[FORECAST],
    )


def parse_archive(archive_bytes: bytes) -> ExtractionResult:
    """
    Locate and parse the XBRL instance inside a filing archive.

    Raises:
        ArchiveFormatError: no usable XBRL entry (treat as "no data")
        MalformedDocumentError: the XBRL entry is not well-formed
    """
    return parse_xbrl(locate_xbrl(archive_bytes))


def parse_zip_file(zip_path: str) -> ExtractionResult:
    """Read an archive from disk and parse it (FileNotFoundError propagates)"""
    with open(zip_path, "rb") as f:
        return parse_archive(f.read())
