"""
Page Content Extraction

Turns raw landing-page HTML into a PageContent record using the skill's page
enrichment config:
- Standard fields (title, h1, meta description, canonical, word count)
- JSON-LD structured data types plus flag-if-missing / flag-if-present errors
- Content signals (CSS selector presence)
- Page type classification from URL patterns

Markup is parsed only; scripts are never executed.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from bs4 import BeautifulSoup

from src.agents.interplay.models import PageContent
from src.agents.skills.skill_base import (
    ContentSignal,
    PageClassificationConfig,
    PageEnrichmentConfig,
    SchemaExtractionConfig,
)

logger = logging.getLogger(__name__)

CONTENT_PREVIEW_LENGTH = 500

# Elements removed before reading visible text
REMOVE_TAGS = ("script", "style", "noscript", "iframe", "svg")

INVALID_JSON_LD_ERROR = "Invalid JSON-LD syntax"

_WHITESPACE_RE = re.compile(r"\s+")


# ============================================================================
# STRUCTURED DATA
# ============================================================================

def extract_schema_types(data: Any) -> List[str]:
    """Collect @type values from a JSON-LD document (arrays and @graph included)."""
    types: List[str] = []

    if isinstance(data, list):
        for item in data:
            types.extend(extract_schema_types(item))
    elif isinstance(data, dict):
        declared = data.get("@type")
        if isinstance(declared, str):
            types.append(declared)
        elif isinstance(declared, list):
            types.extend(t for t in declared if isinstance(t, str))

        graph = data.get("@graph")
        if isinstance(graph, list):
            types.extend(extract_schema_types(graph))

    return types


def extract_schema(
    soup: BeautifulSoup,
    config: Optional[SchemaExtractionConfig],
) -> Tuple[List[str], List[str]]:
    """
    Read every JSON-LD block and check it against the skill's schema rules.

    Must run before script tags are stripped from the soup.

    Returns:
        (detected schema types, schema error strings)
    """
    detected: List[str] = []
    errors: List[str] = []

    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        try:
            data = json.loads(script.string or script.get_text() or "")
        except (json.JSONDecodeError, TypeError):
            errors.append(INVALID_JSON_LD_ERROR)
            continue
        detected.extend(extract_schema_types(data))

    if config is not None:
        for required in config.flag_if_missing:
            if required not in detected:
                errors.append(f"Missing recommended schema: {required}")
        for invalid in config.flag_if_present:
            if invalid in detected:
                errors.append(f"Inappropriate schema present: {invalid}")

    return detected, errors


# ============================================================================
# SIGNALS / CLASSIFICATION
# ============================================================================

def detect_content_signals(soup: BeautifulSoup, signals: Tuple[ContentSignal, ...]) -> Dict[str, bool]:
    result: Dict[str, bool] = {}
    for signal in signals:
        try:
            result[signal.id] = soup.select_one(signal.selector) is not None
        except Exception as e:
            logger.debug(f"[RESEARCHER] Invalid selector for signal '{signal.id}': {e}")
            result[signal.id] = False
    return result


def classify_page(url: str, config: Optional[PageClassificationConfig]) -> Tuple[str, float]:
    """
    Classify a page by testing its URL against the skill's patterns.

    The highest-confidence match wins if it reaches the confidence threshold;
    otherwise the declared default type is returned.
    """
    if config is None:
        return "unknown", 0.0

    best_type: Optional[str] = None
    best_confidence = -1.0
    for pattern in config.patterns:
        try:
            matched = re.search(pattern.pattern, url, re.IGNORECASE) is not None
        except re.error:
            logger.debug(f"[RESEARCHER] Invalid classification pattern: {pattern.pattern}")
            continue
        if matched and pattern.confidence > best_confidence:
            best_type = pattern.page_type
            best_confidence = pattern.confidence

    if best_type is not None and best_confidence >= config.confidence_threshold:
        return best_type, best_confidence
    return config.default_type, 0.0


# ============================================================================
# ENTRY POINT
# ============================================================================

def _text_or_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def extract_page_content(html: str, url: str, config: Optional[PageEnrichmentConfig] = None) -> PageContent:
    """
    Extract a PageContent record from raw HTML.

    Args:
        html: Raw page markup
        url: Page URL (used for classification)
        config: Skill page enrichment config; None extracts standard fields only
    """
    soup = BeautifulSoup(html, "html.parser")

    schema_types, schema_errors = extract_schema(soup, config.schema_extraction if config else None)

    for tag in soup.find_all(REMOVE_TAGS):
        tag.decompose()

    standard = config.standard_extractions if config else None

    title = None
    if standard is None or standard.title:
        title_tag = soup.find("title")
        title = _text_or_none(title_tag.get_text()) if title_tag else None

    h1 = None
    if standard is None or standard.h1:
        h1_tag = soup.find("h1")
        h1 = _text_or_none(h1_tag.get_text(" ")) if h1_tag else None

    meta_description = None
    if standard is None or standard.meta_description:
        meta = soup.find("meta", attrs={"name": "description"})
        meta_description = _text_or_none(meta.get("content")) if meta else None

    canonical_url = None
    if standard is None or standard.canonical_url:
        link = soup.select_one('link[rel="canonical"]')
        canonical_url = _text_or_none(link.get("href")) if link else None

    body = soup.body or soup
    clean_text = _WHITESPACE_RE.sub(" ", body.get_text(" ")).strip()
    word_count = 0
    if (standard is None or standard.word_count) and clean_text:
        word_count = len(clean_text.split(" "))

    signals = detect_content_signals(soup, config.content_signals) if config else {}
    page_type, confidence = classify_page(url, config.page_classification if config else None)

    return PageContent(
        word_count=word_count,
        title=title,
        h1=h1,
        meta_description=meta_description,
        canonical_url=canonical_url,
        content_preview=clean_text[:CONTENT_PREVIEW_LENGTH],
        schema_types=tuple(schema_types),
        schema_errors=tuple(schema_errors),
        content_signals=signals,
        page_type=page_type,
        page_type_confidence=confidence,
    )
