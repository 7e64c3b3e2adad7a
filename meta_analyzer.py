# meta_analyzer.py
# Fetch, extraction and analysis logic for the SEO Meta Tag Analyzer
# Version: 2026-10-18

import json
import logging
import os
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote, urlparse

import requests
from requests import Session
from requests.exceptions import RequestException, Timeout
from bs4 import BeautifulSoup
import validators  # For URL validation

logger = logging.getLogger("meta_analyzer")

# --- Configuration & Constants ---
USER_AGENT: str = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/108.0.0.0 Safari/537.36"
REQUEST_TIMEOUT: float = float(os.environ.get('META_ANALYZER_TIMEOUT') or 15)  # seconds

# Optional pass-through transport, e.g. "https://api.allorigins.win/raw?url={url}"
PROXY_TEMPLATE: Optional[str] = os.environ.get('META_ANALYZER_PROXY') or None

IMPORTANT_FIELDS: Tuple[str, ...] = ('title', 'description', 'og_image')

FIELD_LABELS: Dict[str, str] = {
    'source_url': 'URL',
    'title': 'Title',
    'description': 'Description',
    'keywords': 'Keywords',
    'og_image': 'OG Image',
    'canonical_url': 'Canonical URL',
    'robots': 'Robots',
    'twitter_card': 'Twitter Card',
}

EXPORT_KEYS: Dict[str, str] = {
    'source_url': 'sourceUrl',
    'title': 'title',
    'description': 'description',
    'keywords': 'keywords',
    'og_image': 'ogImage',
    'canonical_url': 'canonicalUrl',
    'robots': 'robots',
    'twitter_card': 'twitterCard',
}


# --- Errors ---

class MetaAnalyzerError(Exception):
    """Base class for failures of a single analysis."""


class InvalidUrlError(MetaAnalyzerError, ValueError):
    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Invalid URL: {url!r}. Please enter a full URL starting with http:// or https://")


class FetchError(MetaAnalyzerError):
    def __init__(self, url: str, reason: str, status_code: Optional[int] = None):
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"Could not fetch {url}: {reason}")


# --- Data Model ---

@dataclass(frozen=True)
class MetadataRecord:
    """
    SEO metadata extracted from one page.

    Every field is either the literal text found in the markup (possibly an
    empty string) or None when the tag or attribute is not there.
    """
    source_url: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    keywords: Optional[str] = None
    og_image: Optional[str] = None
    canonical_url: Optional[str] = None
    robots: Optional[str] = None
    twitter_card: Optional[str] = None


@dataclass(frozen=True)
class Recommendation:
    heading: str
    tips: Tuple[str, ...]


@dataclass(frozen=True)
class AnalysisReport:
    record: MetadataRecord
    missing_fields: Tuple[str, ...]
    recommendations: Tuple[Recommendation, ...]


RECOMMENDATIONS: Dict[str, Recommendation] = {
    'title': Recommendation(
        heading="Add a Title Tag",
        tips=(
            "Keep it under 60 characters",
            "Include your primary keyword",
            "Make it accurately describe the page content",
            "Make it unique for each page",
        ),
    ),
    'description': Recommendation(
        heading="Add a Meta Description",
        tips=(
            "Keep it under 160 characters",
            "Include relevant keywords naturally",
            "Write a compelling summary of the page",
            "Encourage users to click through",
        ),
    ),
    'og_image': Recommendation(
        heading="Add an Open Graph Image",
        tips=(
            "Use an eye-catching, relevant image",
            "Recommended size: 1200×630 pixels",
            "Use JPG or PNG format",
            "Keep the file size under 1MB",
        ),
    ),
}


# --- Helper Functions ---

def is_valid_url(url: str) -> bool:
    """Validate the URL format (absolute http/https URL)."""
    if not url or urlparse(url).scheme not in ('http', 'https'):
        return False
    try:
        return bool(validators.url(url, simple_host=True))
    except Exception:
        return False


def build_fetch_url(url: str, proxy_template: Optional[str] = None) -> str:
    """Returns the URL actually requested, routed through the proxy template if one is set."""
    if not proxy_template:
        return url
    return proxy_template.format(url=quote(url, safe=''))


def fetch_markup(
    url: str,
    session: Optional[Session] = None,
    proxy_template: Optional[str] = PROXY_TEMPLATE,
    timeout: float = REQUEST_TIMEOUT
) -> str:
    """
    Fetches the raw HTML of a URL.

    Args:
        url: The page URL.
        session: Optional requests Session to send the request with.
        proxy_template: Optional "{url}" template of a pass-through proxy.
        timeout: Request timeout in seconds.

    Returns:
        The page markup as text.

    Raises:
        FetchError: On network failure, a non-success status or an empty body.
    """
    headers: Dict[str, str] = {'User-Agent': USER_AGENT}
    request_url: str = build_fetch_url(url, proxy_template)
    http = session or requests
    logger.debug("Fetching %s (via %s)", url, request_url)
    try:
        response = http.get(request_url, headers=headers, timeout=timeout)
        response.raise_for_status()
    except Timeout as e:
        logger.warning("Timed out fetching %s", url)
        raise FetchError(url, f"request timed out after {timeout:g} seconds") from e
    except RequestException as e:
        status_code: Optional[int] = getattr(e.response, 'status_code', None)
        logger.warning("Failed to fetch %s: %s", url, e)
        raise FetchError(url, str(e), status_code) from e

    # requests falls back to ISO-8859-1 when the server sends no charset
    if response.encoding is None or response.encoding.upper() == 'ISO-8859-1':
        response.encoding = response.apparent_encoding or 'utf-8'

    markup: str = response.text
    if not markup or not markup.strip():
        logger.warning("Empty response body for %s", url)
        raise FetchError(url, "the server returned no content", response.status_code)
    return markup


def get_meta_content(soup: BeautifulSoup, key: str) -> Optional[str]:
    """Content of the first <meta> whose name or property equals key."""
    tag = soup.select_one(f'meta[name="{key}"], meta[property="{key}"]')
    if tag is None:
        return None
    return tag.get('content')


# --- Extraction & Analysis ---

def extract(markup: str, source_url: str) -> MetadataRecord:
    """
    Parses markup into a MetadataRecord.

    Malformed markup never raises; it just leaves more fields as None.
    """
    # lxml rejects lone surrogates
    markup = markup.encode('utf-8', 'replace').decode('utf-8')
    soup = BeautifulSoup(markup, 'lxml')

    title_tag = soup.find('title')
    title: Optional[str] = title_tag.get_text() if title_tag is not None else None

    description: Optional[str] = get_meta_content(soup, 'description')
    if description is None:
        description = get_meta_content(soup, 'og:description')

    canonical_tag = soup.find('link', rel='canonical')
    canonical_url: Optional[str] = canonical_tag.get('href') if canonical_tag is not None else None

    record = MetadataRecord(
        source_url=source_url,
        title=title,
        description=description,
        keywords=get_meta_content(soup, 'keywords'),
        og_image=get_meta_content(soup, 'og:image'),
        canonical_url=canonical_url,
        robots=get_meta_content(soup, 'robots'),
        twitter_card=get_meta_content(soup, 'twitter:card'),
    )
    logger.info("Extracted metadata for %s (missing: %s)", source_url,
                ', '.join(missing_important_fields(record)) or 'none')
    return record


def missing_important_fields(record: MetadataRecord) -> List[str]:
    """Important fields absent from the record, always in title, description, og_image order."""
    return [name for name in IMPORTANT_FIELDS if getattr(record, name) is None]


def recommendation_for(field_name: str) -> Recommendation:
    return RECOMMENDATIONS[field_name]


def build_report(record: MetadataRecord) -> AnalysisReport:
    missing: List[str] = missing_important_fields(record)
    return AnalysisReport(
        record=record,
        missing_fields=tuple(missing),
        recommendations=tuple(recommendation_for(name) for name in missing),
    )


def analyze(url: str, session: Optional[Session] = None) -> MetadataRecord:
    """
    Validates, fetches and extracts the metadata of a single page.

    Raises:
        InvalidUrlError: The URL is not an absolute http(s) URL; nothing is fetched.
        FetchError: The page could not be retrieved.
    """
    url = (url or '').strip()
    if not is_valid_url(url):
        raise InvalidUrlError(url)
    markup: str = fetch_markup(url, session=session)
    return extract(markup, url)


# --- Export ---

def record_to_dict(record: MetadataRecord) -> Dict[str, Any]:
    """Export form of a record: camelCase keys, sourceUrl first, None for absent fields."""
    return {EXPORT_KEYS[f.name]: getattr(record, f.name) for f in fields(record)}


def record_to_json(record: MetadataRecord) -> str:
    return json.dumps(record_to_dict(record), indent=2, ensure_ascii=False)


def export_filename(now: Optional[datetime] = None) -> str:
    stamp: str = (now or datetime.now()).strftime('%Y%m%d-%H%M%S')
    return f"seo-metadata-{stamp}.json"
