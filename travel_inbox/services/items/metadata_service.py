import html
import re
from typing import Dict, Optional
from urllib.parse import urljoin, urlparse
import httpx
from travel_inbox.core.config import settings
from travel_inbox.core.errors import InvalidInputError
from travel_inbox.core.logger import logger
from travel_inbox.schemas.items.saved_item import LinkPreview

_SCHEME = re.compile(r"^https?://", re.I)
_META_TAG = re.compile(r"<meta\b[^>]*>", re.I)
_ATTRIBUTE = re.compile(r"""([a-zA-Z_:.-]+)\s*=\s*(["'])(.*?)\2""", re.S)
_TITLE_TAG = re.compile(r"<title[^>]*>([^<]*)</title>", re.I)
_IMG_SRC = re.compile(r"""<img\b[^>]*\bsrc=["']([^"']+)["']""", re.I)
_TRACKER_HINTS = ("pixel", "tracker", "1x1", "spacer")


def normalize_url(raw: str) -> str:
    """Trim, default to https:// and reject anything without a host."""
    candidate = (raw or "").strip()
    if not candidate:
        raise InvalidInputError("Please enter a valid URL")
    if not _SCHEME.match(candidate):
        candidate = f"https://{candidate}"

    parsed = urlparse(candidate)
    if not parsed.netloc or " " in parsed.netloc or "." not in parsed.netloc.split(":")[0]:
        raise InvalidInputError("Please enter a valid URL")
    return candidate


def _meta_index(page: str) -> Dict[str, str]:
    """Map og:/twitter:/name keys to their content attribute (first wins)."""
    index: Dict[str, str] = {}
    for tag in _META_TAG.findall(page):
        attrs = {name.lower(): value for name, _, value in _ATTRIBUTE.findall(tag)}
        key = attrs.get("property") or attrs.get("name")
        content = attrs.get("content")
        if key and content and key.lower() not in index:
            index[key.lower()] = html.unescape(content).strip()
    return index


def _first_image(page: str, base_url: str) -> Optional[str]:
    for src in _IMG_SRC.findall(page):
        if src.startswith("data:") or any(hint in src for hint in _TRACKER_HINTS):
            continue
        return urljoin(base_url, src)
    return None


def extract_metadata(page: str, url: str) -> LinkPreview:
    meta = _meta_index(page)

    title = meta.get("og:title")
    if not title:
        match = _TITLE_TAG.search(page)
        title = html.unescape(match.group(1)).strip() if match else None

    image = meta.get("og:image")
    if image:
        image = urljoin(url, image)
    else:
        image = _first_image(page, url)

    site_name = meta.get("og:site_name") or urlparse(url).hostname
    if site_name and site_name.startswith("www."):
        site_name = site_name[4:]

    return LinkPreview(
        url=url,
        title=title or None,
        image=image,
        description=meta.get("og:description") or meta.get("description"),
        site_name=site_name,
    )


class MetadataFetcher:
    """Fetches a page preview for a saved link. Never raises: an unreachable or
    blocking site produces an empty preview."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None,
                 timeout: float = settings.METADATA_FETCH_TIMEOUT_SECONDS):
        self._client = client
        self.timeout = timeout

    async def _get(self, url: str) -> httpx.Response:
        headers = {
            "User-Agent": settings.METADATA_USER_AGENT,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
        }
        if self._client is not None:
            return await self._client.get(url, headers=headers, follow_redirects=True, timeout=self.timeout)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(url, headers=headers, follow_redirects=True)

    async def fetch_preview(self, url: str) -> LinkPreview:
        try:
            response = await self._get(url)
            response.raise_for_status()
            page = response.text
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Link preview failed for {url}: {e}")
            return LinkPreview(url=url)

        preview = extract_metadata(page, url)
        logger.info(f"Link preview fetched for {url}")
        return preview


def get_metadata_fetcher() -> MetadataFetcher:
    return MetadataFetcher()
