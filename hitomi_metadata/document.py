"""
Document loading: bytes → text → navigable tree.

This is the default fetch collaborator.  MetadataSource only needs an
async callable returning a BeautifulSoup tree, so hosts and tests can swap
DocumentFetcher for anything with the same shape.

Decoding follows what a browser does: the Content-Type header charset wins,
then the charset declared in <meta> (after WHATWG label remapping), then
UTF-8.  Labels Python has no codec for are skipped.
"""

import codecs
import re
from typing import Optional

import httpx
from bs4 import BeautifulSoup

from .exceptions import FetchError
from .logger import get_module_logger
from .schemas import FetchConfig

logger = get_module_logger("document")

# WHATWG encoding spec: browsers silently remap these labels.
# https://encoding.spec.whatwg.org/#names-and-labels
WHATWG_CHARSET_MAP = {
    'iso-8859-1': 'windows-1252',
    'iso8859-1': 'windows-1252',
    'iso88591': 'windows-1252',
    'latin-1': 'windows-1252',
    'latin1': 'windows-1252',
    'us-ascii': 'windows-1252',
    'ascii': 'windows-1252',
    'iso-8859-9': 'windows-1254',
    'iso-8859-11': 'windows-874',
}

_META_CHARSET = re.compile(r'<meta[^>]+charset=["\']?\s*([^\s"\';>]+)', re.IGNORECASE)
_META_CONTENT_TYPE = re.compile(
    r'<meta[^>]+content=["\'][^"\']*charset=([^\s"\';>]+)', re.IGNORECASE
)


def _known_charset(label: str) -> Optional[str]:
    """Browser-equivalent codec name for a charset label, None if Python has no such codec."""
    charset = label.strip().lower()
    charset = WHATWG_CHARSET_MAP.get(charset, charset)
    try:
        codecs.lookup(charset)
    except LookupError:
        logger.warning(f"Unknown charset '{label}', ignoring it")
        return None
    return charset


def detect_charset(raw_bytes: bytes) -> str:
    """
    Detect the declared charset from the first 2048 bytes of a document.

    Returns the browser-equivalent charset, or 'utf-8' when nothing usable
    is declared.
    """
    head_str = raw_bytes[:2048].decode('ascii', errors='ignore')

    match = _META_CHARSET.search(head_str) or _META_CONTENT_TYPE.search(head_str)
    if not match:
        return 'utf-8'
    return _known_charset(match.group(1)) or 'utf-8'


def decode_html(raw_bytes: bytes, transport_charset: Optional[str] = None) -> str:
    """
    Decode document bytes and normalize NUL bytes and line endings.

    A charset from the Content-Type header wins over the <meta> declaration,
    as it does in browsers.
    """
    charset = transport_charset and _known_charset(transport_charset)
    if not charset:
        charset = detect_charset(raw_bytes)
    html = raw_bytes.decode(charset, errors='replace')

    # NUL bytes break tree builders and never appear in valid text content
    if '\x00' in html:
        html = html.replace('\x00', '')
    return html.replace('\r\n', '\n').replace('\r', '\n')


def parse_html(html: str, address: str = "<memory>") -> BeautifulSoup:
    """Build a navigable tree with the html5lib tree builder."""
    try:
        return BeautifulSoup(html, 'html5lib')
    except Exception as e:
        logger.error(f"HTML parsing failed for {address}: {e}")
        raise FetchError(f"Could not parse document: {e}", address=address) from e


class DocumentFetcher:
    """
    Downloads and parses gallery pages over HTTP.

    A fresh httpx.AsyncClient is opened for every call, so one fetcher can
    serve any number of concurrent extractions without shared state.
    """

    def __init__(self, config: Optional[FetchConfig] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config or FetchConfig.from_env()
        # Custom transport hook (httpx.MockTransport in tests)
        self._transport = transport

    def _get_headers(self) -> dict:
        return {
            "User-Agent": self.config.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
        }

    async def fetch_response(self, address: str) -> httpx.Response:
        """GET an address and return the successful response."""
        logger.info(f"Fetching {address}")
        try:
            async with httpx.AsyncClient(
                timeout=self.config.timeout,
                follow_redirects=self.config.follow_redirects,
                headers=self._get_headers(),
                transport=self._transport
            ) as client:
                response = await client.get(address)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"HTTP {status} while fetching {address}")
            raise FetchError(
                f"Server answered HTTP {status}",
                address=address,
                status_code=status
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Failed to fetch {address}: {e}")
            raise FetchError(f"Request failed: {e}", address=address) from e

        logger.debug(f"Fetched {len(response.content)} bytes from {address}")
        return response

    async def __call__(self, address: str) -> BeautifulSoup:
        response = await self.fetch_response(address)
        html = decode_html(response.content, transport_charset=response.charset_encoding)
        return parse_html(html, address=address)
