"""
Address classification and normalization.

Hitomi.la serves every gallery under two URL families:
  https://hitomi.la/galleries/<id>.html   gallery info page (what we parse)
  https://hitomi.la/reader/<id>.html      reader page for the same gallery

can_handle() decides whether an address belongs to either family and
normalize() rewrites reader addresses to the gallery family.  Both are
pure string functions: no network, no parsing of remote content, safe to
call for many candidate addresses in a row.
"""

import re
from typing import Optional
from urllib.parse import unquote, urlsplit

from .logger import get_module_logger

logger = get_module_logger("address")

SITE_HOST = "hitomi.la"
DOCUMENT_SUFFIX = ".html"
GALLERY_PREFIX = "/galleries/"
READER_PREFIX = "/reader/"
ROUTE_PREFIXES = (GALLERY_PREFIX, READER_PREFIX)
WEB_SCHEMES = ("http", "https")

# scheme://authority | path | ?query#fragment, split on the raw string so
# everything outside the path survives normalization byte for byte
_ADDRESS_PARTS = re.compile(r"^([A-Za-z][A-Za-z0-9+.\-]*://[^/?#]*)([^?#]*)(.*)$", re.DOTALL)

# urlsplit trims C0 controls and spaces at both ends and drops tabs and
# newlines anywhere; both functions below work on that same form
_C0_CONTROL_OR_SPACE = "".join(chr(c) for c in range(0x21))
_UNSAFE_CHARS = str.maketrans("", "", "\t\r\n")


def _clean(address: str) -> str:
    return address.strip(_C0_CONTROL_OR_SPACE).translate(_UNSAFE_CHARS)


def _idn_host(hostname: str) -> str:
    """ASCII (punycode) form of a host name, lowercased."""
    return hostname.encode("idna").decode("ascii").lower()


def can_handle(address: str) -> bool:
    """
    Check whether an address identifies a Hitomi.la gallery.

    All of these must hold (case-insensitive):
      1. scheme is http or https
      2. host is hitomi.la (compared in IDN/ASCII form)
      3. path ends with .html
      4. path starts with /galleries/ or /reader/

    Malformed input returns False instead of raising.
    """
    if not isinstance(address, str):
        return False

    try:
        parts = urlsplit(_clean(address))
        hostname = parts.hostname
    except ValueError:
        return False

    if parts.scheme.lower() not in WEB_SCHEMES:
        return False

    if not hostname:
        return False
    try:
        if _idn_host(hostname) != SITE_HOST:
            return False
    except UnicodeError:
        return False

    path = unquote(parts.path).lower()
    return path.endswith(DOCUMENT_SUFFIX) and path.startswith(ROUTE_PREFIXES)


def normalize(address: str) -> str:
    """
    Rewrite a reader address to the gallery info address.

    The address is first cleaned the way can_handle() sees it (surrounding
    whitespace trimmed, tabs and newlines dropped).  Then only the path is
    touched: a leading /reader/, matched case-insensitively and after
    percent-decoding, becomes /galleries/.  Scheme, host, query and fragment
    are kept exactly as given, and already-canonical addresses come back
    unchanged.
    """
    address = _clean(address)
    match = _ADDRESS_PARTS.match(address)
    if not match:
        return address

    head, path, tail = match.groups()
    prefix_end = _reader_prefix_end(path)
    if prefix_end is None:
        return address

    canonical_path = GALLERY_PREFIX + path[prefix_end:]
    logger.debug(f"Normalized reader path {path} -> {canonical_path}")
    return head + canonical_path + tail


def _reader_prefix_end(path: str) -> Optional[int]:
    """Length of the raw path prefix that decodes to /reader/, None if there is none."""
    if not unquote(path).lower().startswith(READER_PREFIX):
        return None
    for end in range(len(READER_PREFIX), len(path) + 1):
        if unquote(path[:end]).lower() == READER_PREFIX:
            return end
    return None
