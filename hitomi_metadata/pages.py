"""
Content-page extraction from the embedded preview script.

The static markup only renders the first 50 thumbnails; the rest arrive
through pagination.  The script inside div.gallery-preview, however, holds
the complete list as a JavaScript array literal, one entry per line:

    '//tn.hitomi.la/smalltn/1083230/1.jpg.jpg',

The script is never executed.  Each line is pattern-matched into a
ThumbnailToken (gallery id + file name) and the token is turned into the
full-resolution address https://aa.hitomi.la/galleries/1083230/1.jpg.

Thumbnail generation appends the extension a second time without removing
the original, so the last 4 characters of every file name are dropped.
"""

import re

from bs4 import BeautifulSoup, NavigableString

from .exceptions import StructureMismatchError
from .logger import get_module_logger
from .schemas import ThumbnailToken

logger = get_module_logger("pages")

PREVIEW_SCRIPT_SELECTOR = "div.gallery-preview > script"

# Length of the appended ".jpg" / ".png" copy
DUPLICATE_EXTENSION_LENGTH = 4

# group 1 = gallery id (second to last path segment)
# group 2 = thumbnail file name, still carrying the duplicated extension
THUMBNAIL_LINE_PATTERN = re.compile(
    r"^[ \t]*'[^'\n]*/([^/'\n]+)/([^/'\n]{%d,})',[ \t]*$" % (DUPLICATE_EXTENSION_LENGTH + 1),
    re.MULTILINE
)


def strip_duplicate_extension(file_name: str) -> str:
    """Drop the appended extension copy: '1.jpg.jpg' → '1.jpg'."""
    return file_name[:-DUPLICATE_EXTENSION_LENGTH]


def parse_thumbnail_tokens(script_text: str) -> list[ThumbnailToken]:
    """
    Recover thumbnail tokens from the preview script, in line order.

    Lines that do not look like a quoted thumbnail path followed by a comma
    are ignored.
    """
    tokens = []
    for match in THUMBNAIL_LINE_PATTERN.finditer(script_text):
        gallery_id, raw_name = match.groups()
        tokens.append(ThumbnailToken(
            gallery_id=gallery_id,
            file_name=strip_duplicate_extension(raw_name)
        ))
    return tokens


class EmbeddedPageListExtractor:
    """Extracts the ordered list of full-resolution page addresses."""

    def extract(self, document: BeautifulSoup) -> list[str]:
        """
        Extract content-page addresses in script order.

        An empty list is a valid return value here; assemble() decides that
        a gallery without pages is an error.

        Raises:
            StructureMismatchError: if the preview script element is missing
        """
        script = document.select_one(PREVIEW_SCRIPT_SELECTOR)
        if script is None:
            logger.error(f"No {PREVIEW_SCRIPT_SELECTOR} element found")
            raise StructureMismatchError(
                "Gallery preview script is missing",
                field="pages"
            )

        # Raw text, not sane text: the pattern is line-oriented
        script_text = "".join(str(s) for s in script.contents if isinstance(s, NavigableString))
        tokens = parse_thumbnail_tokens(script_text)
        pages = [token.page_url() for token in tokens]

        logger.info(f"Recovered {len(pages)} content pages from preview script")
        return pages


def extract_pages(document: BeautifulSoup) -> list[str]:
    """Convenience function to extract content-page addresses."""
    return EmbeddedPageListExtractor().extract(document)
