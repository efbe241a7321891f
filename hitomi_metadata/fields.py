"""
Structured field extraction from the gallery info markup.

The gallery page has a stable shape:

    <div class="gallery">
      <h1>title</h1>
      <h2><ul><li>artist</li>...</ul></h2>
      <table>
        <tr>... group ...</tr>
        <tr>... <a>kind</a></tr>
        <tr>... <a>language</a></tr>
        <tr>... <ul><li>series / characters / tags</li>...</ul></tr>
      </table>
    </div>

Each metadata field is described by a FieldPath in GALLERY_FIELDS, so when
the site shifts its markup only one table entry has to change.  Any element
a path points to that is missing raises StructureMismatchError; there is no
partial result.
"""

import re
from typing import Optional

from bs4 import BeautifulSoup, Tag

from .exceptions import StructureMismatchError
from .logger import get_module_logger
from .schemas import FieldPath, GalleryFields

logger = get_module_logger("fields")

GALLERY_SELECTOR = "div.gallery"
INFO_TABLE_SELECTOR = "table"
INFO_ROW_SELECTOR = "tr"

# Series, characters and tags all read the same list in row 3; the site
# does not mark which taxonomy an entry belongs to.
GALLERY_FIELDS = {
    "title": FieldPath(scope="gallery", selector="h1"),
    "contributors": FieldPath(scope="gallery", selector="h2", item="li"),
    "classification": FieldPath(scope="row", row=1, selector="a"),
    "language": FieldPath(scope="row", row=2, selector="a"),
    "series": FieldPath(scope="row", row=3, item="li"),
    "characters": FieldPath(scope="row", row=3, item="li"),
    "tags": FieldPath(scope="row", row=3, item="li"),
}

_WHITESPACE = re.compile(r'\s+')


def sane_text(elem: Tag) -> str:
    """Visible text of an element, whitespace runs collapsed and ends trimmed."""
    return _WHITESPACE.sub(' ', elem.get_text()).strip()


class StructuredFieldExtractor:
    """Extracts title, contributors, classification, language and associations."""

    def __init__(self, field_paths: Optional[dict[str, FieldPath]] = None):
        self.field_paths = field_paths or GALLERY_FIELDS

    def extract(self, document: BeautifulSoup) -> GalleryFields:
        """
        Extract all gallery fields from a parsed document.

        Raises:
            StructureMismatchError: if the container, a heading, the info
                table, a row or a field element is missing
        """
        logger.info("Starting field extraction")

        gallery = document.select_one(GALLERY_SELECTOR)
        if gallery is None:
            raise self._mismatch("gallery", f"No {GALLERY_SELECTOR} container found")

        # Rows are looked up lazily so a document without a table only fails
        # once a row-scoped field asks for it
        rows = None
        values = {}
        for name, path in self.field_paths.items():
            if path.scope == "row":
                if rows is None:
                    rows = self._info_rows(gallery, name)
                scope = self._row(rows, path.row, name)
            else:
                scope = gallery
            values[name] = self._read(scope, path, name)
            logger.debug(f"Field {name}: {values[name]!r}")

        fields = GalleryFields(**values)
        logger.info(f"Extracted fields for '{fields.title}'")
        return fields

    def _info_rows(self, gallery: Tag, field: str) -> list[Tag]:
        table = gallery.select_one(INFO_TABLE_SELECTOR)
        if table is None:
            raise self._mismatch(field, "Gallery information table is missing")
        return table.select(INFO_ROW_SELECTOR)

    def _row(self, rows: list[Tag], index: int, field: str) -> Tag:
        if index >= len(rows):
            raise self._mismatch(
                field,
                f"Information table has {len(rows)} rows, row {index} expected",
                rows=len(rows)
            )
        return rows[index]

    def _read(self, scope: Tag, path: FieldPath, field: str):
        elem = scope
        if path.selector is not None:
            elem = scope.select_one(path.selector)
            if elem is None:
                raise self._mismatch(field, f"No <{path.selector}> element for {field}")

        if path.many:
            return tuple(sane_text(item) for item in elem.select(path.item))
        return sane_text(elem)

    @staticmethod
    def _mismatch(field: str, message: str, **details) -> StructureMismatchError:
        logger.error(f"Structure mismatch ({field}): {message}")
        return StructureMismatchError(message, field=field, details=details)


def extract_fields(document: BeautifulSoup) -> GalleryFields:
    """Convenience function to extract gallery fields with the default table."""
    return StructuredFieldExtractor().extract(document)
