"""
Metadata assembly: GalleryFields + content pages → MetadataRecord.
"""

from typing import Sequence

from .exceptions import NoPagesFoundError
from .logger import get_module_logger
from .schemas import GalleryFields, MetadataRecord

logger = get_module_logger("assembler")


def assemble(fields: GalleryFields, pages: Sequence[str]) -> MetadataRecord:
    """
    Merge structured fields and the page list into one record.

    The cover is the first content page.

    Raises:
        NoPagesFoundError: if pages is empty
    """
    if not pages:
        logger.error(f"No content pages found for '{fields.title}'")
        raise NoPagesFoundError(
            "Preview script listed no content pages",
            details={"title": fields.title}
        )

    return MetadataRecord(
        **fields.model_dump(),
        pages=tuple(pages),
        cover=pages[0]
    )
