"""
Main orchestrator for the Hitomi.la metadata source.

Pipeline: can_handle → normalize → fetch → extract fields → extract pages → assemble.

MetadataSource keeps no per-call state: the fetcher and both extractors are
stateless, so one instance may serve any number of concurrent extract()
calls.
"""

from pathlib import Path
from typing import Awaitable, Callable, Optional, Union

from bs4 import BeautifulSoup

from .address import can_handle, normalize
from .assembler import assemble
from .document import DocumentFetcher, decode_html, parse_html
from .exceptions import InvalidAddressError
from .fields import StructuredFieldExtractor
from .logger import get_module_logger, setup_logger
from .pages import EmbeddedPageListExtractor
from .schemas import MetadataRecord, SourceInfo

logger = get_module_logger("main")

SOURCE_INFO = SourceInfo(
    name="Hitomi.la",
    author="HReader",
    version="0.1.2-alpha",
    homepage="https://github.com/HReader/HReader.Plugin.Hitomila"
)

FetchDocument = Callable[[str], Awaitable[BeautifulSoup]]


class MetadataSource:
    """
    Resolves Hitomi.la gallery addresses to catalog metadata.

    Args:
        fetch_document: async callable turning an address into a parsed
            document.  Defaults to DocumentFetcher configured from the
            environment.
        log_level: optional level for the package logger
    """

    def __init__(
        self,
        fetch_document: Optional[FetchDocument] = None,
        log_level: Optional[int] = None
    ):
        if log_level is not None:
            setup_logger(level=log_level)

        self.fetch_document = fetch_document or DocumentFetcher()
        self.field_extractor = StructuredFieldExtractor()
        self.page_extractor = EmbeddedPageListExtractor()

    def identify(self) -> SourceInfo:
        """Static identity shown by the host."""
        return SOURCE_INFO

    def can_handle(self, address: str) -> bool:
        """Cheap eligibility check; see address.can_handle."""
        return can_handle(address)

    async def extract(self, address: str) -> MetadataRecord:
        """
        Resolve a gallery or reader address to a MetadataRecord.

        Raises:
            InvalidAddressError: address is not a Hitomi.la gallery/reader page
            FetchError: the document could not be downloaded or parsed
            StructureMismatchError: the markup is missing an expected element
            NoPagesFoundError: the preview script lists no pages
        """
        if not can_handle(address):
            logger.error(f"Rejected address {address!r}")
            raise InvalidAddressError(
                "Address is not a Hitomi.la gallery or reader page",
                address=address
            )

        address = normalize(address)
        logger.info(f"Extracting metadata from {address}")

        document = await self.fetch_document(address)
        return self.extract_document(document, source=address)

    def extract_document(self, document: BeautifulSoup, source: str = "<document>") -> MetadataRecord:
        """Run the extraction stages on an already-parsed document."""
        fields = self.field_extractor.extract(document)
        pages = self.page_extractor.extract(document)
        record = assemble(fields, pages)

        logger.info(f"Complete: '{record.title}' with {len(record.pages)} pages from {source}")
        return record

    def extract_html(self, html: str, address: Optional[str] = None) -> MetadataRecord:
        """Extract metadata from a saved gallery page given as a string."""
        source = address or "<html>"
        return self.extract_document(parse_html(html, address=source), source=source)

    def extract_file(self, file_path: Union[str, Path]) -> MetadataRecord:
        """Extract metadata from a saved gallery page on disk."""
        file_path = Path(file_path)

        # Decode from bytes so the page's own <meta charset> is honored
        html = decode_html(file_path.read_bytes())
        return self.extract_html(html, address=str(file_path))


async def extract_metadata(address: str) -> MetadataRecord:
    """Convenience function to extract metadata with the default fetcher."""
    return await MetadataSource().extract(address)
