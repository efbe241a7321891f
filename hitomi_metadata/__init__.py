"""
Hitomi.la Metadata Source

Extracts catalog metadata (title, artists, kind, language, series,
characters, tags and the full list of page images) from Hitomi.la gallery
pages.
- Address: eligibility check and reader → gallery normalization
- Fields:  structural extraction from the gallery info markup
- Pages:   pattern extraction from the embedded preview script
- Assembler: merges both into an immutable MetadataRecord

Public API surface:
  Entry point   — MetadataSource, extract_metadata
  Stages        — can_handle, normalize, StructuredFieldExtractor,
                  EmbeddedPageListExtractor, assemble
  Data models   — MetadataRecord, GalleryFields, ThumbnailToken, FieldPath,
                  SourceInfo, FetchConfig
  Error types   — HitomiSourceError and its subclasses
"""

# --- Entry point ---
from .main import MetadataSource, extract_metadata

# --- Pipeline stages ---
from .address import can_handle, normalize
from .fields import StructuredFieldExtractor, GALLERY_FIELDS
from .pages import EmbeddedPageListExtractor, parse_thumbnail_tokens
from .assembler import assemble
from .document import DocumentFetcher

# --- Data models ---
from .schemas import (
    MetadataRecord, GalleryFields, ThumbnailToken, FieldPath, SourceInfo, FetchConfig
)

# --- Exceptions ---
from .exceptions import (
    HitomiSourceError,
    InvalidAddressError,
    FetchError,
    StructureMismatchError,
    NoPagesFoundError,
)

__version__ = "0.1.2"
__all__ = [
    "MetadataSource",
    "extract_metadata",
    "can_handle",
    "normalize",
    "StructuredFieldExtractor",
    "GALLERY_FIELDS",
    "EmbeddedPageListExtractor",
    "parse_thumbnail_tokens",
    "assemble",
    "DocumentFetcher",
    "MetadataRecord",
    "GalleryFields",
    "ThumbnailToken",
    "FieldPath",
    "SourceInfo",
    "FetchConfig",
    "HitomiSourceError",
    "InvalidAddressError",
    "FetchError",
    "StructureMismatchError",
    "NoPagesFoundError",
]
