"""
Pydantic schemas defining the contracts between pipeline stages.

Data flow through the pipeline:
  GalleryDocument → StructuredFieldExtractor  → GalleryFields
  GalleryDocument → EmbeddedPageListExtractor → ThumbnailToken list → page URLs
  GalleryFields + page URLs → assemble() → MetadataRecord

Every model is frozen and stores sequences as tuples, so a record handed to
the caller can be shared between tasks without copying.
"""

import os
from typing import Literal, Optional
from urllib.parse import urlunsplit

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .logger import get_module_logger

logger = get_module_logger("schemas")

# Full-resolution images live on this subdomain, thumbnails on tn.hitomi.la
PAGE_HOST = "aa.hitomi.la"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


# --- Source identity ---

class SourceInfo(BaseModel):
    """Static description of this metadata source, shown by the host."""
    model_config = ConfigDict(frozen=True)

    name: str
    author: str
    version: str       # SemVer
    homepage: str


# --- Structural field table ---

class FieldPath(BaseModel):
    """
    Structural path to one metadata field inside the gallery markup.

    scope="gallery" starts from the div.gallery container; scope="row" starts
    from the information-table row at index `row`.  `selector` picks one
    element inside the scope (None means the scope itself) and `item`, when
    set, turns the field into a list of the matching descendants' text.
    """
    model_config = ConfigDict(frozen=True)

    scope: Literal["gallery", "row"] = "gallery"
    row: Optional[int] = None
    selector: Optional[str] = None
    item: Optional[str] = None

    @property
    def many(self) -> bool:
        return self.item is not None

    @model_validator(mode="after")
    def _row_scope_needs_index(self) -> "FieldPath":
        if self.scope == "row" and self.row is None:
            raise ValueError("row-scoped field paths need a row index")
        return self


# --- Intermediate results ---

class GalleryFields(BaseModel):
    """Output of the StructuredFieldExtractor."""
    model_config = ConfigDict(frozen=True)

    title: str
    contributors: tuple[str, ...] = ()
    classification: str
    language: str
    series: tuple[str, ...] = ()
    characters: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()


class ThumbnailToken(BaseModel):
    """
    One thumbnail reference recovered from the gallery preview script.

    `file_name` is the real image name, after the duplicated extension has
    been dropped (1.jpg.jpg → 1.jpg).
    """
    model_config = ConfigDict(frozen=True)

    gallery_id: str
    file_name: str

    def page_url(self) -> str:
        """Full-resolution content-page address for this thumbnail."""
        return urlunsplit((
            "https",
            PAGE_HOST,
            f"/galleries/{self.gallery_id}/{self.file_name}",
            "",
            ""
        ))


# --- Pipeline product ---

class MetadataRecord(BaseModel):
    """Catalog metadata for one gallery, the final pipeline product."""
    model_config = ConfigDict(frozen=True)

    classification: str                                  # e.g. "doujinshi"
    language: str
    title: str
    contributors: tuple[str, ...] = ()
    series: tuple[str, ...] = ()
    characters: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    pages: tuple[str, ...] = Field(min_length=1)         # canonical reading order
    cover: str

    @model_validator(mode="after")
    def _cover_is_first_page(self) -> "MetadataRecord":
        if self.cover != self.pages[0]:
            raise ValueError("cover must be the first content page")
        return self


# --- Configuration ---

class FetchConfig(BaseModel):
    """Settings for the default HTTP document fetcher."""
    model_config = ConfigDict(frozen=True)

    timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT
    follow_redirects: bool = True

    @classmethod
    def from_env(cls) -> "FetchConfig":
        """
        Build a config from HITOMI_FETCH_TIMEOUT and HITOMI_USER_AGENT.

        Unset variables keep their defaults; an unparsable timeout is
        logged and ignored.
        """
        kwargs = {}

        timeout = os.getenv("HITOMI_FETCH_TIMEOUT")
        if timeout:
            try:
                kwargs["timeout"] = float(timeout)
            except ValueError:
                logger.warning(
                    f"Invalid HITOMI_FETCH_TIMEOUT '{timeout}', using {cls().timeout}s"
                )

        user_agent = os.getenv("HITOMI_USER_AGENT")
        if user_agent:
            kwargs["user_agent"] = user_agent

        return cls(**kwargs)
