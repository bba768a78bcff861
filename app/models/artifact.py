from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ResponseMode(str, Enum):
    INLINE = "inline"
    REFERENCED = "referenced"


class PageArtifact(BaseModel):
    """One split-out page: serialized single-page PDF plus its 0-based index."""

    model_config = ConfigDict(frozen=True)

    index: int
    data: bytes
    size: int

    @property
    def page(self) -> int:
        return self.index + 1

    @property
    def filename(self) -> str:
        return f"page_{self.page}.pdf"


class Session(BaseModel):
    model_config = ConfigDict(frozen=True)

    session_id: str
    pages: Dict[int, PageArtifact]  # keyed by PageArtifact.index
    created_at: float  # store clock value, not wall time

    def page(self, index: int) -> Optional[PageArtifact]:
        return self.pages.get(index)


class SplitFile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    page: int
    filename: str
    size: int
    data: Optional[str] = None  # base64, inline mode
    download_url: Optional[str] = Field(default=None, alias="downloadUrl")


class SplitResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    total_pages: int = Field(alias="totalPages")
    files: List[SplitFile]
    session: Optional[str] = None
