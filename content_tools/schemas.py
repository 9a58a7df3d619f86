"""
Upstream response schemas.

One model per upstream API so payloads are checked where they enter the
system instead of being trusted at the point of use.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ─── YouTube Data API v3: search.list ──────────────────────────────────────

class YouTubeVideoId(BaseModel):
    kind: Optional[str] = None
    videoId: Optional[str] = None


class YouTubeSearchResult(BaseModel):
    kind: Optional[str] = None
    etag: Optional[str] = None
    id: YouTubeVideoId


class YouTubePageInfo(BaseModel):
    totalResults: int = 0
    resultsPerPage: int = 0


class YouTubeSearchResponse(BaseModel):
    kind: Optional[str] = None
    etag: Optional[str] = None
    nextPageToken: Optional[str] = None
    regionCode: Optional[str] = None
    pageInfo: Optional[YouTubePageInfo] = None
    items: List[YouTubeSearchResult] = []


# ─── Tavily search ─────────────────────────────────────────────────────────

class TavilySearchResult(BaseModel):
    title: str = ""
    url: str
    content: str = ""
    score: Optional[float] = None


class TavilySearchResponse(BaseModel):
    query: Optional[str] = None
    answer: Optional[str] = None
    results: List[TavilySearchResult] = []


class DocumentMetadata(BaseModel):
    source: str
    title: str = ""
    score: Optional[float] = None


class RetrievedDocument(BaseModel):
    """A search hit in retriever-document shape (``pageContent`` + ``metadata``)."""

    model_config = ConfigDict(populate_by_name=True)

    page_content: str = Field(alias="pageContent")
    metadata: DocumentMetadata

    @classmethod
    def from_tavily(cls, result: TavilySearchResult) -> "RetrievedDocument":
        return cls(
            page_content=result.content,
            metadata=DocumentMetadata(
                source=result.url,
                title=result.title,
                score=result.score,
            ),
        )


# ─── Chart payload produced by the chart model ─────────────────────────────

class ChartPoint(BaseModel):
    label: str
    value: float


class ChartData(BaseModel):
    title: str
    type: str = "bar"
    data: List[ChartPoint]
