"""Pydantic schemas for search API responses."""

from pydantic import BaseModel, Field


class SearchResult(BaseModel):
    """Single Spotlight result.

    Attributes:
        index: Position in the native result set (0-based).
        value: Extracted attribute value, usually a display name.
    """

    index: int = Field(ge=0)
    value: str | None = Field(description="Extracted attribute value")


class SearchResponse(BaseModel):
    """Search response envelope.

    Attributes:
        query: The predicate expression that was searched.
        attribute: Metadata attribute extracted for each result.
        results: Results in native result order.
        total: Number of results.
        duration_ms: Wall time from start to finished gathering.
    """

    query: str
    attribute: str
    results: list[SearchResult]
    total: int
    duration_ms: float


class SearchComplete(BaseModel):
    """Terminal event of a streamed search.

    Attributes:
        query: The predicate expression that was searched.
        total: Number of results streamed.
    """

    query: str
    total: int


class ErrorResponse(BaseModel):
    """Error body returned by search endpoints.

    Attributes:
        error: Human-readable error description.
    """

    error: str


def to_text(value: object) -> str | None:
    """Convert a native attribute value to text.

    Args:
        value: Value returned by the substrate (NSString, NSNumber, None).

    Returns:
        String form of value, or None when the attribute was missing.
    """
    if value is None:
        return None
    return str(value)
