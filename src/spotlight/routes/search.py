"""Spotlight search API endpoints."""

from __future__ import annotations

import time
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING

import structlog
from fastapi import APIRouter, Query, Request, status
from fastapi.responses import JSONResponse
from sse_starlette import ServerSentEvent
from sse_starlette.sse import EventSourceResponse

from spotlight.errors import SearchTimeoutError
from spotlight.query.runner import stream_search
from spotlight.schemas import (
    ErrorResponse,
    SearchComplete,
    SearchResponse,
    SearchResult,
    to_text,
)

if TYPE_CHECKING:
    from spotlight.config import Settings
    from spotlight.native.types import Substrate

logger = structlog.get_logger()

router = APIRouter(prefix="/search", tags=["search"])


def _unavailable() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=ErrorResponse(error="Spotlight is not available on this host").model_dump(),
    )


@router.get(
    "",
    response_model=SearchResponse,
    responses={503: {"model": ErrorResponse}, 504: {"model": ErrorResponse}},
    summary="Run a Spotlight metadata query",
    description="Runs the predicate to completion and returns every result.",
)
async def search(
    request: Request,
    q: str = Query(
        ...,
        min_length=1,
        max_length=1024,
        description="Predicate expression, e.g. kMDItemContentType == 'public.folder'",
    ),
    timeout: float | None = Query(
        default=None,
        gt=0,
        le=300,
        description="Seconds to wait for gathering to finish",
    ),
) -> SearchResponse | JSONResponse:
    """Run a metadata query and return all results.

    Args:
        request: FastAPI request (provides access to app state).
        q: Predicate expression passed verbatim to Spotlight.
        timeout: Deadline in seconds, defaults to the configured timeout.

    Returns:
        Results in native order, or an error response.
    """
    settings: Settings = request.app.state.settings
    substrate: Substrate | None = request.app.state.substrate
    if substrate is None:
        return _unavailable()

    deadline = timeout if timeout is not None else settings.search_timeout
    start = time.perf_counter()
    results: list[SearchResult] = []
    try:
        async for value in stream_search(
            q, substrate=substrate, settings=settings, timeout=deadline
        ):
            results.append(SearchResult(index=len(results), value=to_text(value)))
    except SearchTimeoutError as e:
        return JSONResponse(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            content=ErrorResponse(error=str(e)).model_dump(),
        )

    duration_ms = round((time.perf_counter() - start) * 1000, 2)
    logger.info("search_completed", query=q, total=len(results), duration_ms=duration_ms)

    return SearchResponse(
        query=q,
        attribute=settings.result_attribute,
        results=results,
        total=len(results),
        duration_ms=duration_ms,
    )


@router.get(
    "/stream",
    response_model=None,
    responses={503: {"model": ErrorResponse}},
)
async def search_stream(
    request: Request,
    q: str = Query(
        ...,
        min_length=1,
        max_length=1024,
        description="Predicate expression passed verbatim to Spotlight",
    ),
    timeout: float | None = Query(default=None, gt=0, le=300),
) -> EventSourceResponse | JSONResponse:
    """Stream results of a metadata query via Server-Sent Events.

    Emits one "result" event per value in native order, then a single
    "complete" event. A timeout ends the stream with an "error" event.

    Args:
        request: FastAPI request object.
        q: Predicate expression passed verbatim to Spotlight.
        timeout: Deadline in seconds, defaults to the configured timeout.

    Returns:
        SSE response stream of search results.
    """
    settings: Settings = request.app.state.settings
    substrate: Substrate | None = request.app.state.substrate
    if substrate is None:
        return _unavailable()

    deadline = timeout if timeout is not None else settings.search_timeout

    async def events() -> AsyncIterator[ServerSentEvent]:
        total = 0
        try:
            async for value in stream_search(
                q, substrate=substrate, settings=settings, timeout=deadline
            ):
                result = SearchResult(index=total, value=to_text(value))
                total += 1
                yield ServerSentEvent(event="result", data=result.model_dump_json())
        except SearchTimeoutError as e:
            yield ServerSentEvent(
                event="error", data=ErrorResponse(error=str(e)).model_dump_json()
            )
            return
        complete = SearchComplete(query=q, total=total)
        yield ServerSentEvent(event="complete", data=complete.model_dump_json())

    return EventSourceResponse(
        events(),
        headers={
            "Cache-Control": "no-cache",
            "X-Accel-Buffering": "no",
        },
    )
