"""REST endpoints for roster building and the news feed."""

import logging
from typing import Annotated

import httpx
from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from vct_builder.services.roster_service import RosterService

logger = logging.getLogger(__name__)

ROSTER_PATH = "/api/bedrock"

router = APIRouter(prefix="/api", tags=["roster"])


class ChatRequest(BaseModel):
    """Request body for building a roster.

    JSON is the only accepted encoding; blank messages are rejected by the
    pipeline with a 400.
    """

    userMessage: str = ""


class NewsItemResponse(BaseModel):
    title: str
    url: str
    date: str


class NewsListResponse(BaseModel):
    """Response containing the latest headlines."""

    news: list[NewsItemResponse]


def _get_roster_service(request: Request) -> RosterService:
    return request.app.state.roster_service


@router.post("/bedrock")
def build_roster(request: Request, body: ChatRequest) -> JSONResponse:
    """Build a roster from a chat message via Bedrock.

    Runs in the threadpool since the Bedrock call and stream drain block.
    """
    service = _get_roster_service(request)
    result = service.handle(body.userMessage)
    return JSONResponse(result.to_dict(), status_code=result.status_code)


@router.get("/news", response_model=NewsListResponse)
async def get_news(
    request: Request,
    limit: Annotated[int, Query(ge=1, le=50)] = 10,
):
    """Latest Valorant esports headlines."""
    client = request.app.state.news_client
    try:
        items = await client.fetch_news(limit=limit)
    except httpx.HTTPError as e:
        logger.error(f"News fetch failed: {e}")
        raise HTTPException(status_code=502, detail="News feed unavailable")
    return {"news": [item.to_dict() for item in items]}
