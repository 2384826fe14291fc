"""
Chat API Endpoint - question about the series on screen -> text.
"""

import logging
from typing import List, Optional, Union

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ai import ChatContext, ExplainerUnavailable, explain

logger = logging.getLogger(__name__)

chat_router = APIRouter()


class ChatPoint(BaseModel):
    """One chart point; the dashboard sends `year`, the envelope uses `date`."""
    year: Union[str, int, None] = None
    date: Union[str, int, None] = None
    value: Optional[float] = None


class ChatContextBody(BaseModel):
    country: str
    indicator: str
    timeRange: str
    data: List[ChatPoint] = []


class ChatRequest(BaseModel):
    """JSON chat request body."""
    message: str = ''
    context: Optional[ChatContextBody] = None


class ChatResponse(BaseModel):
    success: bool
    response: Optional[str] = None
    error: Optional[str] = None


@chat_router.post("/api/chat/llm", response_model=ChatResponse)
def chat(body: ChatRequest):
    """Answer a question, grounding it in the chart's numbers when given."""
    if not body.message or not body.message.strip():
        return JSONResponse({'success': False, 'error': 'Message is required'}, status_code=400)

    context = None
    if body.context is not None:
        context = ChatContext(
            country=body.context.country,
            indicator=body.context.indicator,
            time_range=body.context.timeRange,
            data=[p.model_dump(exclude_none=True) for p in body.context.data],
        )

    try:
        text = explain(body.message.strip(), context)
    except ExplainerUnavailable as e:
        return JSONResponse({'success': False, 'error': str(e)}, status_code=500)
    except Exception as e:
        logger.exception("[Chat] explainer failed")
        return JSONResponse({'success': False, 'error': str(e) or 'Internal server error'}, status_code=500)

    return ChatResponse(success=True, response=text)
