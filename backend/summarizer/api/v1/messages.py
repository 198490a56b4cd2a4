"""
Extension message endpoint.

The extension forwards its runtime messages here unchanged:
- POST /api/v1/messages - {"action": "...", ...payload} -> action response dict
"""

from typing import Any

from fastapi import APIRouter, HTTPException, Request

from summarizer.services.message_router import MessageRouter

router = APIRouter(prefix="/messages", tags=["messages"])


def _get_message_router(request: Request) -> MessageRouter:
    message_router = getattr(request.app.state, "message_router", None)
    if message_router is None:
        raise HTTPException(status_code=503, detail="Summary service unavailable")
    return message_router


@router.post("")
async def handle_message(message: dict[str, Any], request: Request) -> dict[str, Any]:
    """Dispatch one extension message. Expected failures come back as {"error": ...}."""
    return await _get_message_router(request).handle(message)
