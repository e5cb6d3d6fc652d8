"""
AI Assistant.

Single-turn chat backed by Gemini.
"""

from fastapi import APIRouter, Request

from studyshare.backend.api.forms import parse_payload
from studyshare.backend.clients.gemini import GeminiClient
from studyshare.backend.schemas.ai import AskRequest, AskResponse

router = APIRouter()


@router.post("/ask-ai", response_model=AskResponse)
async def ask_ai(request: Request) -> AskResponse:
    body = await parse_payload(request, AskRequest)
    reply = await GeminiClient().ask(body.message)
    return AskResponse(reply=reply)
