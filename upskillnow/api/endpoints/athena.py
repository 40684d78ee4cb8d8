"""
Athena tutor endpoint
"""

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from upskillnow.core.security import get_current_user
from upskillnow.models import User
from upskillnow.schemas.athena import AthenaAnswer, AthenaQuestion
from upskillnow.services.athena import AthenaService, get_athena

router = APIRouter()


@router.post(
    "/",
    response_model=AthenaAnswer,
    responses={200: {"content": {"text/plain": {}}, "description": "Streamed answer"}},
)
async def ask_athena(
    data: AthenaQuestion,
    user: User = Depends(get_current_user),
    athena: AthenaService = Depends(get_athena),
):
    """Ask the tutor; the answer streams as plain text unless stream is false"""
    if data.stream:
        chunks = await athena.stream(data.question, data.history)
        return StreamingResponse(chunks, media_type="text/plain; charset=utf-8")

    answer, max_tokens = await athena.ask(data.question, data.history)
    return {"answer": answer, "used_max_tokens": max_tokens}
