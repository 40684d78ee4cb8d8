"""Athena tutor schemas"""

from typing import List, Literal

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    role: Literal["user", "model"]
    content: str


class AthenaQuestion(BaseModel):
    question: str = Field(..., min_length=1)
    history: List[ChatMessage] = []
    stream: bool = True


class AthenaAnswer(BaseModel):
    answer: str
    used_max_tokens: int
