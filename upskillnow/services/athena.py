"""
Athena, the AI tutor
Answers course questions through Gemini, streamed or in one piece
"""

import logging
from typing import AsyncIterator, List, Optional, Sequence, Tuple

from google import genai
from google.genai import types

from upskillnow.core.config import settings
from upskillnow.core.exceptions import InternalError
from upskillnow.schemas.athena import ChatMessage

logger = logging.getLogger(__name__)

ATHENA_PROMPT = """\
You are Athena, the AI Professor at UpskillNow.
You specialize in Computer Science, Information Technology, and Data Science.
Speak clearly and structure answers. Provide:
1) A concise explanation
2) An example
3) Practical applications
4) Recommended next steps/resources
When asked for code, provide well documented, clean code.
Adapt depth to the user's level (graduating students).
"""

ATHENA_ERROR = "Athena encountered an error."
NO_RESPONSE = "No response generated."

BASE_MAX_TOKENS = 500
MAX_TOKENS_CAP = 1600


def max_tokens_for(question: str) -> int:
    """Longer questions get a larger output budget"""
    words = len(question.split())
    budget = BASE_MAX_TOKENS
    if words > 20:
        budget += 200
    if words > 50:
        budget += 300
    return min(budget, MAX_TOKENS_CAP)


def build_contents(question: str, history: Sequence[ChatMessage]) -> List[types.Content]:
    contents = [
        types.Content(role=message.role, parts=[types.Part(text=message.content)])
        for message in history
    ]
    contents.append(types.Content(role="user", parts=[types.Part(text=question)]))
    return contents


def generation_config(max_tokens: int) -> types.GenerateContentConfig:
    return types.GenerateContentConfig(
        system_instruction=ATHENA_PROMPT,
        max_output_tokens=max_tokens,
        temperature=0.7,
        top_p=0.9,
    )


async def _texts(chunks) -> AsyncIterator[str]:
    try:
        async for chunk in chunks:
            if chunk.text:
                yield chunk.text
    except Exception as e:
        logger.error(f"Athena stream interrupted: {e}")
        raise


class AthenaService:
    """Gemini-backed tutor"""

    def __init__(self, client: Optional[genai.Client] = None):
        self._client = client

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            if not settings.GEMINI_API_KEY:
                logger.warning("Athena requested but GEMINI_API_KEY is not set")
                raise InternalError(ATHENA_ERROR)
            self._client = genai.Client(api_key=settings.GEMINI_API_KEY)
        return self._client

    async def ask(self, question: str, history: Sequence[ChatMessage]) -> Tuple[str, int]:
        """
        Full answer in one response

        Returns:
            (answer text, output token budget used for the request)
        """
        client = self.client
        max_tokens = max_tokens_for(question)
        try:
            response = await client.aio.models.generate_content(
                model=settings.GEMINI_MODEL,
                contents=build_contents(question, history),
                config=generation_config(max_tokens),
            )
        except Exception as e:
            logger.error(f"Athena request failed: {e}")
            raise InternalError(ATHENA_ERROR) from e

        return response.text or NO_RESPONSE, max_tokens

    async def stream(self, question: str, history: Sequence[ChatMessage]) -> AsyncIterator[str]:
        """Open a streamed answer; the returned iterator yields text as it arrives"""
        client = self.client
        try:
            chunks = await client.aio.models.generate_content_stream(
                model=settings.GEMINI_MODEL,
                contents=build_contents(question, history),
                config=generation_config(max_tokens_for(question)),
            )
        except Exception as e:
            logger.error(f"Athena stream failed to start: {e}")
            raise InternalError(ATHENA_ERROR) from e

        return _texts(chunks)


athena_service = AthenaService()


def get_athena() -> AthenaService:
    """Dependency returning the tutor service"""
    return athena_service
