"""Chat assistant API endpoint."""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from pbl_dashboard.core.chat_assistant import ChatMessage, generate_chat_reply
from pbl_dashboard.core.llm import LLMNotConfiguredError
from pbl_dashboard.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()

NOT_CONFIGURED_REPLY = (
    "The OpenAI API key is not configured. "
    "Set OPENAI_API_KEY in the environment or .env file to enable the assistant."
)


class ChatRequest(BaseModel):
    """Conversation so far, oldest message first."""

    messages: list[ChatMessage] = Field(default_factory=list)


class ChatResponse(BaseModel):
    message: str


@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest) -> ChatResponse:
    """
    Get the assistant's next reply.

    Returns 400 when the conversation is empty or does not end with a user
    message, and 502 when the model call fails.
    """
    try:
        reply = await generate_chat_reply(request.messages)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except LLMNotConfiguredError:
        logger.warning("Chat requested but OPENAI_API_KEY is not configured")
        return ChatResponse(message=NOT_CONFIGURED_REPLY)
    except Exception as e:
        logger.error(f"Chat model call failed: {e}", exc_info=True)
        raise HTTPException(status_code=502, detail=f"Chat model error: {e}") from e

    return ChatResponse(message=reply)
