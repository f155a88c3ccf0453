"""LLM client utilities for LangChain integration."""

from langchain_openai import ChatOpenAI

from pbl_dashboard.core.config import get_settings


class LLMNotConfiguredError(RuntimeError):
    """Raised when the chat model is requested without an API key."""


def get_llm(
    model: str | None = None,
    temperature: float | None = None,
    max_tokens: int | None = None,
) -> ChatOpenAI:
    """
    Get configured LLM instance for LangChain chains.

    Args:
        model: Model name override (defaults to config setting)
        temperature: Temperature override (defaults to config setting)
        max_tokens: Completion token limit override (defaults to config setting)

    Returns:
        ChatOpenAI instance configured with API key and model

    Raises:
        LLMNotConfiguredError: If OPENAI_API_KEY is not set
    """
    settings = get_settings()
    if not settings.OPENAI_API_KEY:
        raise LLMNotConfiguredError("OPENAI_API_KEY not configured")

    return ChatOpenAI(
        api_key=settings.OPENAI_API_KEY,
        model=model or settings.OPENAI_MODEL,
        temperature=settings.CHAT_TEMPERATURE if temperature is None else temperature,
        max_tokens=max_tokens or settings.CHAT_MAX_TOKENS,
    )
