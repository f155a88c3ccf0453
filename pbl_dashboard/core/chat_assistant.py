"""PBL assistant chat chain.

Sends a fixed system prompt plus the most recent conversation turns to the
configured chat model and returns the reply text.
"""

from typing import Literal

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from pydantic import BaseModel

from pbl_dashboard.core.config import get_settings
from pbl_dashboard.core.llm import get_llm
from pbl_dashboard.core.logging import get_logger

logger = get_logger(__name__)

SYSTEM_PROMPT = """You are the AI assistant for a PBL (Project-Based Learning) project.
Your roles:

1. **Project management support**
   - Answer questions about task management, scheduling and progress
   - Help with WBS (Work Breakdown Structure) questions

2. **Student support**
   - Advise on raising student motivation
   - Suggest how to approach tasks and build skills
   - Suggest improvements to teamwork and communication

3. **Data interpretation**
   - Explain how to read the dashboard and its data
   - Explain the danger, motivation and load scores (all on a 1-5 scale)

4. **AI tool suggestions**
   - Recommend AI tools that fit a task
   - Explain how to use assistants such as ChatGPT, Claude or Copilot

Keep answers concise and practical."""

FALLBACK_REPLY = "Sorry, I could not generate a reply."


class ChatMessage(BaseModel):
    """A single chat message."""

    role: Literal["user", "assistant"]
    content: str


def build_messages(history: list[ChatMessage], limit: int) -> list[BaseMessage]:
    """System prompt followed by the last ``limit`` turns of the conversation."""
    messages: list[BaseMessage] = [SystemMessage(content=SYSTEM_PROMPT)]
    for message in history[-limit:]:
        if message.role == "user":
            messages.append(HumanMessage(content=message.content))
        else:
            messages.append(AIMessage(content=message.content))
    return messages


async def generate_chat_reply(history: list[ChatMessage]) -> str:
    """
    Ask the chat model for the next assistant turn.

    Args:
        history: Conversation so far; the last message must be from the user

    Returns:
        Reply text

    Raises:
        ValueError: If history is empty or does not end with a user message
        LLMNotConfiguredError: If no API key is configured
    """
    if not history:
        raise ValueError("Messages are required")
    if history[-1].role != "user":
        raise ValueError("Last message must be from user")

    settings = get_settings()
    model = get_llm()
    messages = build_messages(history, settings.CHAT_HISTORY_LIMIT)

    logger.info(f"Calling chat model with {len(messages)} messages")
    response = await model.ainvoke(messages)

    content = response.content if isinstance(response.content, str) else ""
    return content or FALLBACK_REPLY
