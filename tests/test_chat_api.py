"""Tests for the chat assistant endpoint with a mocked LangChain chat model."""

from unittest.mock import AsyncMock, MagicMock, patch

from fastapi.testclient import TestClient
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from pbl_dashboard.core.chat_assistant import SYSTEM_PROMPT
from pbl_dashboard.core.config import Settings
from pbl_dashboard.main import app

client = TestClient(app)


def _mock_model(reply: str = "Try splitting the task into smaller steps.") -> MagicMock:
    model = MagicMock()
    model.ainvoke = AsyncMock(return_value=AIMessage(content=reply))
    return model


@patch("pbl_dashboard.core.llm.ChatOpenAI")
def test_chat_returns_model_reply(mock_chat_cls):
    mock_chat_cls.return_value = _mock_model()

    response = client.post(
        "/v1/chat",
        json={"messages": [{"role": "user", "content": "How do I plan my week?"}]},
    )

    assert response.status_code == 200
    assert response.json() == {"message": "Try splitting the task into smaller steps."}

    kwargs = mock_chat_cls.call_args.kwargs
    assert kwargs["temperature"] == 0.7
    assert kwargs["max_tokens"] == 1000

    sent = mock_chat_cls.return_value.ainvoke.call_args.args[0]
    assert isinstance(sent[0], SystemMessage)
    assert sent[0].content == SYSTEM_PROMPT
    assert isinstance(sent[1], HumanMessage)


@patch("pbl_dashboard.core.llm.ChatOpenAI")
def test_chat_sends_only_recent_history(mock_chat_cls):
    mock_chat_cls.return_value = _mock_model()
    history = [
        {"role": "user" if i % 2 == 0 else "assistant", "content": f"message {i}"}
        for i in range(13)
    ]

    response = client.post("/v1/chat", json={"messages": history})

    assert response.status_code == 200
    sent = mock_chat_cls.return_value.ainvoke.call_args.args[0]
    assert len(sent) == 11
    assert sent[1].content == "message 3"
    assert isinstance(sent[1], AIMessage)
    assert isinstance(sent[2], HumanMessage)
    assert sent[-1].content == "message 12"


@patch("pbl_dashboard.core.llm.ChatOpenAI")
def test_empty_reply_uses_fallback(mock_chat_cls):
    mock_chat_cls.return_value = _mock_model(reply="")

    response = client.post("/v1/chat", json={"messages": [{"role": "user", "content": "hi"}]})

    assert response.json()["message"] == "Sorry, I could not generate a reply."


def test_empty_conversation_is_rejected():
    response = client.post("/v1/chat", json={"messages": []})
    assert response.status_code == 400


def test_last_message_must_be_from_user():
    response = client.post(
        "/v1/chat",
        json={"messages": [{"role": "user", "content": "hi"}, {"role": "assistant", "content": "hello"}]},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Last message must be from user"


def test_missing_api_key_returns_explanation():
    with patch("pbl_dashboard.core.llm.get_settings", return_value=Settings(OPENAI_API_KEY=None)):
        response = client.post("/v1/chat", json={"messages": [{"role": "user", "content": "hi"}]})

    assert response.status_code == 200
    assert "OPENAI_API_KEY" in response.json()["message"]


@patch("pbl_dashboard.core.llm.ChatOpenAI")
def test_model_failure_is_502(mock_chat_cls):
    model = MagicMock()
    model.ainvoke = AsyncMock(side_effect=RuntimeError("rate limited"))
    mock_chat_cls.return_value = model

    response = client.post("/v1/chat", json={"messages": [{"role": "user", "content": "hi"}]})

    assert response.status_code == 502
    assert "rate limited" in response.json()["detail"]
