import pytest
from fastapi.testclient import TestClient
from langchain_core.messages import AIMessage

from conftest import FailingChatModel, fake_llm
from toolchat.api.app import create_app
from toolchat.chains.chat_flow import ChatFlow
from toolchat.config import AppConfig


def make_client(cfg, llm):
    flow = ChatFlow(cfg, llm=llm, tools={}, callbacks=[])
    return TestClient(create_app(cfg, chat_flow=flow)), flow


def test_chat_returns_result_and_tracks_session(cfg):
    client, flow = make_client(cfg, fake_llm(AIMessage(content="hello"), AIMessage(content="again")))

    resp = client.post("/chat", json={"data": {"question": "hi", "sessionID": "abc"}})
    assert resp.status_code == 200
    assert resp.json() == {"result": "hello"}

    resp = client.post("/chat", json={"data": {"question": "hi again", "sessionID": "abc"}})
    assert resp.json() == {"result": "again"}
    assert [m.content for m in flow.store.get("abc")] == ["hi", "hello", "hi again", "again"]


def test_chat_without_session_id(cfg):
    client, flow = make_client(cfg, fake_llm(AIMessage(content="ok")))
    resp = client.post("/chat", json={"data": {"question": "hi"}})
    assert resp.status_code == 200
    assert resp.json() == {"result": "ok"}
    assert len(flow.store) == 0


def test_chat_failure_returns_error_payload(cfg):
    client, flow = make_client(cfg, FailingChatModel(messages=iter([])))
    resp = client.post("/chat", json={"data": {"question": "hi", "sessionID": "abc"}})
    assert resp.status_code == 500
    assert resp.json() == {"error": {"status": "INTERNAL", "message": "LLM generation failed"}}
    assert flow.store.get("abc") == []


def test_chat_missing_question_is_treated_as_empty(cfg):
    client, flow = make_client(cfg, fake_llm(AIMessage(content="What would you like to ask?")))
    resp = client.post("/chat", json={"data": {"sessionID": "s"}})
    assert resp.status_code == 200
    assert resp.json() == {"result": "What would you like to ask?"}
    assert [m.content for m in flow.store.get("s")] == ["", "What would you like to ask?"]


def test_chat_rejects_malformed_body(cfg):
    client, _ = make_client(cfg, fake_llm())
    assert client.post("/chat", json={"question": "hi"}).status_code == 422


def test_index_serves_chat_page(cfg):
    client, _ = make_client(cfg, fake_llm())
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert "/chat" in resp.text


def test_healthz(cfg):
    client, _ = make_client(cfg, fake_llm())
    assert client.get("/healthz").json() == {"ok": True}


def test_create_app_fails_fast_on_missing_credentials():
    with pytest.raises(RuntimeError, match="GEMINI_API_KEY"):
        create_app(AppConfig())
