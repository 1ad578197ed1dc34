"""
HTTP API。

路由说明：
- GET  /          聊天页面（静态 HTML）
- GET  /healthz   健康检查
- POST /chat      一次对话：{"data": {"question": "...", "sessionID": "..."}}

示例：
curl -X POST http://127.0.0.1:3400/chat -H 'Content-Type: application/json' \
     -d '{"data": {"question": "hello", "sessionID": "abc"}}'
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from toolchat.api.schemas import ChatRequest, ChatResponse, ErrorDetail, ErrorResponse
from toolchat.chains.chat_flow import ChatFlow, ChatFlowError
from toolchat.config import AppConfig, load_config, validate_config
from toolchat.utils.logger import logger


STATIC_DIR = Path(__file__).resolve().parent.parent / "static"


def _parse_cors_origins(value: Optional[str]) -> list[str]:
    """
    解析 CORS_ORIGINS 配置。 （未配置时允许任意源）
    """

    if not value:
        return ["*"]
    value = value.strip()
    if value == "*":
        return ["*"]
    return [x.strip() for x in value.split(",") if x.strip()]


def create_app(cfg: Optional[AppConfig] = None, chat_flow: Optional[ChatFlow] = None) -> FastAPI:
    """
    创建 FastAPI 应用。

    未传入 chat_flow 时按配置构建；配置缺失关键项时直接抛 RuntimeError（启动即失败）。
    """
    cfg = cfg or load_config()
    if chat_flow is None:
        errors = validate_config(cfg)
        if errors:
            raise RuntimeError("配置缺失：" + "；".join(errors))
        chat_flow = ChatFlow(cfg)

    app = FastAPI(title="toolchat API", version="0.1.0")
    app.state.chat_flow = chat_flow

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_parse_cors_origins(cfg.server.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    def index():
        return FileResponse(STATIC_DIR / "chat.html", media_type="text/html")

    @app.get("/healthz")
    def healthz():
        return {"ok": True}

    @app.post(
        "/chat",
        response_model=ChatResponse,
        responses={500: {"model": ErrorResponse}},
    )
    def chat(req: ChatRequest):
        logger.info(f"收到对话请求。session_id={req.data.session_id}, 问题={req.data.question[:50]}...")
        try:
            answer = chat_flow.handle_chat(req.data.question, req.data.session_id)
        except ChatFlowError as e:
            body = ErrorResponse(error=ErrorDetail(status="INTERNAL", message=str(e)))
            return JSONResponse(status_code=500, content=body.model_dump())
        return ChatResponse(result=answer)

    return app
