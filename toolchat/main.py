"""
启动入口（中文注释）：

功能说明：
- 读取配置（GEMINI_API_KEY、模型名、端口等）
- 配置缺失时给出提示并以状态码 1 退出
- 用 uvicorn 启动 HTTP 服务

运行：python -m toolchat.main  或安装后执行  toolchat
"""

import uvicorn

from toolchat.api.app import create_app
from toolchat.config import load_config, validate_config
from toolchat.utils.logger import logger


def run() -> None:
    cfg = load_config()
    errors = validate_config(cfg)
    if errors:
        # 友好提示用户填写配置
        print("配置缺失：")
        for e in errors:
            print(f"- {e}")
        print("\n请在 .env 或 config/config.yaml 中补齐后再运行。")
        raise SystemExit(1)

    app = create_app(cfg)
    logger.info(f"Server starting, from browser visit http://{cfg.server.host}:{cfg.server.port}")
    uvicorn.run(app, host=cfg.server.host, port=cfg.server.port, log_level=cfg.log_level.lower())


if __name__ == "__main__":
    run()
