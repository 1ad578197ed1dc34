from toolchat.config import load_config
from toolchat.utils.logger import configure_logger, logger


def test_file_sink_receives_messages(tmp_path):
    log_file = tmp_path / "toolchat.log"
    try:
        handler_ids = configure_logger("info", str(log_file))
        assert len(handler_ids) == 2
        logger.debug("hidden debug line")
        logger.info("session s1 saved")
        logger.complete()
    finally:
        cfg = load_config()
        configure_logger(cfg.log_level, cfg.log_file)

    text = log_file.read_text(encoding="utf-8")
    assert "session s1 saved" in text
    assert "hidden debug line" not in text
    assert "| INFO " in text


def test_console_only_without_log_file():
    try:
        assert len(configure_logger("DEBUG")) == 1
    finally:
        cfg = load_config()
        configure_logger(cfg.log_level, cfg.log_file)
