from loguru import logger

from ricochet.common import init_logger


def test_init_logger_adds_file_sink(tmp_path):
    log_file = tmp_path / "logs" / "ricochet.log"
    try:
        init_logger(level="DEBUG", log_file=str(log_file), force=True)
        logger.info("suite started")
        assert log_file.parent.is_dir()
        assert log_file.exists()
    finally:
        init_logger(level="INFO", force=True)


def test_init_logger_is_idempotent_without_force(tmp_path):
    init_logger(level="INFO", force=True)
    log_file = tmp_path / "second.log"

    init_logger(level="DEBUG", log_file=str(log_file))
    assert not log_file.exists()
