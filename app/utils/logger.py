"""loguru 로그 싱크 설정.

Configures loguru sinks for the application. Modules import
``from loguru import logger`` directly; this module only decides where the
records go.
"""

import sys

from loguru import logger

from app.config import settings

_LOG_FORMAT: str = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)

_configured: bool = False


def setup_logging() -> None:
    """stderr 싱크와 선택적 파일 싱크를 등록합니다.

    Register the stderr sink and, when LOG_FILE is set, a daily rotating file sink.
    Calling this more than once is a no-op.
    """
    global _configured
    if _configured:
        return

    logger.remove()
    logger.add(sys.stderr, format=_LOG_FORMAT, level=settings.LOG_LEVEL)

    if settings.LOG_FILE:
        logger.add(
            settings.LOG_FILE,
            format=_LOG_FORMAT,
            level=settings.LOG_LEVEL,
            rotation="1 day",
            retention="30 days",
            encoding="utf-8",
        )

    _configured = True
