"""FastDoc 로거 설정.

``FASTDOC_LOG_LEVEL`` 환경변수(``DEBUG``, ``INFO`` ...)로 기본 로그 레벨을 바꿀 수 있습니다.
"""
import logging
import os
from typing import Optional, Union

from uvicorn.logging import DefaultFormatter

LOG_FORMAT = "%(levelprefix)s [%(name)s] %(message)s"


def get_log_level() -> int:
    level = logging.getLevelName(os.environ.get("FASTDOC_LOG_LEVEL", "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def get_logger(name: str, log_level: Optional[Union[int, str]] = None) -> logging.Logger:
    """`name` 로거를 리턴합니다. 핸들러는 처음 한 번만 추가합니다."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        logger.setLevel(log_level if log_level is not None else get_log_level())
        handler = logging.StreamHandler()
        handler.setFormatter(DefaultFormatter(fmt=LOG_FORMAT))
        logger.addHandler(handler)

    return logger
