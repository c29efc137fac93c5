"""
로깅 헬퍼
=========

패키지 로거 "potau"와 모듈별 하위 로거를 제공한다.
init_logging()은 한 번만 핸들러를 붙인다.
"""

import logging
from logging.handlers import RotatingFileHandler


_LOG_INITIALIZED = False
_LOGGER = logging.getLogger("potau")

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def to_logging_level(level):
    """로그 레벨 문자열을 logging 상수로 변환한다. 모르는 값은 INFO."""
    return _LEVELS.get((level or "INFO").upper(), logging.INFO)


def init_logging(level="INFO", log_file=None, console=True,
                 max_bytes=10 * 1024 * 1024, backup_count=5):
    """패키지 로거를 초기화한다.

    Args:
        level: 로그 레벨 문자열 ("DEBUG", "INFO", ...)
        log_file: 로그 파일 경로. None이면 파일에 쓰지 않는다.
        console: True면 콘솔에도 출력한다.
        max_bytes: 로그 파일 하나의 최대 크기
        backup_count: 보관할 이전 로그 파일 수
    """
    global _LOG_INITIALIZED
    if _LOG_INITIALIZED:
        return

    log_level = to_logging_level(level)
    _LOGGER.setLevel(log_level)
    _LOGGER.propagate = False

    fmt = logging.Formatter(fmt="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
                            datefmt="%H:%M:%S")

    if log_file:
        fh = RotatingFileHandler(log_file, maxBytes=max_bytes,
                                 backupCount=backup_count, encoding="utf-8")
        fh.setLevel(log_level)
        fh.setFormatter(fmt)
        _LOGGER.addHandler(fh)

    if console:
        ch = logging.StreamHandler()
        ch.setLevel(log_level)
        ch.setFormatter(fmt)
        _LOGGER.addHandler(ch)

    _LOG_INITIALIZED = True


def get_logger(name):
    """모듈 이름에 맞는 하위 로거를 반환한다 (예: potau.accumulator)."""
    if name == "potau" or name.startswith("potau."):
        return logging.getLogger(name)
    return _LOGGER.getChild(name)
