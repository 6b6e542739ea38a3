import logging
import os
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Engine.IO logs every packet at INFO.
_TRANSPORT_LOGGERS = ("engineio", "engineio.server", "socketio", "socketio.server")


def resolve_log_level(raw: str | int | None) -> int:
    """Turn a level name, number or numeric string into a logging level.

    Unknown names resolve to INFO rather than failing startup.
    """
    if isinstance(raw, int):
        return raw
    if not isinstance(raw, str) or not raw.strip():
        return logging.INFO
    name = raw.strip().upper()
    if name.isdigit():
        return int(name)
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO


def setup_logging(level: str | int | None = None) -> int:
    """Configure the root logger for the codepair server and return the level.

    The explicit `level` wins, then `CODEPAIR_LOG_LEVEL`, then `LOG_LEVEL`.
    """
    if level is None:
        level = os.getenv("CODEPAIR_LOG_LEVEL") or os.getenv("LOG_LEVEL")
    desired_level = resolve_log_level(level)

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
        logging.captureWarnings(True)
    root.setLevel(desired_level)

    transport_level = logging.NOTSET if desired_level <= logging.DEBUG else logging.WARNING
    for name in _TRANSPORT_LOGGERS:
        logging.getLogger(name).setLevel(transport_level)
    return desired_level
