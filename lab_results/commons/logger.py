import sys
from datetime import datetime
from pathlib import Path

from loguru import logger

DEFAULT_STREAM = "lab-results"


def setup_logging(root: str, level: str = "INFO"):
    logdir = Path(root) / datetime.now().strftime("%Y/%m/%d")
    logdir.mkdir(parents=True, exist_ok=True)
    logfile = logdir / "app.log"
    logger.remove()
    logger.configure(extra={"stream": DEFAULT_STREAM})
    logger.add(
        str(logfile),
        rotation="00:00",
        retention="14 days",
        level=level,
        enqueue=True,
        backtrace=True,
        diagnose=True,
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[stream]} | {message}",
    )
    logger.add(lambda m: print(m, end="", file=sys.stderr), level=level)
    return logger


def get_stream_logger(stream: str = DEFAULT_STREAM):
    """Logger bound to a named stream; the stream name fills the third column of app.log."""
    return logger.bind(stream=stream)
