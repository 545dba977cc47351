# utils/logger.py
import os
import sys
import uuid
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

from loguru import logger

log_dir = Path(os.getenv("SIGNAL_DESK_LOG_DIR", Path(__file__).resolve().parents[1] / "logs"))
log_dir.mkdir(parents=True, exist_ok=True)

start_time = datetime.now().strftime("%Y%m%d_%H%M%S")
log_file = log_dir / f"run_{start_time}.log"

# every record carries the desk request it belongs to; "-" outside a request
logger.remove()
logger.configure(extra={"symbol": "-", "request_id": "-"})

logger.add(
    sys.stdout,
    level=os.getenv("SIGNAL_DESK_LOG_LEVEL", "INFO"),
    enqueue=True,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | {level} | <cyan>{extra[symbol]}</cyan> | {message}",
)

logger.add(
    log_file,
    level="DEBUG",
    rotation="100 MB",
    retention="90 days",
    enqueue=True,
    encoding="utf-8",
    format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {extra[request_id]} {extra[symbol]} | {name}:{function} | {message}",
)


@contextmanager
def request_context(symbol: str, request_id: str | None = None):
    """Tag every record logged inside the block with the request's symbol and id."""
    request_id = request_id or uuid.uuid4().hex[:8]
    with logger.contextualize(symbol=symbol, request_id=request_id):
        yield request_id


logger.info(f"Logger initialized. Writing logs to {log_file}")
