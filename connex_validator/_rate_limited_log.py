"""
Thread-safe rate-limited logging utilities.

Validation failures tend to repeat (the same malformed record polled over
and over), so diagnostics are logged once per message per interval.
"""
import logging
import threading
from typing import Optional

from cachetools import TTLCache

# Configure logger
logger = logging.getLogger(__name__)

DEFAULT_INTERVAL = 60

# Keys expire after DEFAULT_INTERVAL seconds; at most 256 distinct messages tracked
_failure_log_cache = TTLCache(maxsize=256, ttl=DEFAULT_INTERVAL)
_failure_log_cache_lock = threading.RLock()


def rate_limited_log(
    message: str,
    level: str = "warning",
    logger_instance: Optional[logging.Logger] = None
) -> bool:
    """
    Log a message unless the same level and message was logged recently.

    Args:
        message: Message to log
        level: Log level (debug, info, warning, error, critical)
        logger_instance: Logger to use (defaults to module logger)

    Returns:
        True if the message was emitted, False if it was suppressed
    """
    log_instance = logger_instance or logger
    log_method = getattr(log_instance, level.lower(), log_instance.warning)
    key = f"{level}:{message}"

    with _failure_log_cache_lock:
        if key in _failure_log_cache:
            return False
        log_method(message)
        _failure_log_cache[key] = True
    return True


def reset_rate_limited_log() -> None:
    """Forget every suppressed message."""
    with _failure_log_cache_lock:
        _failure_log_cache.clear()
