"""
# Logging Manager

Central logging setup for the Blog Registry service.

All modules obtain their logger through `get_logger()`, optionally passing a
`prefix` that tags every message from that component:

```python
from blog_registry.managers.logging_manager import get_logger

logger = get_logger(prefix="[Blog Registry]")
logger.info("Registered author %s", account_id)
# 2026-01-01 12:00:00,000 - BlogRegistry - INFO - [Blog Registry] Registered author alice
```

The root handler is installed once, at the level given by `settings.LOG_LEVEL`.
"""

import logging
import sys
from typing import Any, Dict, MutableMapping, Optional, Tuple

from blog_registry.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured_loggers: Dict[str, logging.Logger] = {}


class PrefixedLogger(logging.LoggerAdapter):
    """Logger adapter that prepends a fixed prefix to every message."""

    def __init__(self, logger: logging.Logger, prefix: str = ""):
        super().__init__(logger, {})
        self.prefix = prefix

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        if self.prefix:
            return f"{self.prefix} {msg}", kwargs
        return msg, kwargs


def _resolve_level(level_name: str) -> int:
    level = logging.getLevelName(str(level_name).upper())
    return level if isinstance(level, int) else logging.INFO


def _configure(name: str) -> logging.Logger:
    if name in _configured_loggers:
        return _configured_loggers[name]

    base_logger = logging.getLogger(name)
    base_logger.setLevel(_resolve_level(settings.LOG_LEVEL))

    if not base_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        base_logger.addHandler(handler)
    base_logger.propagate = False

    _configured_loggers[name] = base_logger
    return base_logger


def get_logger(name: str = "BlogRegistry", prefix: str = "") -> PrefixedLogger:
    """
    Return a logger for the given component.

    Args:
        name (str): Underlying logger name. All registry components share "BlogRegistry".
        prefix (str): Text prepended to each message, e.g. "[DATABASE]".

    Returns:
        PrefixedLogger: A configured logger adapter.
    """
    return PrefixedLogger(_configure(name), prefix)


_lifecycle_logger = get_logger(prefix="[LIFECYCLE]")


def log_application_lifecycle(event: str, details: Optional[Dict[str, Any]] = None) -> None:
    """Log an application lifecycle event (startup, shutdown, store connection...)."""
    if details:
        rendered = ", ".join(f"{key}={value}" for key, value in details.items())
        _lifecycle_logger.info("%s - %s", event, rendered)
    else:
        _lifecycle_logger.info("%s", event)
