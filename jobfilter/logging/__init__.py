"""Logging for jobfilter components.

Modules log through ``get_logger(__name__, component=...)`` and name each
record with an ``event`` in ``extra``. configure_logging() in
jobfilter.logging.config decides how records are rendered.
"""

import logging
from typing import Any, MutableMapping, Optional, Tuple, Union


class ComponentLoggerAdapter(logging.LoggerAdapter):
    """Adds a fixed ``component`` field; a call's own ``extra`` fields win."""

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs


def get_logger(
    name: str, component: Optional[str] = None
) -> Union[logging.Logger, ComponentLoggerAdapter]:
    """
    Logger for a module, tagged with its component when one is given.

    Example:
        >>> logger = get_logger(__name__, component="watcher")
        >>> logger.info("Change watcher started", extra={"event": "watcher.started"})
    """
    logger = logging.getLogger(name)
    if component is None:
        return logger
    return ComponentLoggerAdapter(logger, {"component": component})
