"""Fields attached to every log record emitted inside a scope.

The session pushes ``site`` and ``session_id``; each filter pass adds
``pass_id``. Fields live in a ContextVar, so every asyncio task works on its
own copy.
"""

from contextlib import contextmanager
from contextvars import ContextVar, Token
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping

_EMPTY: Mapping[str, Any] = MappingProxyType({})
_fields: ContextVar[Mapping[str, Any]] = ContextVar("jobfilter_log_fields", default=_EMPTY)


def get_log_context() -> Dict[str, Any]:
    """Active fields as a new dict."""
    return dict(_fields.get())


def push_log_context(**fields: Any) -> Token:
    """Layer ``fields`` over the active ones. Undo with pop_log_context(token)."""
    return _fields.set(MappingProxyType({**_fields.get(), **fields}))


def pop_log_context(token: Token) -> None:
    _fields.reset(token)


def clear_log_context() -> None:
    _fields.set(_EMPTY)


@contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    """
    Scope ``fields`` to a with-block.

    Example:
        >>> with log_context(site="indeed", session_id="9c1d02"):
        ...     logger.info("Watcher bound")  # record carries site and session_id
    """
    token = push_log_context(**fields)
    try:
        yield
    finally:
        pop_log_context(token)
