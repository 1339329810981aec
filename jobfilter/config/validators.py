"""Non-fatal configuration checks, reported as UserWarnings."""

import warnings
from typing import Any, Dict, List

from jobfilter.adapters.factory import ADAPTER_MAP

RawConfig = Dict[str, Any]


def _section(raw: RawConfig, name: str) -> Dict[str, Any]:
    value = raw.get(name)
    return value if isinstance(value, dict) else {}


def _page_url_checks(raw: RawConfig) -> List[str]:
    site, page_url = raw.get("site"), raw.get("page_url")
    if not isinstance(site, str) or not isinstance(page_url, str):
        return []
    adapter_class = ADAPTER_MAP.get(site.strip().lower())
    if adapter_class is None or adapter_class().matches_url(page_url):
        return []
    return [
        f"page_url {page_url} is not filtered by the {site} adapter; "
        "the page will be left unchanged"
    ]


def _settings_checks(raw: RawConfig) -> List[str]:
    settings = _section(raw, "settings")
    backend = settings.get("backend")
    if backend == "memory":
        return ["settings.backend is memory: rules start empty and are not persisted"]
    if backend == "sqlite" and settings.get("path"):
        return ["settings.path is ignored by the sqlite backend (use database_url)"]
    return []


def _watcher_checks(raw: RawConfig) -> List[str]:
    attempts = _section(raw, "watcher").get("container_max_attempts")
    if isinstance(attempts, int) and attempts > 100:
        return [f"container_max_attempts={attempts} delays the fallback to the page body"]
    return []


CHECKS = (_page_url_checks, _settings_checks, _watcher_checks)


def check_for_warnings(raw: RawConfig) -> List[str]:
    """Problems in a raw config mapping that do not stop jobfilter from running."""
    return [message for check in CHECKS for message in check(raw)]


def emit_warnings(messages: List[str]) -> None:
    for message in messages:
        warnings.warn(message, UserWarning, stacklevel=3)
