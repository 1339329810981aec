"""Factory function for instantiating site adapters."""

from typing import Dict, Type

from jobfilter.logging import get_logger

from .base import BaseSiteAdapter
from .exceptions import AdapterConfigurationError
from .foundit import FounditAdapter
from .glassdoor import GlassdoorAdapter
from .indeed import IndeedAdapter
from .linkedin import LinkedInAdapter
from .naukri import NaukriAdapter

logger = get_logger(__name__, component="adapters")

ADAPTER_MAP: Dict[str, Type[BaseSiteAdapter]] = {
    "linkedin": LinkedInAdapter,
    "naukri": NaukriAdapter,
    "indeed": IndeedAdapter,
    "glassdoor": GlassdoorAdapter,
    "foundit": FounditAdapter,
}


def supported_sites():
    return sorted(ADAPTER_MAP)


def get_adapter(site: str) -> BaseSiteAdapter:
    """Instantiate the adapter for a site.

    Args:
        site: Site name as used in configuration (case-insensitive)

    Returns:
        Adapter instance for the site

    Raises:
        AdapterConfigurationError: If the site is not supported

    Example:
        >>> adapter = get_adapter("naukri")
        >>> adapter.keys.hide_saved
        'naukri_hideSaved'
    """
    site_name = (site or "").strip().lower()
    adapter_class = ADAPTER_MAP.get(site_name)

    if not adapter_class:
        raise AdapterConfigurationError(
            f"Unknown site: {site}. Supported sites: {', '.join(supported_sites())}"
        )

    logger.debug(
        "Creating adapter instance",
        extra={
            "event": "adapter.created",
            "site": site_name,
            "adapter_class": adapter_class.__name__,
        },
    )
    return adapter_class()
