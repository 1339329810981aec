"""Site adapters: where each recruiting site keeps its job cards.

Supported sites:
- LinkedIn: linkedin.LinkedInAdapter
- Naukri: naukri.NaukriAdapter
- Indeed: indeed.IndeedAdapter
- Glassdoor: glassdoor.GlassdoorAdapter
- Foundit: foundit.FounditAdapter

Use the factory function to instantiate adapters:
    from jobfilter.adapters import get_adapter
    adapter = get_adapter("indeed")
    cards = adapter.find_cards(page.body)
"""

from .base import BaseSiteAdapter
from .exceptions import AdapterConfigurationError, AdapterError
from .factory import ADAPTER_MAP, get_adapter, supported_sites
from .foundit import FounditAdapter
from .glassdoor import GlassdoorAdapter
from .indeed import IndeedAdapter
from .linkedin import LinkedInAdapter
from .naukri import NaukriAdapter

__all__ = [
    "BaseSiteAdapter",
    "get_adapter",
    "supported_sites",
    "ADAPTER_MAP",
    "LinkedInAdapter",
    "NaukriAdapter",
    "IndeedAdapter",
    "GlassdoorAdapter",
    "FounditAdapter",
    "AdapterError",
    "AdapterConfigurationError",
]
