"""Rule store: where per-site filter settings live.

Backends:
- MemoryRuleStore: in-process dict
- YamlRuleStore: flat YAML file
- SqlRuleStore: SQL table through SQLAlchemy

load_rule_set() turns a site's stored values into a RuleSet.
"""

from .base import RuleStore
from .exceptions import StoreError, StoreUnavailableError
from .factory import create_store
from .keys import SiteKeys
from .memory import MemoryRuleStore
from .settings import build_rule_set, load_rule_set
from .sql_store import SqlRuleStore
from .yaml_store import YamlRuleStore

__all__ = [
    "RuleStore",
    "MemoryRuleStore",
    "YamlRuleStore",
    "SqlRuleStore",
    "SiteKeys",
    "create_store",
    "load_rule_set",
    "build_rule_set",
    "StoreError",
    "StoreUnavailableError",
]
