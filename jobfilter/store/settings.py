"""Build a site's RuleSet from raw stored settings."""

from typing import TYPE_CHECKING, Any, List, Mapping, Optional

from jobfilter.domain.models import RuleSet
from jobfilter.logging import get_logger
from jobfilter.normalization import NormalizationMode, normalize

from .base import RuleStore
from .exceptions import StoreError
from .keys import FLAG_FIELDS, LIST_FIELDS

if TYPE_CHECKING:
    from jobfilter.adapters.base import BaseSiteAdapter

logger = get_logger(__name__, component="store")


def _coerce_list(key: str, value: Any) -> Optional[List[str]]:
    """Accept a list of strings or a comma-separated string.

    Returns None (and logs) for anything else.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return value.split(",")
    if isinstance(value, (list, tuple)):
        items = [item for item in value if isinstance(item, str)]
        if len(items) != len(value):
            logger.warning(
                "Ignoring non-string entries in rule list",
                extra={"event": "settings.rule.ignored", "key": key},
            )
        return items

    logger.warning(
        f"Ignoring setting with unexpected type {type(value).__name__}",
        extra={"event": "settings.value.ignored", "key": key},
    )
    return None


def _coerce_flag(key: str, value: Any) -> Optional[bool]:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"

    logger.warning(
        f"Ignoring setting with unexpected type {type(value).__name__}",
        extra={"event": "settings.value.ignored", "key": key},
    )
    return None


def _drop_empty_rules(key: str, rules: List[str], mode: NormalizationMode) -> List[str]:
    """Discard rules with nothing left to match once normalized ("!!!", "123" in alpha mode)."""
    kept = []
    for rule in rules:
        if not rule.strip():
            continue
        if not normalize(rule, mode):
            logger.warning(
                f"Discarding rule that normalizes to nothing: {rule!r}",
                extra={"event": "settings.rule.discarded", "key": key},
            )
            continue
        kept.append(rule)
    return kept


def build_rule_set(raw: Mapping[str, Any], adapter: "BaseSiteAdapter") -> RuleSet:
    """Coerce raw stored values into a RuleSet for ``adapter``.

    Args:
        raw: Mapping of storage key to stored value
        adapter: Site adapter whose keys and normalization mode apply

    Returns:
        RuleSet; fields the site does not configure keep their defaults
    """
    values = {}
    for field_name, key in adapter.keys.field_map().items():
        if key not in raw:
            continue

        if field_name in LIST_FIELDS:
            rules = _coerce_list(key, raw[key])
            if rules is not None:
                if field_name == "blacklisted_companies":
                    values[field_name] = [rule for rule in rules if rule.strip()]
                else:
                    values[field_name] = _drop_empty_rules(key, rules, adapter.normalization_mode)
        elif field_name in FLAG_FIELDS:
            flag = _coerce_flag(key, raw[key])
            if flag is not None:
                values[field_name] = flag

    return RuleSet(**values)


async def load_rule_set(store: RuleStore, adapter: "BaseSiteAdapter") -> RuleSet:
    """Load the current RuleSet for a site.

    Store failures never stop filtering: a store that raises, or that
    returns something other than a mapping, is logged and an empty RuleSet
    (nothing hidden) is returned.

    Args:
        store: Rule store to read from
        adapter: Site adapter whose settings are loaded

    Returns:
        RuleSet snapshot
    """
    try:
        raw = await store.load(adapter.keys.all_keys())
    except StoreError as e:
        logger.warning(
            f"Settings unavailable, filtering with empty rules: {e}",
            extra={"event": "settings.load.failed", "site": adapter.name},
        )
        return RuleSet.empty()
    except Exception as e:
        logger.error(
            f"Settings store failed unexpectedly, filtering with empty rules: {e}",
            extra={
                "event": "settings.load.failed",
                "site": adapter.name,
                "error_type": type(e).__name__,
            },
            exc_info=True,
        )
        return RuleSet.empty()

    if not isinstance(raw, Mapping):
        logger.warning(
            f"Settings store returned {type(raw).__name__}, filtering with empty rules",
            extra={"event": "settings.load.empty", "site": adapter.name},
        )
        return RuleSet.empty()

    rules = build_rule_set(raw, adapter)
    logger.debug(
        "Rule set loaded",
        extra={
            "event": "settings.loaded",
            "site": adapter.name,
            "whitelist_count": len(rules.whitelist_keywords),
            "blacklist_count": len(rules.blacklist_keywords),
            "company_count": len(rules.blacklisted_companies),
        },
    )
    return rules
