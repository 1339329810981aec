"""Rule store exceptions.

All store exceptions inherit from StoreError so callers can catch every
storage problem with a single except clause.
"""


class StoreError(Exception):
    """Base exception for all rule store errors."""

    pass


class StoreUnavailableError(StoreError):
    """Raised when settings cannot be read or written.

    Examples:
    - Settings file missing or not valid YAML
    - Settings database not reachable
    - Stored value is not valid JSON
    """

    pass
