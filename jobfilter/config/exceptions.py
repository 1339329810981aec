"""Errors raised while loading jobfilter configuration."""

from typing import Iterable, List, Optional

from pydantic import ValidationError


class ConfigurationError(Exception):
    """
    Missing or invalid configuration.

    Holds the individual problems and hints for fixing them. Both are part of
    ``str(error)``, so the CLI prints the exception unchanged.
    """

    def __init__(
        self,
        message: str,
        errors: Optional[Iterable[str]] = None,
        suggestions: Optional[Iterable[str]] = None,
    ):
        self.message = message
        self.errors: List[str] = list(errors or [])
        self.suggestions: List[str] = list(suggestions or [])
        super().__init__(self.render())

    def render(self) -> str:
        lines = [self.message]
        if self.errors:
            lines += ["", "Problems:"]
            lines += [f"  {number}. {error}" for number, error in enumerate(self.errors, 1)]
        if self.suggestions:
            lines += ["", "Try:"]
            lines += [f"  - {hint}" for hint in self.suggestions]
        return "\n".join(lines)

    @classmethod
    def from_validation_error(cls, exc: ValidationError, source: str) -> "ConfigurationError":
        """One problem line per field pydantic rejected, e.g. ``watcher -> debounce: ...``."""
        return cls(
            f"Invalid configuration in {source}",
            errors=[_describe(error) for error in exc.errors()],
            suggestions=["Compare your file with config.example.yaml"],
        )


def _describe(error: dict) -> str:
    location = " -> ".join(str(part) for part in error["loc"]) or "config"
    kind = error["type"]

    if kind == "missing":
        return f"{location}: field required"
    if kind == "enum":
        expected = error.get("ctx", {}).get("expected", "")
        return f"{location}: got {error.get('input')!r}, expected {expected}"
    if kind.endswith("_type") or kind.endswith("_parsing"):
        return f"{location}: {error['msg'].lower()} (got {error.get('input')!r})"

    message = error["msg"]
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return f"{location}: {message}"
