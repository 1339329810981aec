"""Domain models for jobfilter."""

from .models import CardRecord, CardState, FilterDecision, HideReason, RuleSet

__all__ = ["RuleSet", "CardRecord", "CardState", "HideReason", "FilterDecision"]
