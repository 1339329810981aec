"""Filter engine: per-card decisions and full passes over the page."""

from .evaluator import STATE_ORDER, evaluate_card
from .models import PassResult
from .runner import FilterPipeline

__all__ = ["FilterPipeline", "PassResult", "evaluate_card", "STATE_ORDER"]
