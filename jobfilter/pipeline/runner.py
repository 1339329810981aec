"""Filter pass orchestration."""

from collections import Counter
from uuid import uuid4

from jobfilter.adapters.base import BaseSiteAdapter
from jobfilter.domain.models import RuleSet
from jobfilter.logging import get_logger
from jobfilter.logging.context import log_context
from jobfilter.matching import RuleMatcher
from jobfilter.page import Page, set_visible, show
from jobfilter.utils.timestamps import utc_now

from .evaluator import evaluate_card
from .models import PassResult

logger = get_logger(__name__, component="pipeline")


class FilterPipeline:
    """
    Runs filter passes for one site adapter over one page.

    A pass re-reads every card currently on the page and writes each card's
    visibility from scratch, so running it again with the same rules changes
    nothing and running it with new rules fully replaces earlier decisions.
    """

    def __init__(self, adapter: BaseSiteAdapter, page: Page):
        """
        Initialize the pipeline.

        Args:
            adapter: Site adapter used to find and read cards
            page: Page whose cards are filtered
        """
        self.adapter = adapter
        self.page = page

    def run_filter_pass(self, rules: RuleSet) -> PassResult:
        """
        Evaluate every card on the page and apply its visibility.

        Elements the adapter does not read as a card are left untouched. A
        card that fails to read or evaluate is logged and shown; the pass
        carries on with the next card.

        Args:
            rules: RuleSet snapshot to apply

        Returns:
            PassResult with counts per outcome and per hide reason
        """
        started_at = utc_now()
        pass_id = uuid4().hex[:12]
        matcher = RuleMatcher(rules, self.adapter.normalization_mode)
        reasons: Counter = Counter()
        hidden = shown = skipped = errors = 0

        with log_context(pass_id=pass_id):
            elements = self.adapter.find_cards(self.page.body)

            for element in elements:
                target = element
                try:
                    card = self.adapter.read_card(element)
                    if card is None:
                        skipped += 1
                        continue

                    target = card.element if card.element is not None else element
                    decision = evaluate_card(
                        card,
                        rules,
                        self.adapter.normalization_mode,
                        self.adapter.capabilities,
                        matcher=matcher,
                    )
                    set_visible(target, not decision.hide)

                    if decision.hide:
                        hidden += 1
                        reasons[decision.reason.value] += 1
                        logger.debug(
                            f"Card hidden: {card.title}",
                            extra={
                                "event": "card.hidden",
                                "reason": decision.reason.value,
                                "matched_rule": decision.matched_rule,
                            },
                        )
                    else:
                        shown += 1

                except Exception as e:
                    errors += 1
                    logger.error(
                        f"Failed to filter card: {e}",
                        extra={"event": "card.failed", "error_type": type(e).__name__},
                        exc_info=True,
                    )
                    self._show_after_failure(target)

            result = PassResult(
                pass_id=pass_id,
                started_at=started_at,
                finished_at=utc_now(),
                total=len(elements),
                hidden=hidden,
                shown=shown,
                skipped=skipped,
                errors=errors,
                hidden_by_reason=dict(reasons),
            )

            logger.info(
                "Filter pass completed",
                extra={
                    "event": "filter.pass.completed",
                    "duration_ms": int(result.duration_seconds * 1000),
                    "total": result.total,
                    "hidden": result.hidden,
                    "shown": result.shown,
                    "skipped": result.skipped,
                    "errors": result.errors,
                },
            )

        return result

    @staticmethod
    def _show_after_failure(target) -> None:
        try:
            show(target)
        except Exception as e:
            logger.error(
                f"Could not restore card visibility: {e}",
                extra={"event": "card.restore.failed", "error_type": type(e).__name__},
                exc_info=True,
            )
