"""AdaptationEngine — turns trigger drafts into recommendations and applies them."""

from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Protocol

from adaptive_engine.exceptions import (
    ApplyFailureError,
    IllegalStateTransitionError,
    InvalidReferenceError,
    RecommendationNotFoundError,
)
from adaptive_engine.models.context import AdaptationContext
from adaptive_engine.models.enums import RecommendationStatus, ResponseAction
from adaptive_engine.models.preview import RecommendationPreview
from adaptive_engine.models.recommendation import (
    ProposedChanges,
    Recommendation,
    RecommendationDraft,
    changes_type_name,
)
from adaptive_engine.models.trace import EvaluationTrace, RuleResult, RuleStatus
from adaptive_engine.recommendations.appliers import apply_recommendation
from adaptive_engine.recommendations.previews import build_preview
from adaptive_engine.registry import TriggerRegistry
from adaptive_engine.repository import PlanRepository, RecommendationRepository
from adaptive_engine.serialization.records import parse_changes

logger = logging.getLogger(__name__)

_STATUS_FOR_ACTION = {
    ResponseAction.ACCEPT: RecommendationStatus.ACCEPTED,
    ResponseAction.MODIFY: RecommendationStatus.MODIFIED,
    ResponseAction.DISMISS: RecommendationStatus.DISMISSED,
}


class EngineRepository(PlanRepository, RecommendationRepository, Protocol):
    """Storage the engine needs: plans and recommendations behind one transaction."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _target_key(item: RecommendationDraft | Recommendation) -> tuple[str | None, str | None, str | None]:
    return (item.target_phase_id, item.target_week_id, item.target_workout_id)


class AdaptationEngine:
    """Evaluates trigger rules against a context and manages the resulting recommendations.

    Usage:
        engine = AdaptationEngine(store)
        created = engine.evaluate(context)
        preview = engine.preview(created[0].id)
        engine.respond(created[0].id, "accept")
    """

    def __init__(
        self,
        repository: EngineRepository,
        registry: TriggerRegistry | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.repository = repository
        self.registry = registry or TriggerRegistry()
        self._clock = clock
        self._plan_locks: dict[str, threading.Lock] = {}
        self._plan_locks_guard = threading.Lock()

        # Auto-discover rules if using default registry
        if registry is None:
            self.registry.discover_rules()

    def _lock_for(self, plan_id: str) -> threading.Lock:
        with self._plan_locks_guard:
            lock = self._plan_locks.get(plan_id)
            if lock is None:
                lock = self._plan_locks[plan_id] = threading.Lock()
            return lock

    # -- evaluation ---------------------------------------------------------

    def evaluate(self, context: AdaptationContext) -> list[Recommendation]:
        """Run every trigger and save one pending recommendation per new draft."""
        return list(self.evaluate_with_trace(context).created)

    def evaluate_with_trace(self, context: AdaptationContext) -> EvaluationTrace:
        """Like evaluate(), but also report how every rule responded.

        When several drafts target the same entity only the most urgent
        (lowest priority value, then highest confidence) is kept. Drafts
        matching a pending recommendation of the same type and target are
        not saved again.
        """
        rule_results: list[RuleResult] = []
        drafts: list[RecommendationDraft] = []

        for rule in self.registry.get_all_rules():
            if not rule.has_required_data(context):
                rule_results.append(
                    RuleResult(
                        rule_id=rule.rule_id,
                        status=RuleStatus.NOT_APPLICABLE,
                        explanation=f"Missing required data: {rule.required_data}",
                    )
                )
                continue

            draft = rule.evaluate(context)
            if draft is None:
                rule_results.append(
                    RuleResult(
                        rule_id=rule.rule_id,
                        status=RuleStatus.SKIPPED,
                        explanation="Rule returned no recommendation.",
                    )
                )
                continue

            drafts.append(draft)
            rule_results.append(
                RuleResult(
                    rule_id=rule.rule_id,
                    status=RuleStatus.FIRED,
                    draft=draft,
                    explanation=draft.reasoning,
                )
            )

        plan_id = context.plan.id
        winners, suppressed = self._resolve_conflicts(drafts)
        pending = {
            (r.recommendation_type, _target_key(r))
            for r in self.repository.list_pending(plan_id)
        }

        created: list[Recommendation] = []
        for draft in winners:
            if (draft.recommendation_type, _target_key(draft)) in pending:
                logger.debug(
                    "Pending %s already exists for %s; skipping draft from %s",
                    draft.recommendation_type,
                    _target_key(draft),
                    draft.rule_id,
                )
                suppressed.append(draft)
                continue
            rec = self._create(plan_id, draft)
            self.repository.save(rec)
            created.append(rec)
            logger.info(
                "Created %s recommendation %s for plan %s (rule %s)",
                rec.recommendation_type,
                rec.id,
                plan_id,
                draft.rule_id,
            )

        return EvaluationTrace(
            rule_results=tuple(rule_results),
            created=tuple(created),
            suppressed=tuple(suppressed),
        )

    @staticmethod
    def _resolve_conflicts(
        drafts: list[RecommendationDraft],
    ) -> tuple[list[RecommendationDraft], list[RecommendationDraft]]:
        best: dict[tuple[str | None, str | None, str | None], RecommendationDraft] = {}
        suppressed: list[RecommendationDraft] = []
        for draft in drafts:
            key = _target_key(draft)
            current = best.get(key)
            if current is None:
                best[key] = draft
            elif (draft.priority, -draft.confidence) < (current.priority, -current.confidence):
                suppressed.append(current)
                best[key] = draft
            else:
                suppressed.append(draft)
        winners = sorted(best.values(), key=lambda d: (d.priority, d.rule_id))
        return winners, suppressed

    def _create(self, plan_id: str, draft: RecommendationDraft) -> Recommendation:
        return Recommendation(
            id=str(uuid.uuid4()),
            plan_id=plan_id,
            recommendation_type=draft.recommendation_type,
            proposed_changes=draft.proposed_changes,
            target_phase_id=draft.target_phase_id,
            target_week_id=draft.target_week_id,
            target_workout_id=draft.target_workout_id,
            priority=draft.priority,
            reasoning=draft.reasoning,
            confidence=draft.confidence,
            trigger_rule_id=draft.rule_id,
            trigger_data=dict(draft.trigger_data),
            created_at=self._clock(),
        )

    # -- preview ------------------------------------------------------------

    def _require(self, recommendation_id: str) -> Recommendation:
        rec = self.repository.get(recommendation_id)
        if rec is None:
            raise RecommendationNotFoundError(recommendation_id)
        return rec

    def preview(
        self, recommendation_id: str, current_tsb: float | None = None
    ) -> RecommendationPreview:
        """What-if view of applying a recommendation. Nothing is written.

        ``current_tsb`` defaults to the TSB recorded when the recommendation
        was triggered, or 0 when the trigger did not record one.
        """
        rec = self._require(recommendation_id)
        plan = self.repository.get_plan(rec.plan_id)
        if plan is None:
            raise InvalidReferenceError(f"Plan {rec.plan_id} not found")
        if current_tsb is None:
            current_tsb = float(rec.trigger_data.get("tsb", 0.0))
        return build_preview(plan, rec, current_tsb)

    # -- respond ------------------------------------------------------------

    def respond(
        self,
        recommendation_id: str,
        action: ResponseAction | str,
        modified_changes: ProposedChanges | Mapping[str, Any] | None = None,
        notes: str | None = None,
    ) -> Recommendation:
        """Accept, modify or dismiss a pending recommendation.

        Accept and modify apply the changes to the plan inside one
        repository transaction; if anything fails every plan write is
        rolled back and the recommendation stays pending.

        Args:
            recommendation_id: The recommendation to respond to.
            action: "accept", "modify" or "dismiss".
            modified_changes: Replacement payload, required for modify. A
                plain mapping is parsed against the recommendation's type.
            notes: Free-text note stored on the recommendation.

        Returns:
            The updated recommendation.

        Raises:
            RecommendationNotFoundError: Unknown id.
            IllegalStateTransitionError: The recommendation is not pending.
            InvalidReferenceError: Missing or malformed modified_changes, or
                a target that does not exist in the plan.
            ApplyFailureError: Persisting the changes failed.
        """
        action = ResponseAction(action)
        plan_id = self._require(recommendation_id).plan_id

        with self._lock_for(plan_id):
            rec = self._require(recommendation_id)
            if not rec.is_pending:
                raise IllegalStateTransitionError(rec.status.value, action.value)

            now = self._clock()
            if action is ResponseAction.DISMISS:
                rec.status = RecommendationStatus.DISMISSED
                rec.responded_at = now
                rec.user_notes = notes
                self.repository.save(rec)
                logger.info("Recommendation %s dismissed", rec.id)
                return rec

            changes = rec.proposed_changes
            if action is ResponseAction.MODIFY:
                changes = self._modified_payload(rec, modified_changes)

            try:
                with self.repository.transaction(plan_id):
                    apply_recommendation(self.repository, rec, changes, now.date())
                    rec.status = _STATUS_FOR_ACTION[action]
                    rec.responded_at = now
                    rec.applied_at = now
                    rec.user_notes = notes
                    if action is ResponseAction.MODIFY:
                        rec.modified_changes = changes
                    self.repository.save(rec)
            except InvalidReferenceError:
                logger.warning("Recommendation %s rejected: invalid reference", recommendation_id)
                raise
            except Exception as exc:
                logger.error("Applying recommendation %s failed: %s", recommendation_id, exc)
                raise ApplyFailureError(recommendation_id, exc) from exc

            logger.info("Recommendation %s %s", rec.id, rec.status.value)
            return rec

    @staticmethod
    def _modified_payload(
        rec: Recommendation,
        modified_changes: ProposedChanges | Mapping[str, Any] | None,
    ) -> ProposedChanges:
        if modified_changes is None:
            raise InvalidReferenceError("modify requires modified_changes")
        if isinstance(modified_changes, Mapping):
            return parse_changes(rec.recommendation_type, modified_changes)
        if changes_type_name(modified_changes) != rec.recommendation_type:
            raise InvalidReferenceError(
                f"modified_changes is a {changes_type_name(modified_changes)} payload, "
                f"expected {rec.recommendation_type}"
            )
        return modified_changes
