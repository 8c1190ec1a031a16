# registry_core/workflows/claims.py
"""
Exclusive per-submission claims.

The claim is the nullable `current_assignee` column on the submission row.
Every acquisition and release is one read-modify-write:

  1) read the row (SELECT ... FOR UPDATE where the backend supports it)
  2) decide legality against the transition table
  3) write with a compare-and-swap UPDATE guarded on the status and holder
     that were read, so a concurrent winner turns the write into a no-op
  4) append the ledger entry in the same transaction
"""

from __future__ import annotations

from django.db import transaction
from django.utils import timezone

from registry_core.models import Submission
from registry_core.workflows import (
    CAP_OPERATOR_CLASS,
    CLAIM_ACQUIRE,
    CLAIM_RELEASE,
    CLAIM_RETAIN,
    LOCKABLE_STATES,
    PENDING_VERIFICATION,
    PROCESSING,
    TRANSITION_TABLE,
    ACTION_CLAIM,
    ACTION_RECLAIM,
    claim_target,
    get_rule,
    is_terminal,
    normalize_role,
    normalize_state,
    role_has_capability,
)
from registry_core.workflows.claim_monitor import resolve_open_alerts
from registry_core.workflows.exceptions import (
    AlreadyClaimed,
    IllegalTransition,
    NotAssignee,
    SubmissionNotFound,
    WorkflowValidationError,
)
from registry_core.workflows.ledger import append_entry


CLAIM_NOTES = {
    PROCESSING: "Claimed for processing",
    PENDING_VERIFICATION: "Claimed for verification",
}
RECLAIM_NOTES = "Claim re-entered by current holder"


def _nominal_claim_target(current: str) -> str:
    for rule in TRANSITION_TABLE:
        if rule.current == current and rule.claim == CLAIM_ACQUIRE:
            return rule.target
    return PROCESSING


class ClaimManager:
    """
    Owns the "who currently holds this submission" relation.
    """

    def load(self, submission_id, *, lock: bool = True) -> Submission:
        qs = Submission.objects.all()
        if lock:
            qs = qs.select_for_update()
        try:
            return qs.get(pk=submission_id)
        except (Submission.DoesNotExist, ValueError, TypeError):
            raise SubmissionNotFound(submission_id)

    def _reload(self, submission_id) -> Submission:
        return Submission.objects.select_related("current_assignee").get(pk=submission_id)

    # -----------------------------------------------------------
    # Acquire
    # -----------------------------------------------------------
    def claim(self, submission_id, actor, actor_role: str, *, now=None) -> Submission:
        role = normalize_role(actor_role)
        now = now or timezone.now()

        with transaction.atomic():
            submission = self.load(submission_id)
            current = normalize_state(submission.status)

            if is_terminal(current):
                raise IllegalTransition(current, _nominal_claim_target(current), role=role)

            holder_id = submission.current_assignee_id
            if holder_id is not None and holder_id != actor.pk:
                raise AlreadyClaimed(submission.current_assignee)

            if holder_id == actor.pk and current in LOCKABLE_STATES:
                if not role_has_capability(role, CAP_OPERATOR_CLASS):
                    raise IllegalTransition(current, current, role=role)
                return self._reclaim(submission, actor, role, now)

            target = claim_target(current, role)
            if target is None:
                raise IllegalTransition(current, _nominal_claim_target(current), role=role)

            updated = Submission.objects.filter(
                pk=submission.pk,
                status=current,
                current_assignee__isnull=True,
            ).update(
                status=target,
                current_assignee=actor,
                claimed_at=now,
                updated_at=now,
            )

            if not updated:
                # Lost the race: report what the winner left behind.
                fresh = self._reload(submission.pk)
                if fresh.current_assignee_id == actor.pk and fresh.status in LOCKABLE_STATES:
                    return self._reclaim(fresh, actor, role, now)
                if fresh.current_assignee_id is not None:
                    raise AlreadyClaimed(fresh.current_assignee)
                raise IllegalTransition(fresh.status, target, role=role)

            append_entry(
                submission=submission,
                actor=actor,
                actor_role=role,
                action=ACTION_CLAIM,
                previous_status=current,
                new_status=target,
                notes=CLAIM_NOTES.get(target, "Claimed"),
                now=now,
            )

        return self._reload(submission.pk)

    def _reclaim(self, submission, actor, role: str, now) -> Submission:
        Submission.objects.filter(pk=submission.pk).update(updated_at=now)
        append_entry(
            submission=submission,
            actor=actor,
            actor_role=role,
            action=ACTION_RECLAIM,
            previous_status=submission.status,
            new_status=submission.status,
            notes=RECLAIM_NOTES,
            now=now,
        )
        return self._reload(submission.pk)

    # -----------------------------------------------------------
    # Release / decide
    # -----------------------------------------------------------
    def release(
        self,
        submission_id,
        actor,
        actor_role: str,
        new_status: str,
        notes: str = "",
        *,
        now=None,
    ) -> Submission:
        """
        Move a held submission to `new_status`.

        Hand-offs (NEEDS_REVISION, PENDING_VERIFICATION) clear the holder so the
        next stage can claim independently. Terminal decisions keep the holder
        as the record of who decided; nothing can contend for a terminal row.
        """
        role = normalize_role(actor_role)
        target = normalize_state(new_status)
        notes = (notes or "").strip()
        now = now or timezone.now()

        with transaction.atomic():
            submission = self.load(submission_id)
            current = normalize_state(submission.status)

            if submission.current_assignee_id != actor.pk:
                raise NotAssignee(submission.current_assignee)

            rule = get_rule(current, target, role)
            if rule.claim not in (CLAIM_RELEASE, CLAIM_RETAIN):
                raise IllegalTransition(current, target, role=role)
            if rule.notes_required and not notes:
                raise WorkflowValidationError("notes")

            values = {"status": target, "updated_at": now}
            if rule.claim == CLAIM_RELEASE:
                values.update(current_assignee=None, claimed_at=None)

            updated = Submission.objects.filter(
                pk=submission.pk,
                status=current,
                current_assignee=actor,
            ).update(**values)

            if not updated:
                fresh = self._reload(submission.pk)
                if fresh.current_assignee_id != actor.pk:
                    raise NotAssignee(fresh.current_assignee)
                raise IllegalTransition(fresh.status, target, role=role)

            append_entry(
                submission=submission,
                actor=actor,
                actor_role=role,
                action=rule.action,
                previous_status=current,
                new_status=target,
                notes=notes,
                now=now,
            )

            resolve_open_alerts(submission_id=submission.pk, now=now)

        return self._reload(submission.pk)


claims = ClaimManager()
