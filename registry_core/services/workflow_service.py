# registry_core/services/workflow_service.py
"""
Authoritative workflow execution service.

All status and claim changes MUST go through this module.
Never update status or current_assignee directly in views or serializers.

Each operation is one atomic unit:
  load -> admission (if applicable) -> transition table -> claim -> persist -> ledger

Successful operations append exactly one ledger entry; failed ones append
none and leave the submission untouched.
"""

from __future__ import annotations

import logging
from functools import wraps

from django.db import DatabaseError, transaction
from django.utils import timezone

from registry_core.models import Submission
from registry_core.workflows import (
    APPROVED,
    NEEDS_REVISION,
    PENDING_VERIFICATION,
    REJECTED,
    SUBMITTED,
    get_rule,
    normalize_role,
    normalize_state,
)
from registry_core.workflows.admission import as_local_date, validate_admission
from registry_core.workflows.claims import claims
from registry_core.workflows.exceptions import (
    IllegalTransition,
    StorageError,
    WorkflowValidationError,
)
from registry_core.workflows.ledger import append_entry

logger = logging.getLogger(__name__)

DEFAULT_VERIFICATION_NOTES = "Sent to verifier for approval"
DEFAULT_APPROVAL_NOTES = "Approved by verifier"
RETURN_NOTES_PREFIX = "Returned to originating office for revision. Reason: "

DECISIONS = (APPROVED, REJECTED)


# ===============================================================
# Helpers
# ===============================================================

def _surface_storage_errors(func):
    """
    Database failures are reported as StorageError and never retried here.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DatabaseError as exc:
            logger.exception("Storage failure during %s", func.__name__)
            raise StorageError() from exc

    return wrapper


def _require_text(value, field: str) -> str:
    text = (value or "").strip() if isinstance(value, str) else ""
    if not text:
        raise WorkflowValidationError(field)
    return text


def _optional_text(value) -> str:
    return value.strip() if isinstance(value, str) else ""


# ===============================================================
# Operations
# ===============================================================

@_surface_storage_errors
def submit(submission_id, actor, event_date=None, *, actor_role: str, now=None) -> Submission:
    """
    Move a DRAFT or NEEDS_REVISION submission into the pipeline.

    Runs the H-1 admission check against the later of the submission's
    creation and the moment of submitting. An H-1 violation fails closed:
    neither status nor marriage date is changed.
    """
    role = normalize_role(actor_role)
    now = now or timezone.now()

    with transaction.atomic():
        submission = claims.load(submission_id)
        current = normalize_state(submission.status)

        rule = get_rule(current, SUBMITTED, role)

        try:
            proposed = as_local_date(event_date) if event_date is not None else submission.marriage_date
        except (TypeError, ValueError):
            raise WorkflowValidationError("marriage_date", f"'marriage_date' is not a valid date: {event_date!r}.")
        if proposed is None:
            raise WorkflowValidationError("marriage_date")

        # Lead time counts from the day the case enters the pipeline, not from
        # when the draft was opened. A stale draft or a resubmission after
        # revision must still leave a full working day before the event.
        reference = max(submission.created_at, now)
        validate_admission(reference, proposed)

        updated = Submission.objects.filter(
            pk=submission.pk,
            status=current,
            current_assignee__isnull=True,
        ).update(status=SUBMITTED, marriage_date=proposed, updated_at=now)
        if not updated:
            fresh = Submission.objects.get(pk=submission.pk)
            raise IllegalTransition(fresh.status, SUBMITTED, role=role)

        append_entry(
            submission=submission,
            actor=actor,
            actor_role=role,
            action=rule.action,
            previous_status=current,
            new_status=SUBMITTED,
            notes=f"Marriage date {proposed.isoformat()}",
            now=now,
        )

    logger.info("User %s %s submission %s", actor.pk, rule.action.lower(), submission_id)
    return Submission.objects.get(pk=submission.pk)


@_surface_storage_errors
def claim_for_processing(submission_id, actor, actor_role: str, *, now=None) -> Submission:
    submission = claims.claim(submission_id, actor, actor_role, now=now)
    logger.info(
        "User %s (%s) claimed submission %s, status %s",
        actor.pk,
        normalize_role(actor_role),
        submission_id,
        submission.status,
    )
    return submission


@_surface_storage_errors
def return_to_origin(submission_id, actor, reason, *, actor_role: str, now=None) -> Submission:
    reason = _require_text(reason, "reason")

    submission = claims.release(
        submission_id,
        actor,
        actor_role,
        NEEDS_REVISION,
        notes=f"{RETURN_NOTES_PREFIX}{reason}",
        now=now,
    )
    logger.info("User %s returned submission %s to origin", actor.pk, submission_id)
    return submission


@_surface_storage_errors
def send_to_verification(submission_id, actor, notes=None, *, actor_role: str, now=None) -> Submission:
    submission = claims.release(
        submission_id,
        actor,
        actor_role,
        PENDING_VERIFICATION,
        notes=_optional_text(notes) or DEFAULT_VERIFICATION_NOTES,
        now=now,
    )
    logger.info("User %s sent submission %s to verification", actor.pk, submission_id)
    return submission


@_surface_storage_errors
def decide(submission_id, actor, decision, notes=None, *, actor_role: str, now=None) -> Submission:
    decision = normalize_state(decision)
    if decision not in DECISIONS:
        raise WorkflowValidationError(
            "decision",
            f"'decision' must be one of {', '.join(DECISIONS)}; got '{decision}'.",
        )

    if decision == REJECTED:
        text = _require_text(notes, "notes")
    else:
        text = _optional_text(notes) or DEFAULT_APPROVAL_NOTES

    submission = claims.release(
        submission_id,
        actor,
        actor_role,
        decision,
        notes=text,
        now=now,
    )
    logger.info("User %s decided submission %s: %s", actor.pk, submission_id, decision)
    return submission


def approve(submission_id, actor, notes=None, *, actor_role: str, now=None) -> Submission:
    return decide(submission_id, actor, APPROVED, notes, actor_role=actor_role, now=now)


def reject(submission_id, actor, notes, *, actor_role: str, now=None) -> Submission:
    return decide(submission_id, actor, REJECTED, notes, actor_role=actor_role, now=now)
