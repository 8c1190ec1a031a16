# registry_core/workflows/exceptions.py
"""
Typed failures of the submission workflow engine.

Every error names the invariant it protects (current status, current holder,
or the missing field) so callers can correct themselves without looking at
internals. They subclass DRF's APIException so the request layer renders them
with the right HTTP status and no per-view translation.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from rest_framework import status
from rest_framework.exceptions import APIException


def display_name(user) -> str:
    if user is None:
        return ""
    if isinstance(user, str):
        return user
    full = ""
    if hasattr(user, "get_full_name"):
        full = (user.get_full_name() or "").strip()
    return full or getattr(user, "username", "") or str(user.pk)


class WorkflowError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Workflow operation rejected."
    default_code = "workflow_error"

    def __init__(self, detail: Optional[str] = None, **context: Any):
        super().__init__(detail=detail)
        self.context: Dict[str, Any] = context

    @property
    def code(self) -> str:
        return self.default_code


class SubmissionNotFound(WorkflowError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Submission not found."
    default_code = "not_found"

    def __init__(self, submission_id: Any):
        super().__init__(
            f"Submission {submission_id} does not exist.",
            submission_id=submission_id,
        )
        self.submission_id = submission_id


class IllegalTransition(WorkflowError):
    default_code = "illegal_transition"

    def __init__(self, current: str, target: str, role: Optional[str] = None):
        msg = f"Illegal transition {current} -> {target}"
        if role:
            msg += f" for role {role}"
        super().__init__(
            f"{msg}. Current status: {current}.",
            current_status=current,
            target_status=target,
            role=role,
        )
        self.current = current
        self.target = target
        self.role = role


class AlreadyClaimed(WorkflowError):
    status_code = status.HTTP_409_CONFLICT
    default_code = "already_claimed"

    def __init__(self, holder):
        name = display_name(holder)
        super().__init__(
            f"Submission is already claimed by another worker: {name}.",
            holder=name,
        )
        self.holder = name


class NotAssignee(WorkflowError):
    status_code = status.HTTP_403_FORBIDDEN
    default_code = "not_assignee"

    def __init__(self, holder=None):
        name = display_name(holder)
        if name:
            msg = f"You do not hold the claim on this submission. Current holder: {name}."
        else:
            msg = "You do not hold the claim on this submission. It is not claimed."
        super().__init__(msg, holder=name or None)
        self.holder = name or None


class AdmissionViolation(WorkflowError):
    default_code = "admission_violation"

    def __init__(self, reference_date, event_date, lead_days: int):
        super().__init__(
            "H-1 violation: the marriage date must be at least one day after "
            f"the submission date ({reference_date.isoformat()}); "
            f"got {event_date.isoformat()} ({lead_days} day(s) of lead time).",
            reference_date=reference_date.isoformat(),
            event_date=event_date.isoformat(),
            lead_days=lead_days,
        )
        self.reference_date = reference_date
        self.event_date = event_date
        self.lead_days = lead_days


class WorkflowValidationError(WorkflowError):
    default_code = "validation_error"

    def __init__(self, field: str, message: Optional[str] = None):
        super().__init__(message or f"'{field}' is required and cannot be empty.", field=field)
        self.field = field


class StorageError(WorkflowError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Storage is temporarily unavailable; the operation was not applied."
    default_code = "storage_error"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail or self.default_detail)


__all__ = [
    "WorkflowError",
    "SubmissionNotFound",
    "IllegalTransition",
    "AlreadyClaimed",
    "NotAssignee",
    "AdmissionViolation",
    "WorkflowValidationError",
    "StorageError",
    "display_name",
]
