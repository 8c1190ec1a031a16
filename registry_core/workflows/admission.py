# registry_core/workflows/admission.py
"""
H-1 admission rule.

A marriage date must fall at least one full calendar day after the date the
submission enters the pipeline. Only calendar dates are compared; time of day
is ignored. Datetimes are converted to the configured local zone first so a
late-evening submission is not counted against the next UTC day.
"""

from __future__ import annotations

from datetime import date, datetime

from django.utils import timezone

from .exceptions import AdmissionViolation

MIN_LEAD_DAYS = 1


def as_local_date(value) -> date:
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            value = timezone.localtime(value)
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return as_local_date(datetime.fromisoformat(value.strip()))
    raise TypeError(f"Expected date or datetime, got {type(value).__name__}")


def days_of_lead_time(reference, event) -> int:
    return (as_local_date(event) - as_local_date(reference)).days


def validate_admission(reference_date, proposed_event_date) -> None:
    """
    Raise AdmissionViolation unless the event date is at least one day after
    the reference date.
    """
    reference = as_local_date(reference_date)
    event = as_local_date(proposed_event_date)
    lead = (event - reference).days

    if lead < MIN_LEAD_DAYS:
        raise AdmissionViolation(reference, event, lead)
