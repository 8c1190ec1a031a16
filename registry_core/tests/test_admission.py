# registry_core/tests/test_admission.py

from datetime import date, datetime, timezone as dt_timezone

import pytest

from registry_core.workflows.admission import (
    as_local_date,
    days_of_lead_time,
    validate_admission,
)
from registry_core.workflows.exceptions import AdmissionViolation


REFERENCE = date(2025, 1, 10)


@pytest.mark.parametrize(
    "event, allowed",
    [
        (date(2025, 1, 9), False),   # -1 day
        (date(2025, 1, 10), False),  # same day
        (date(2025, 1, 11), True),   # H-1
        (date(2025, 1, 12), True),
    ],
)
def test_h1_boundaries(event, allowed):
    if allowed:
        validate_admission(REFERENCE, event)
        return

    with pytest.raises(AdmissionViolation) as exc:
        validate_admission(REFERENCE, event)

    assert str(exc.value.detail).startswith("H-1 violation")
    assert exc.value.lead_days == (event - REFERENCE).days


def test_time_of_day_is_ignored():
    reference = datetime(2025, 1, 10, 23, 59)
    validate_admission(reference, datetime(2025, 1, 11, 0, 1))

    with pytest.raises(AdmissionViolation):
        validate_admission(datetime(2025, 1, 10, 0, 0), datetime(2025, 1, 10, 23, 59))


def test_aware_datetimes_use_local_calendar(settings):
    settings.TIME_ZONE = "Asia/Jakarta"

    # 20:00 UTC on the 10th is already the 11th in Jakarta (UTC+7).
    reference = datetime(2025, 1, 10, 20, 0, tzinfo=dt_timezone.utc)
    assert as_local_date(reference) == date(2025, 1, 11)

    with pytest.raises(AdmissionViolation):
        validate_admission(reference, date(2025, 1, 11))

    validate_admission(reference, date(2025, 1, 12))


def test_iso_strings_are_accepted():
    assert as_local_date("2025-03-01") == date(2025, 3, 1)
    assert days_of_lead_time("2025-03-01", date(2025, 3, 4)) == 3


def test_unsupported_type_raises_type_error():
    with pytest.raises(TypeError):
        as_local_date(20250301)
