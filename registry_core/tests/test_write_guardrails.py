# registry_core/tests/test_write_guardrails.py

import pytest
from django.core.exceptions import PermissionDenied

from registry_core.models import LedgerEntry, Submission
from registry_core.services import workflow_service
from registry_core.workflows import APPROVED, PROCESSING, SUBMITTED


@pytest.mark.django_db
def test_direct_status_save_is_blocked(submission_factory):
    submission = submission_factory(status=SUBMITTED)
    submission.status = APPROVED

    with pytest.raises(PermissionDenied):
        submission.save()

    submission.refresh_from_db()
    assert submission.status == SUBMITTED


@pytest.mark.django_db
def test_direct_assignee_save_is_blocked(submission_factory, operator_x):
    submission = submission_factory(status=SUBMITTED)
    submission.current_assignee = operator_x

    with pytest.raises(PermissionDenied):
        submission.save()


@pytest.mark.django_db
def test_non_workflow_fields_still_save(submission_factory):
    submission = submission_factory(status=SUBMITTED)
    submission.origin_office = "KUA Bogor Barat"
    submission.save()

    submission.refresh_from_db()
    assert submission.origin_office == "KUA Bogor Barat"


@pytest.mark.django_db
def test_explicit_bypass_allows_repair(submission_factory):
    submission = submission_factory(status=SUBMITTED)
    submission.status = APPROVED
    submission.save(_workflow_bypass=True)

    assert Submission.objects.get(pk=submission.pk).status == APPROVED


@pytest.mark.django_db
def test_ledger_is_append_only(submission_factory, operator_x):
    submission = submission_factory(status=SUBMITTED)
    workflow_service.claim_for_processing(submission.pk, operator_x, "OPERATOR")
    entry = LedgerEntry.objects.get(submission=submission)

    entry.notes = "rewritten"
    with pytest.raises(PermissionDenied):
        entry.save()

    with pytest.raises(PermissionDenied):
        entry.delete()

    with pytest.raises(PermissionDenied):
        LedgerEntry.objects.filter(pk=entry.pk).update(notes="rewritten")

    with pytest.raises(PermissionDenied):
        LedgerEntry.objects.all().delete()

    entry.refresh_from_db()
    assert entry.notes == "Claimed for processing"
    assert entry.new_status == PROCESSING


@pytest.mark.django_db
def test_new_drafts_get_ticket_numbers(submission_factory):
    first = submission_factory()
    second = submission_factory()

    assert first.ticket_number == f"REG-{first.pk:06d}"
    assert second.ticket_number == f"REG-{second.pk:06d}"
    assert str(first) == first.ticket_number
