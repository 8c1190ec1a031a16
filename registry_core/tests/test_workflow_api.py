# registry_core/tests/test_workflow_api.py

from datetime import timedelta

import pytest
from django.utils import timezone

from registry_core.models import LedgerEntry
from registry_core.workflows import (
    APPROVED,
    DRAFT,
    NEEDS_REVISION,
    PENDING_VERIFICATION,
    PROCESSING,
    REJECTED,
    SUBMITTED,
)


def _url(submission, action=""):
    base = f"/registry/submissions/{submission if isinstance(submission, int) else submission.pk}/"
    return f"{base}{action}/" if action else base


@pytest.mark.django_db
def test_requires_authentication(api_client, submission_factory):
    submission = submission_factory(status=SUBMITTED)
    resp = api_client.post(_url(submission, "claim"))
    assert resp.status_code in (401, 403)


@pytest.mark.django_db
def test_health_is_public(api_client):
    resp = api_client.get("/registry/health/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


@pytest.mark.django_db
def test_claim_then_conflict(api_client, submission_factory, operator_x, operator_z):
    submission = submission_factory(status=SUBMITTED)

    api_client.force_authenticate(user=operator_x)
    resp = api_client.post(_url(submission, "claim"), format="json")
    assert resp.status_code == 200
    assert resp.json()["status"] == PROCESSING
    assert resp.json()["current_assignee"]["username"] == "operator_x"

    api_client.force_authenticate(user=operator_z)
    resp = api_client.post(_url(submission, "claim"), format="json")
    assert resp.status_code == 409
    body = resp.json()
    assert body["code"] == "already_claimed"
    assert body["holder"] == "Xena Operator"


@pytest.mark.django_db
def test_unknown_submission_is_404(api_client, operator_x):
    api_client.force_authenticate(user=operator_x)
    resp = api_client.post(_url(424242, "claim"), format="json")
    assert resp.status_code == 404
    assert resp.json()["code"] == "not_found"


@pytest.mark.django_db
def test_return_without_reason_is_400(api_client, submission_factory, operator_x):
    submission = submission_factory(status=PROCESSING, assignee=operator_x)
    api_client.force_authenticate(user=operator_x)

    resp = api_client.post(_url(submission, "return"), {"reason": "   "}, format="json")
    assert resp.status_code == 400
    assert resp.json()["code"] == "validation_error"
    assert resp.json()["field"] == "reason"

    resp = api_client.post(_url(submission, "return"), {"reason": "NIK tidak valid"}, format="json")
    assert resp.status_code == 200
    assert resp.json()["status"] == NEEDS_REVISION
    assert resp.json()["current_assignee"] is None


@pytest.mark.django_db
def test_non_holder_is_403(api_client, submission_factory, operator_x, operator_z):
    submission = submission_factory(status=PROCESSING, assignee=operator_x)
    api_client.force_authenticate(user=operator_z)

    resp = api_client.post(_url(submission, "send-verification"), {}, format="json")
    assert resp.status_code == 403
    assert resp.json()["code"] == "not_assignee"
    assert resp.json()["holder"] == "Xena Operator"


@pytest.mark.django_db
def test_illegal_transition_is_400_with_current_status(api_client, submission_factory, operator_x):
    submission = submission_factory(status=PROCESSING, assignee=operator_x)
    api_client.force_authenticate(user=operator_x)

    resp = api_client.post(_url(submission, "approve"), {}, format="json")
    assert resp.status_code == 400
    body = resp.json()
    assert body["code"] == "illegal_transition"
    assert body["current_status"] == PROCESSING
    assert body["target_status"] == APPROVED


@pytest.mark.django_db
def test_submit_enforces_h1(api_client, submission_factory, kua):
    submission = submission_factory()
    api_client.force_authenticate(user=kua)

    today = timezone.localdate()
    resp = api_client.post(_url(submission, "submit"), {"marriage_date": today.isoformat()}, format="json")
    assert resp.status_code == 400
    assert resp.json()["code"] == "admission_violation"
    assert resp.json()["detail"].startswith("H-1 violation")

    resp = api_client.post(
        _url(submission, "submit"),
        {"marriage_date": (today + timedelta(days=1)).isoformat()},
        format="json",
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == SUBMITTED


@pytest.mark.django_db
def test_verifier_flow_and_reject_accepts_reason(api_client, submission_factory, verifier_y):
    submission = submission_factory(status=PENDING_VERIFICATION)
    api_client.force_authenticate(user=verifier_y)

    resp = api_client.post(_url(submission, "claim"), format="json")
    assert resp.status_code == 200
    assert resp.json()["status"] == PENDING_VERIFICATION

    resp = api_client.post(_url(submission, "reject"), {}, format="json")
    assert resp.status_code == 400
    assert resp.json()["field"] == "notes"

    resp = api_client.post(_url(submission, "reject"), {"reason": "saksi tidak lengkap"}, format="json")
    assert resp.status_code == 200
    assert resp.json()["status"] == REJECTED

    entry = LedgerEntry.objects.filter(submission=submission).last()
    assert entry.notes == "saksi tidak lengkap"


@pytest.mark.django_db
def test_allowed_depends_on_role(api_client, submission_factory, operator_x, verifier_y):
    submission = submission_factory(status=PENDING_VERIFICATION)

    api_client.force_authenticate(user=operator_x)
    resp = api_client.get(_url(submission, "allowed"))
    assert resp.status_code == 200
    assert resp.json()["allowed"] == []
    assert resp.json()["role"] == "OPERATOR"

    api_client.force_authenticate(user=verifier_y)
    resp = api_client.get(_url(submission, "allowed"))
    assert set(resp.json()["allowed"]) == {APPROVED, PENDING_VERIFICATION, REJECTED}


@pytest.mark.django_db
def test_role_header_selects_among_held_roles(api_client, user_factory, submission_factory):
    both = user_factory("dual", "KUA", "OPERATOR_DUKCAPIL")
    submission = submission_factory(created_by=both)
    api_client.force_authenticate(user=both)

    # Default precedence picks OPERATOR, which cannot submit.
    resp = api_client.post(_url(submission, "submit"), {}, format="json")
    assert resp.status_code == 400
    assert resp.json()["current_status"] == DRAFT

    resp = api_client.post(_url(submission, "submit"), {}, format="json", HTTP_X_WORKFLOW_ROLE="KUA")
    assert resp.status_code == 200
    assert resp.json()["status"] == SUBMITTED

    resp = api_client.get(_url(submission, "allowed"), HTTP_X_WORKFLOW_ROLE="VERIFIER")
    assert resp.status_code == 403


@pytest.mark.django_db
def test_history_and_metrics(api_client, submission_factory, operator_x):
    submission = submission_factory(status=SUBMITTED)
    api_client.force_authenticate(user=operator_x)
    api_client.post(_url(submission, "claim"), format="json")
    api_client.post(_url(submission, "send-verification"), {"notes": "lengkap"}, format="json")

    resp = api_client.get(_url(submission, "history"))
    assert resp.status_code == 200
    assert [e["action"] for e in resp.json()] == ["CLAIM", "SEND_TO_VERIFICATION"]
    assert resp.json()[1]["notes"] == "lengkap"

    resp = api_client.get(_url(submission, "metrics"))
    assert resp.status_code == 200
    assert set(resp.json()["time_in_states"]) == {PROCESSING, PENDING_VERIFICATION}


@pytest.mark.django_db
def test_workflow_definition(api_client, operator_x):
    api_client.force_authenticate(user=operator_x)
    resp = api_client.get("/registry/workflow/")
    assert resp.status_code == 200
    assert DRAFT in resp.json()["states"]
