# registry_core/tests/test_claim_monitor.py

from datetime import timedelta
from io import StringIO

import pytest
from django.core.management import call_command
from django.utils import timezone

from registry_core.models import StaleClaimAlert
from registry_core.services import workflow_service
from registry_core.tasks import scan_stale_claims
from registry_core.workflows import PENDING_VERIFICATION, PROCESSING, REJECTED
from registry_core.workflows.claim_monitor import check_stale_claims


@pytest.mark.django_db
def test_stale_claim_raises_one_alert(submission_factory, operator_x):
    claimed_at = timezone.now() - timedelta(hours=30)
    stale = submission_factory(status=PROCESSING, assignee=operator_x, claimed_at=claimed_at)
    submission_factory(status=PROCESSING, assignee=operator_x)  # fresh claim

    assert check_stale_claims() == 1
    assert check_stale_claims() == 0

    alert = StaleClaimAlert.objects.get()
    assert alert.submission_id == stale.pk
    assert alert.holder_id == operator_x.pk
    assert alert.state == PROCESSING
    assert alert.threshold_seconds == 24 * 3600
    assert alert.age_seconds >= 30 * 3600
    assert alert.resolved_at is None

    # The monitor never releases the claim.
    stale.refresh_from_db()
    assert stale.current_assignee_id == operator_x.pk


@pytest.mark.django_db
def test_terminal_holders_are_not_stale(submission_factory, verifier_y):
    submission_factory(
        status=REJECTED,
        assignee=verifier_y,
        claimed_at=timezone.now() - timedelta(days=10),
    )
    assert check_stale_claims() == 0


@pytest.mark.django_db
def test_release_resolves_open_alert(submission_factory, operator_x):
    stale = submission_factory(
        status=PROCESSING,
        assignee=operator_x,
        claimed_at=timezone.now() - timedelta(hours=48),
    )
    check_stale_claims()

    workflow_service.send_to_verification(stale.pk, operator_x, actor_role="OPERATOR")

    alert = StaleClaimAlert.objects.get(submission=stale)
    assert alert.resolved_at is not None


@pytest.mark.django_db
def test_threshold_is_configurable(settings, submission_factory, verifier_y):
    settings.REGISTRY_STALE_CLAIM_HOURS = 2
    submission_factory(
        status=PENDING_VERIFICATION,
        assignee=verifier_y,
        claimed_at=timezone.now() - timedelta(hours=3),
    )
    assert check_stale_claims() == 1


@pytest.mark.django_db
def test_management_command_and_task(submission_factory, operator_x):
    submission_factory(
        status=PROCESSING,
        assignee=operator_x,
        claimed_at=timezone.now() - timedelta(hours=5),
    )

    assert scan_stale_claims.apply().get() == 0

    out = StringIO()
    call_command("check_stale_claims", "--hours", "4", stdout=out)
    assert "1 new stale-claim alert(s)" in out.getvalue()

    assert scan_stale_claims.apply(kwargs={"threshold_hours": 4}).get() == 0
