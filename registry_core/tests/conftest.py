# registry_core/tests/conftest.py

from __future__ import annotations

import uuid
from datetime import timedelta
from typing import Any, Callable, Optional

import pytest
from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient

from registry_core.models import Submission, UserRole
from registry_core.workflows import DRAFT, LOCKABLE_STATES, TERMINAL_STATES


def _rand(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def future_date(days: int = 3):
    return timezone.localdate() + timedelta(days=days)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def user_factory(db) -> Callable[..., Any]:
    """
    Factory for users holding zero or more workflow roles.
    """
    User = get_user_model()

    def _factory(
        username: Optional[str] = None,
        *roles: str,
        first_name: str = "",
        last_name: str = "",
        email: str = "",
        **extra: Any,
    ):
        user = User.objects.create_user(
            username=username or _rand("user"),
            password="pass123",
            first_name=first_name,
            last_name=last_name,
            email=email,
            **extra,
        )
        for role in roles:
            UserRole.objects.create(user=user, role=role)
        return user

    return _factory


@pytest.fixture
def kua(user_factory):
    return user_factory("kua", "KUA", first_name="Kantor", last_name="Cibinong", email="kua@example.test")


@pytest.fixture
def operator_x(user_factory):
    return user_factory("operator_x", "OPERATOR_DUKCAPIL", first_name="Xena", last_name="Operator")


@pytest.fixture
def operator_z(user_factory):
    return user_factory("operator_z", "OPERATOR_DUKCAPIL", first_name="Zaki", last_name="Operator")


@pytest.fixture
def verifier_y(user_factory):
    return user_factory("verifier_y", "VERIFIKATOR_DUKCAPIL", first_name="Yusuf", last_name="Verifier")


@pytest.fixture
def verifier_w(user_factory):
    return user_factory("verifier_w", "VERIFIKATOR_DUKCAPIL", first_name="Wulan", last_name="Verifier")


@pytest.fixture
def submission_factory(db, kua) -> Callable[..., Submission]:
    """
    Create a submission directly in any state.

    Non-DRAFT states are written with a queryset update, which bypasses the
    model write guard the same way the workflow service does.
    """

    def _factory(
        *,
        status: str = DRAFT,
        assignee=None,
        created_by=None,
        marriage_date=None,
        claimed_at=None,
        **extra: Any,
    ) -> Submission:
        submission = Submission.objects.create_draft(
            created_by=created_by or kua,
            marriage_date=marriage_date or future_date(),
            origin_office=extra.pop("origin_office", "KUA Cibinong"),
            payload=extra.pop("payload", {"groom": "A", "bride": "B"}),
        )

        if status != DRAFT or assignee is not None:
            values = {"status": status, "current_assignee": assignee}
            if assignee is not None and (status in LOCKABLE_STATES or status in TERMINAL_STATES):
                values["claimed_at"] = claimed_at or timezone.now()
            Submission.objects.filter(pk=submission.pk).update(**values)
            submission.refresh_from_db()

        return submission

    return _factory
