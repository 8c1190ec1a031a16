# registry_core/permissions.py
from __future__ import annotations

from typing import Set

from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import BasePermission

from registry_core.models import UserRole
from registry_core.workflows import (
    ADMIN,
    READONLY,
    is_operator_class,
    normalize_role,
    pick_role,
)

ROLE_HEADER = "X-Workflow-Role"


# ------------------------------------------------------------------
# Role resolution
# ------------------------------------------------------------------
def user_roles(user) -> Set[str]:
    """
    Normalized workflow roles held by the user. Superusers resolve to ADMIN,
    which carries no workflow capability of its own.
    """
    if not user or not user.is_authenticated:
        return set()

    roles = {
        normalize_role(r)
        for r in UserRole.objects.filter(user=user).values_list("role", flat=True)
    }
    if not roles and user.is_superuser:
        roles.add(ADMIN)
    return roles


def resolve_acting_role(request) -> str:
    """
    Canonical role resolver used by the workflow views.

    Priority:
      1) X-Workflow-Role header, if the user actually holds that role
      2) the highest-precedence role the user holds
    """
    roles = user_roles(getattr(request, "user", None))
    if not roles:
        return READONLY

    requested = getattr(request, "headers", {}).get(ROLE_HEADER)
    if requested:
        role = normalize_role(requested)
        if role not in roles:
            raise PermissionDenied(f"You do not hold the role {role}.")
        return role

    return pick_role(roles)


# ------------------------------------------------------------------
# Permission classes
# ------------------------------------------------------------------
class IsOperatorClass(BasePermission):
    """Operators and verifiers (both work the data-entry stage)."""

    message = "This endpoint requires an operator or verifier role."

    def has_permission(self, request, view):
        user = getattr(request, "user", None)
        if not user or not user.is_authenticated:
            return False
        return is_operator_class(resolve_acting_role(request))

