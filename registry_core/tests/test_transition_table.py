# registry_core/tests/test_transition_table.py

import pytest

from registry_core.workflows import (
    ADMIN,
    APPROVED,
    DRAFT,
    NEEDS_REVISION,
    OPERATOR,
    ORIGIN,
    PENDING_VERIFICATION,
    PROCESSING,
    READONLY,
    REJECTED,
    SUBMISSION_STATES,
    SUBMITTED,
    TRANSITION_TABLE,
    VERIFIER,
    allowed_transitions,
    claim_target,
    get_rule,
    normalize_role,
    pick_role,
    required_roles,
    validate_transition,
    workflow_definition,
)
from registry_core.workflows.exceptions import IllegalTransition


@pytest.mark.parametrize(
    "current, target, role",
    [
        (DRAFT, SUBMITTED, ORIGIN),
        (NEEDS_REVISION, SUBMITTED, ORIGIN),
        (SUBMITTED, PROCESSING, OPERATOR),
        (SUBMITTED, PROCESSING, VERIFIER),
        (PROCESSING, NEEDS_REVISION, OPERATOR),
        (PROCESSING, PENDING_VERIFICATION, VERIFIER),
        (PENDING_VERIFICATION, PENDING_VERIFICATION, VERIFIER),
        (PENDING_VERIFICATION, APPROVED, VERIFIER),
        (PROCESSING, REJECTED, VERIFIER),
    ],
)
def test_legal_triples(current, target, role):
    validate_transition(current, target, role)


@pytest.mark.parametrize(
    "current, target, role",
    [
        (DRAFT, PROCESSING, OPERATOR),
        (SUBMITTED, APPROVED, VERIFIER),
        (PENDING_VERIFICATION, APPROVED, OPERATOR),
        (PENDING_VERIFICATION, PENDING_VERIFICATION, OPERATOR),
        (SUBMITTED, PROCESSING, ORIGIN),
        (DRAFT, SUBMITTED, OPERATOR),
        (APPROVED, PROCESSING, VERIFIER),
        (REJECTED, SUBMITTED, ORIGIN),
        (SUBMITTED, PROCESSING, ADMIN),
    ],
)
def test_illegal_triples(current, target, role):
    with pytest.raises(IllegalTransition) as exc:
        validate_transition(current, target, role)

    assert exc.value.current == current
    assert exc.value.target == target
    assert f"Current status: {current}" in str(exc.value.detail)


def test_rule_carries_claim_effects():
    assert get_rule(PROCESSING, PENDING_VERIFICATION, OPERATOR).claim == "release"
    assert get_rule(PENDING_VERIFICATION, REJECTED, VERIFIER).claim == "retain"
    assert get_rule(PENDING_VERIFICATION, REJECTED, VERIFIER).notes_required is True
    assert get_rule(PROCESSING, NEEDS_REVISION, OPERATOR).notes_required is True
    assert get_rule(DRAFT, SUBMITTED, ORIGIN).admission is True


def test_claim_targets_by_role():
    assert claim_target(SUBMITTED, OPERATOR) == PROCESSING
    assert claim_target(SUBMITTED, VERIFIER) == PROCESSING
    assert claim_target(PENDING_VERIFICATION, VERIFIER) == PENDING_VERIFICATION
    assert claim_target(PENDING_VERIFICATION, OPERATOR) is None
    assert claim_target(SUBMITTED, ORIGIN) is None
    assert claim_target(APPROVED, VERIFIER) is None


def test_allowed_transitions_are_role_aware():
    assert allowed_transitions(PROCESSING, OPERATOR) == [NEEDS_REVISION, PENDING_VERIFICATION]
    assert allowed_transitions(PROCESSING, VERIFIER) == [
        APPROVED,
        NEEDS_REVISION,
        PENDING_VERIFICATION,
        REJECTED,
    ]
    assert allowed_transitions(APPROVED, VERIFIER) == []
    assert allowed_transitions(SUBMITTED, READONLY) == []


def test_full_map_covers_every_state():
    full = allowed_transitions()
    assert set(full) == set(SUBMISSION_STATES)
    assert full[APPROVED] == []
    assert full[REJECTED] == []
    assert full[DRAFT] == [SUBMITTED]


def test_required_roles():
    assert required_roles(SUBMITTED, PROCESSING) == [OPERATOR, VERIFIER]
    assert required_roles(PENDING_VERIFICATION, APPROVED) == [VERIFIER]
    with pytest.raises(IllegalTransition):
        required_roles(DRAFT, APPROVED)


def test_role_aliases_and_precedence():
    assert normalize_role("operator_dukcapil") == OPERATOR
    assert normalize_role("VERIFIKATOR_DUKCAPIL") == VERIFIER
    assert normalize_role("KUA") == ORIGIN
    assert normalize_role("KEMENAG") == READONLY
    assert normalize_role("") == READONLY

    assert pick_role(["KUA", "OPERATOR_DUKCAPIL"]) == OPERATOR
    assert pick_role(["OPERATOR", "VERIFIER"]) == VERIFIER
    assert pick_role([]) == READONLY


def test_definition_is_serializable_table():
    definition = workflow_definition()
    assert len(definition["transitions"]) == len(TRANSITION_TABLE)
    assert definition["terminal"] == [APPROVED, REJECTED]
    row = next(t for t in definition["transitions"] if t["to"] == NEEDS_REVISION)
    assert row["notes_required"] is True
    assert row["roles"] == [OPERATOR, VERIFIER]
