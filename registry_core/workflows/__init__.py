# registry_core/workflows/__init__.py
from __future__ import annotations

from typing import Any, Dict, List, NamedTuple, Optional, Set, Tuple

from .exceptions import IllegalTransition


# ===============================================================
# States
# ===============================================================

DRAFT = "DRAFT"
SUBMITTED = "SUBMITTED"
PROCESSING = "PROCESSING"
NEEDS_REVISION = "NEEDS_REVISION"
PENDING_VERIFICATION = "PENDING_VERIFICATION"
APPROVED = "APPROVED"
REJECTED = "REJECTED"

SUBMISSION_STATES: Tuple[str, ...] = (
    DRAFT,
    SUBMITTED,
    PROCESSING,
    NEEDS_REVISION,
    PENDING_VERIFICATION,
    APPROVED,
    REJECTED,
)

TERMINAL_STATES: Set[str] = {APPROVED, REJECTED}

# States in which a non-null assignee is meaningful. Terminal states keep the
# deciding verifier for audit.
LOCKABLE_STATES: Set[str] = {PROCESSING, PENDING_VERIFICATION}
ASSIGNEE_ALLOWED_STATES: Set[str] = LOCKABLE_STATES | TERMINAL_STATES


# ===============================================================
# Roles and capabilities
# ===============================================================

ORIGIN = "ORIGIN"
OPERATOR = "OPERATOR"
VERIFIER = "VERIFIER"
ADMIN = "ADMIN"
READONLY = "READONLY"

ROLE_ALIASES: Dict[str, str] = {
    "ORIGIN": ORIGIN,
    "KUA": ORIGIN,
    "ORIGIN_OFFICE": ORIGIN,
    "OPERATOR": OPERATOR,
    "OPERATOR_DUKCAPIL": OPERATOR,
    "DATA_ENTRY": OPERATOR,
    "VERIFIER": VERIFIER,
    "VERIFIKATOR": VERIFIER,
    "VERIFIKATOR_DUKCAPIL": VERIFIER,
    "ADMIN": ADMIN,
    "SYSTEM_ADMIN": ADMIN,
    "SUPERUSER": ADMIN,
    "KEMENAG": READONLY,
    "READONLY": READONLY,
    "VIEWER": READONLY,
}

CAP_ORIGIN = "ORIGIN"
CAP_OPERATOR_CLASS = "OPERATOR_CLASS"
CAP_VERIFIER_CLASS = "VERIFIER_CLASS"

# Operator-class covers verifiers too: both share the data-entry stage.
CAPABILITY_ROLES: Dict[str, Set[str]] = {
    CAP_ORIGIN: {ORIGIN},
    CAP_OPERATOR_CLASS: {OPERATOR, VERIFIER},
    CAP_VERIFIER_CLASS: {VERIFIER},
}

# Preference order when a user holds more than one role.
ROLE_PRECEDENCE: Tuple[str, ...] = (VERIFIER, OPERATOR, ORIGIN, ADMIN, READONLY)


# ===============================================================
# Ledger actions and claim effects
# ===============================================================

ACTION_SUBMIT = "SUBMIT"
ACTION_RESUBMIT = "RESUBMIT"
ACTION_CLAIM = "CLAIM"
ACTION_RECLAIM = "RECLAIM"
ACTION_RETURN = "RETURN"
ACTION_SEND_TO_VERIFICATION = "SEND_TO_VERIFICATION"
ACTION_APPROVE = "APPROVE"
ACTION_REJECT = "REJECT"

LEDGER_ACTIONS: Tuple[str, ...] = (
    ACTION_SUBMIT,
    ACTION_RESUBMIT,
    ACTION_CLAIM,
    ACTION_RECLAIM,
    ACTION_RETURN,
    ACTION_SEND_TO_VERIFICATION,
    ACTION_APPROVE,
    ACTION_REJECT,
)

CLAIM_NONE = "none"
CLAIM_ACQUIRE = "acquire"
CLAIM_RELEASE = "release"
CLAIM_RETAIN = "retain"


class TransitionRule(NamedTuple):
    current: str
    target: str
    capability: str
    action: str
    holder_required: bool = False
    claim: str = CLAIM_NONE
    notes_required: bool = False
    admission: bool = False


# ===============================================================
# Canonical transition table
# ===============================================================

TRANSITION_TABLE: Tuple[TransitionRule, ...] = (
    TransitionRule(DRAFT, SUBMITTED, CAP_ORIGIN, ACTION_SUBMIT, admission=True),
    TransitionRule(NEEDS_REVISION, SUBMITTED, CAP_ORIGIN, ACTION_RESUBMIT, admission=True),
    TransitionRule(SUBMITTED, PROCESSING, CAP_OPERATOR_CLASS, ACTION_CLAIM, claim=CLAIM_ACQUIRE),
    TransitionRule(
        PROCESSING, NEEDS_REVISION, CAP_OPERATOR_CLASS, ACTION_RETURN,
        holder_required=True, claim=CLAIM_RELEASE, notes_required=True,
    ),
    TransitionRule(
        PROCESSING, PENDING_VERIFICATION, CAP_OPERATOR_CLASS, ACTION_SEND_TO_VERIFICATION,
        holder_required=True, claim=CLAIM_RELEASE,
    ),
    # Same-state claim: serializes verifier access, does not advance the pipeline.
    TransitionRule(
        PENDING_VERIFICATION, PENDING_VERIFICATION, CAP_VERIFIER_CLASS, ACTION_CLAIM,
        claim=CLAIM_ACQUIRE,
    ),
    TransitionRule(
        PENDING_VERIFICATION, APPROVED, CAP_VERIFIER_CLASS, ACTION_APPROVE,
        holder_required=True, claim=CLAIM_RETAIN,
    ),
    TransitionRule(
        PENDING_VERIFICATION, REJECTED, CAP_VERIFIER_CLASS, ACTION_REJECT,
        holder_required=True, claim=CLAIM_RETAIN, notes_required=True,
    ),
    TransitionRule(
        PROCESSING, APPROVED, CAP_VERIFIER_CLASS, ACTION_APPROVE,
        holder_required=True, claim=CLAIM_RETAIN,
    ),
    TransitionRule(
        PROCESSING, REJECTED, CAP_VERIFIER_CLASS, ACTION_REJECT,
        holder_required=True, claim=CLAIM_RETAIN, notes_required=True,
    ),
)

_RULES: Dict[Tuple[str, str], TransitionRule] = {
    (rule.current, rule.target): rule for rule in TRANSITION_TABLE
}


# ===============================================================
# Normalization helpers
# ===============================================================

def normalize_state(value: Any) -> str:
    return str(value or "").strip().upper()


def normalize_role(value: Any) -> str:
    raw = str(value or "").strip().upper()
    return ROLE_ALIASES.get(raw, raw or READONLY)


def role_has_capability(role: str, capability: str) -> bool:
    return normalize_role(role) in CAPABILITY_ROLES.get(capability, set())


def is_terminal(state: str) -> bool:
    return normalize_state(state) in TERMINAL_STATES


def is_operator_class(role: str) -> bool:
    return role_has_capability(role, CAP_OPERATOR_CLASS)


def is_verifier_class(role: str) -> bool:
    return role_has_capability(role, CAP_VERIFIER_CLASS)


def pick_role(roles) -> str:
    """
    Choose the acting role for a user who holds several.
    """
    normalized = {normalize_role(r) for r in roles if r}
    for candidate in ROLE_PRECEDENCE:
        if candidate in normalized:
            return candidate
    return READONLY


# ===============================================================
# Public workflow API
# ===============================================================

def get_rule(current: str, target: str, role: str) -> TransitionRule:
    """
    Return the table row for (current, target) if `role` may perform it.

    Raises IllegalTransition when the pair is not in the table at all, or
    when the role lacks the capability the row requires.
    """
    cur = normalize_state(current)
    tgt = normalize_state(target)
    r = normalize_role(role)

    rule = _RULES.get((cur, tgt))
    if rule is None:
        raise IllegalTransition(cur, tgt)
    if not role_has_capability(r, rule.capability):
        raise IllegalTransition(cur, tgt, role=r)
    return rule


def validate_transition(current: str, target: str, role: str) -> None:
    get_rule(current, target, role)


def claim_target(current: str, role: str) -> Optional[str]:
    """
    The state a claim by `role` moves a `current` submission into, or None
    if that role cannot claim it.
    """
    cur = normalize_state(current)
    for rule in TRANSITION_TABLE:
        if rule.current != cur or rule.claim != CLAIM_ACQUIRE:
            continue
        if role_has_capability(role, rule.capability):
            return rule.target
    return None


def allowed_transitions(current: Optional[str] = None, role: Optional[str] = None) -> Any:
    """
    1) allowed_transitions() -> Dict[str, List[str]] full map, role-independent
    2) allowed_transitions("PROCESSING") -> List[str]
    3) allowed_transitions("PROCESSING", "VERIFIER") -> List[str], role-aware
    """
    if current is None and role is None:
        out: Dict[str, List[str]] = {state: [] for state in SUBMISSION_STATES}
        for rule in TRANSITION_TABLE:
            if rule.target not in out[rule.current]:
                out[rule.current].append(rule.target)
        return {state: sorted(targets) for state, targets in out.items()}

    cur = normalize_state(current)
    targets: Set[str] = set()
    for rule in TRANSITION_TABLE:
        if rule.current != cur:
            continue
        if role is not None and not role_has_capability(role, rule.capability):
            continue
        targets.add(rule.target)
    return sorted(targets)


def required_roles(current: str, target: str) -> List[str]:
    """
    Roles that can perform current -> target.
    """
    cur = normalize_state(current)
    tgt = normalize_state(target)
    rule = _RULES.get((cur, tgt))
    if rule is None:
        raise IllegalTransition(cur, tgt)
    return sorted(CAPABILITY_ROLES[rule.capability])


def workflow_definition() -> Dict[str, Any]:
    """
    Stable JSON-serializable definition for UI.
    """
    return {
        "states": list(SUBMISSION_STATES),
        "terminal": sorted(TERMINAL_STATES),
        "transitions": [
            {
                "from": rule.current,
                "to": rule.target,
                "action": rule.action,
                "roles": sorted(CAPABILITY_ROLES[rule.capability]),
                "holder_required": rule.holder_required,
                "claim": rule.claim,
                "notes_required": rule.notes_required,
                "admission_check": rule.admission,
            }
            for rule in TRANSITION_TABLE
        ],
    }


__all__ = [
    "SUBMISSION_STATES",
    "TERMINAL_STATES",
    "LOCKABLE_STATES",
    "ASSIGNEE_ALLOWED_STATES",
    "TRANSITION_TABLE",
    "TransitionRule",
    "normalize_state",
    "normalize_role",
    "role_has_capability",
    "is_terminal",
    "is_operator_class",
    "is_verifier_class",
    "pick_role",
    "get_rule",
    "validate_transition",
    "claim_target",
    "allowed_transitions",
    "required_roles",
    "workflow_definition",
]
