from .core import TimeStampedModel, UserRole, Submission
from .ledger import LedgerEntry
from .claim_alert import StaleClaimAlert

__all__ = [
    "TimeStampedModel",
    "UserRole",
    "Submission",
    "LedgerEntry",
    "StaleClaimAlert",
]
