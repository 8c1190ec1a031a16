from django.conf import settings
from django.db import models
from django.utils import timezone

from registry_core.workflows import LEDGER_ACTIONS
from registry_core.workflows.guards import AppendOnlyMixin


class LedgerEntry(AppendOnlyMixin):
    """
    Immutable audit record of one workflow operation on a submission.

    Also the source of truth for "who last acted on this submission in
    which role", and for every derived report counter.
    """

    ACTION_CHOICES = tuple((a, a.replace("_", " ").title()) for a in LEDGER_ACTIONS)

    submission = models.ForeignKey(
        "registry_core.Submission",
        on_delete=models.PROTECT,
        related_name="ledger_entries",
    )

    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="ledger_entries",
    )
    actor_role = models.CharField(max_length=32)
    action = models.CharField(max_length=32, choices=ACTION_CHOICES)

    previous_status = models.CharField(max_length=32)
    new_status = models.CharField(max_length=32)

    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(default=timezone.now, editable=False, db_index=True)

    class Meta:
        ordering = ["created_at", "id"]
        verbose_name_plural = "ledger entries"
        indexes = [
            models.Index(fields=["submission", "created_at"], name="ledger_submission_idx"),
            models.Index(fields=["actor", "new_status", "created_at"], name="ledger_actor_status_idx"),
        ]

    def __str__(self):
        return (
            f"{self.submission_id}: "
            f"{self.previous_status} → {self.new_status} "
            f"by {self.actor.username}"
        )
