from django.db import models
from django.conf import settings
from django.utils import timezone


class StaleClaimAlert(models.Model):
    submission = models.ForeignKey(
        "registry_core.Submission",
        on_delete=models.CASCADE,
        related_name="stale_claim_alerts",
    )
    holder = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="stale_claim_alerts",
    )

    state = models.CharField(max_length=32)
    claimed_at = models.DateTimeField()
    threshold_seconds = models.PositiveIntegerField()
    age_seconds = models.PositiveIntegerField()

    triggered_at = models.DateTimeField(default=timezone.now)
    resolved_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        unique_together = ("submission", "claimed_at")
        ordering = ("-triggered_at",)

    def __str__(self):
        return f"{self.submission_id} {self.state} STALE CLAIM"
