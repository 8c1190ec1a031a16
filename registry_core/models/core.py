# registry_core/models/core.py

from django.conf import settings
from django.db import models
from django.db.models import Q

from registry_core.workflows import (
    ASSIGNEE_ALLOWED_STATES,
    DRAFT,
    SUBMISSION_STATES,
)
from registry_core.workflows.guards import WorkflowWriteGuardMixin


# ============================================================
# Base
# ============================================================
class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


# ============================================================
# User Roles
# ============================================================
class UserRole(TimeStampedModel):
    """
    Trusted (user, role) pairs supplied by the identity collaborator.

    Role strings are stored as received (e.g. OPERATOR_DUKCAPIL) and
    normalized by registry_core.workflows.normalize_role when read.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="registry_roles",
    )
    role = models.CharField(max_length=64)
    office = models.CharField(max_length=255, blank=True)

    class Meta:
        unique_together = ("user", "role")

    def __str__(self):
        return f"{self.user.username} - {self.role}"


# ============================================================
# Submission
# ============================================================
class SubmissionManager(models.Manager):
    def create_draft(self, *, created_by=None, marriage_date=None, origin_office="", payload=None):
        """
        Origination hook: a new case starts in DRAFT and receives its display
        ticket once the row has a primary key. No ledger entry is written;
        nothing has transitioned yet.
        """
        submission = self.create(
            created_by=created_by,
            marriage_date=marriage_date,
            origin_office=origin_office or "",
            payload=payload or {},
        )
        submission.ticket_number = f"REG-{submission.pk:06d}"
        self.filter(pk=submission.pk).update(ticket_number=submission.ticket_number)
        return submission


class Submission(WorkflowWriteGuardMixin, TimeStampedModel):
    """One marriage-registration case moving through the approval pipeline."""

    WORKFLOW_FIELDS = ("status", "current_assignee_id")

    class Status(models.TextChoices):
        DRAFT = "DRAFT", "Draft"
        SUBMITTED = "SUBMITTED", "Submitted"
        PROCESSING = "PROCESSING", "Processing"
        NEEDS_REVISION = "NEEDS_REVISION", "Needs revision"
        PENDING_VERIFICATION = "PENDING_VERIFICATION", "Pending verification"
        APPROVED = "APPROVED", "Approved"
        REJECTED = "REJECTED", "Rejected"

    ticket_number = models.CharField(max_length=32, unique=True, null=True, blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="originated_submissions",
    )
    origin_office = models.CharField(max_length=255, blank=True)

    status = models.CharField(
        max_length=32,
        choices=Status.choices,
        default=DRAFT,
        editable=False,
        db_index=True,
    )

    current_assignee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        editable=False,
        related_name="claimed_submissions",
    )
    claimed_at = models.DateTimeField(null=True, blank=True, editable=False)

    marriage_date = models.DateField(null=True, blank=True)
    payload = models.JSONField(
        default=dict,
        blank=True,
        help_text="Party identities, venue and contact details. Opaque to the workflow engine.",
    )

    objects = SubmissionManager()

    class Meta:
        ordering = ["created_at", "id"]
        constraints = [
            models.CheckConstraint(
                name="submission_assignee_only_when_claimable",
                condition=Q(current_assignee__isnull=True)
                | Q(status__in=sorted(ASSIGNEE_ALLOWED_STATES)),
            ),
            models.CheckConstraint(
                name="submission_status_known",
                condition=Q(status__in=list(SUBMISSION_STATES)),
            ),
        ]
        indexes = [
            models.Index(fields=["status", "current_assignee"], name="submission_status_holder_idx"),
        ]

    def __str__(self):
        return self.ticket_number or f"Submission {self.pk}"
