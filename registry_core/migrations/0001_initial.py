import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Submission",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("ticket_number", models.CharField(blank=True, max_length=32, null=True, unique=True)),
                ("origin_office", models.CharField(blank=True, max_length=255)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("DRAFT", "Draft"),
                            ("SUBMITTED", "Submitted"),
                            ("PROCESSING", "Processing"),
                            ("NEEDS_REVISION", "Needs revision"),
                            ("PENDING_VERIFICATION", "Pending verification"),
                            ("APPROVED", "Approved"),
                            ("REJECTED", "Rejected"),
                        ],
                        db_index=True,
                        default="DRAFT",
                        editable=False,
                        max_length=32,
                    ),
                ),
                ("claimed_at", models.DateTimeField(blank=True, editable=False, null=True)),
                ("marriage_date", models.DateField(blank=True, null=True)),
                (
                    "payload",
                    models.JSONField(
                        blank=True,
                        default=dict,
                        help_text="Party identities, venue and contact details. Opaque to the workflow engine.",
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="originated_submissions",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "current_assignee",
                    models.ForeignKey(
                        blank=True,
                        editable=False,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="claimed_submissions",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(fields=["status", "current_assignee"], name="submission_status_holder_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            ("current_assignee__isnull", True),
                            ("status__in", ["APPROVED", "PENDING_VERIFICATION", "PROCESSING", "REJECTED"]),
                            _connector="OR",
                        ),
                        name="submission_assignee_only_when_claimable",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(
                            (
                                "status__in",
                                [
                                    "DRAFT",
                                    "SUBMITTED",
                                    "PROCESSING",
                                    "NEEDS_REVISION",
                                    "PENDING_VERIFICATION",
                                    "APPROVED",
                                    "REJECTED",
                                ],
                            )
                        ),
                        name="submission_status_known",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="LedgerEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("actor_role", models.CharField(max_length=32)),
                (
                    "action",
                    models.CharField(
                        choices=[
                            ("SUBMIT", "Submit"),
                            ("RESUBMIT", "Resubmit"),
                            ("CLAIM", "Claim"),
                            ("RECLAIM", "Reclaim"),
                            ("RETURN", "Return"),
                            ("SEND_TO_VERIFICATION", "Send To Verification"),
                            ("APPROVE", "Approve"),
                            ("REJECT", "Reject"),
                        ],
                        max_length=32,
                    ),
                ),
                ("previous_status", models.CharField(max_length=32)),
                ("new_status", models.CharField(max_length=32)),
                ("notes", models.TextField(blank=True)),
                (
                    "created_at",
                    models.DateTimeField(db_index=True, default=django.utils.timezone.now, editable=False),
                ),
                (
                    "actor",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="ledger_entries",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "submission",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="ledger_entries",
                        to="registry_core.submission",
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "ledger entries",
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(fields=["submission", "created_at"], name="ledger_submission_idx"),
                    models.Index(fields=["actor", "new_status", "created_at"], name="ledger_actor_status_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="UserRole",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("role", models.CharField(max_length=64)),
                ("office", models.CharField(blank=True, max_length=255)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="registry_roles",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "unique_together": {("user", "role")},
            },
        ),
        migrations.CreateModel(
            name="StaleClaimAlert",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("state", models.CharField(max_length=32)),
                ("claimed_at", models.DateTimeField()),
                ("threshold_seconds", models.PositiveIntegerField()),
                ("age_seconds", models.PositiveIntegerField()),
                ("triggered_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("resolved_at", models.DateTimeField(blank=True, null=True)),
                (
                    "holder",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="stale_claim_alerts",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "submission",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="stale_claim_alerts",
                        to="registry_core.submission",
                    ),
                ),
            ],
            options={
                "ordering": ("-triggered_at",),
                "unique_together": {("submission", "claimed_at")},
            },
        ),
    ]
