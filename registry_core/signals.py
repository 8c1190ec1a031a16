# registry_core/signals.py
from __future__ import annotations

import logging

from django.conf import settings
from django.core.mail import send_mail
from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from registry_core.models import LedgerEntry
from registry_core.workflows import APPROVED, NEEDS_REVISION, REJECTED

logger = logging.getLogger(__name__)

# Outcomes the originating office needs to hear about.
NOTIFY_ORIGIN_ON = {NEEDS_REVISION, APPROVED, REJECTED}


def _safe_username(user) -> str:
    if not user:
        return "system"
    return getattr(user, "username", "") or str(user.pk)


# ===============================================================
# LEDGER ENTRIES
# ===============================================================
@receiver(post_save, sender=LedgerEntry)
def notify_origin_of_outcome(sender, instance: LedgerEntry, created: bool, **kwargs):
    """
    Optional email to the submission's creator when it is returned or decided.

    Mail goes out only after the surrounding transaction commits, so a rolled
    back operation never notifies anyone.
    """
    if not created:
        return

    if not getattr(settings, "WORKFLOW_EMAIL_NOTIFICATIONS", False):
        return

    if instance.new_status not in NOTIFY_ORIGIN_ON:
        return

    submission = instance.submission
    creator = submission.created_by
    recipient = getattr(creator, "email", "") if creator else ""
    if not recipient:
        return

    subject = f"[Marriage Registry] {submission} {instance.previous_status} -> {instance.new_status}"

    body = "\n".join(
        [
            "Your marriage registration submission has been updated.",
            "",
            f"Ticket: {submission}",
            f"From: {instance.previous_status}",
            f"To: {instance.new_status}",
            f"By: {_safe_username(instance.actor)}",
            f"Notes: {instance.notes or '-'}",
            f"At: {instance.created_at}",
        ]
    )

    def _send():
        sent = send_mail(
            subject=subject,
            message=body,
            from_email=getattr(settings, "DEFAULT_FROM_EMAIL", None),
            recipient_list=[recipient],
            fail_silently=True,
        )
        if not sent:
            logger.warning("Notification for %s to %s was not delivered", submission, recipient)

    transaction.on_commit(_send)
