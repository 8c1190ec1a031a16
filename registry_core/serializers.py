from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework import serializers

from .models import LedgerEntry, Submission
from .workflows import allowed_transitions
from .workflows.exceptions import display_name


# ===============================================================
# Helpers
# ===============================================================

class UserSlimSerializer(serializers.ModelSerializer):
    full_name = serializers.SerializerMethodField()

    class Meta:
        model = get_user_model()
        fields = ("id", "username", "full_name")
        read_only_fields = fields

    def get_full_name(self, obj) -> str:
        return display_name(obj)


# ===============================================================
# Submission projection
# ===============================================================

class SubmissionSerializer(serializers.ModelSerializer):
    """
    Read-only projection. Status and claim are changed through the action
    endpoints only.
    """

    created_by = UserSlimSerializer(read_only=True)
    current_assignee = UserSlimSerializer(read_only=True)
    allowed_next = serializers.SerializerMethodField()

    class Meta:
        model = Submission
        fields = (
            "id",
            "ticket_number",
            "status",
            "origin_office",
            "created_by",
            "current_assignee",
            "claimed_at",
            "marriage_date",
            "payload",
            "allowed_next",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields

    def get_allowed_next(self, obj) -> list[str]:
        role = self.context.get("role")
        return allowed_transitions(obj.status, role) if role else allowed_transitions(obj.status)


class SubmissionQueueSerializer(serializers.ModelSerializer):
    created_by = serializers.CharField(source="created_by.username", read_only=True, default=None)

    class Meta:
        model = Submission
        fields = (
            "id",
            "ticket_number",
            "status",
            "origin_office",
            "created_by",
            "marriage_date",
            "claimed_at",
            "created_at",
        )
        read_only_fields = fields


# ===============================================================
# Ledger
# ===============================================================

class LedgerEntrySerializer(serializers.ModelSerializer):
    actor = UserSlimSerializer(read_only=True)
    ticket_number = serializers.CharField(source="submission.ticket_number", read_only=True)

    class Meta:
        model = LedgerEntry
        fields = (
            "id",
            "submission",
            "ticket_number",
            "actor",
            "actor_role",
            "action",
            "previous_status",
            "new_status",
            "notes",
            "created_at",
        )
        read_only_fields = fields


# ===============================================================
# Action payloads
# ===============================================================

class SubmitSerializer(serializers.Serializer):
    marriage_date = serializers.DateField(required=False, allow_null=True)


class ReturnSerializer(serializers.Serializer):
    # Blank is let through so the service reports the missing reason itself.
    reason = serializers.CharField(required=False, allow_blank=True, default="", trim_whitespace=True)


class NotesSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)


class RejectSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    reason = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)

    def validate(self, attrs):
        attrs["notes"] = attrs.get("notes") or attrs.get("reason") or ""
        return attrs


class ReportQuerySerializer(serializers.Serializer):
    period = serializers.ChoiceField(choices=("week", "month", "year", "all"), default="month")
