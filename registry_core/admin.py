# registry_core/admin.py

from django.contrib import admin
from django.urls import reverse
from django.utils.html import format_html

from .models import LedgerEntry, StaleClaimAlert, Submission, UserRole


# =============================================================
# Ledger (READ-ONLY AUDIT LOG)
# =============================================================

@admin.register(LedgerEntry)
class LedgerEntryAdmin(admin.ModelAdmin):
    list_display = (
        "submission",
        "action",
        "previous_status",
        "new_status",
        "actor",
        "actor_role",
        "created_at",
    )
    list_filter = (
        "action",
        "new_status",
        "actor_role",
    )
    search_fields = (
        "submission__ticket_number",
        "actor__username",
        "notes",
    )
    ordering = ("-created_at", "-id")

    readonly_fields = [f.name for f in LedgerEntry._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =============================================================
# Stale claim alerts (READ-ONLY)
# =============================================================

@admin.register(StaleClaimAlert)
class StaleClaimAlertAdmin(admin.ModelAdmin):
    list_display = (
        "submission",
        "holder",
        "state",
        "claimed_at",
        "age_seconds",
        "triggered_at",
        "resolved_at",
    )
    list_filter = ("state", "resolved_at")
    search_fields = ("submission__ticket_number", "holder__username")
    ordering = ("-triggered_at",)

    readonly_fields = [f.name for f in StaleClaimAlert._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =============================================================
# Submissions
# =============================================================

@admin.register(Submission)
class SubmissionAdmin(admin.ModelAdmin):
    list_display = (
        "ticket_number",
        "status",
        "origin_office",
        "created_by",
        "current_assignee",
        "marriage_date",
        "created_at",
        "ledger_link",
    )
    list_filter = ("status", "origin_office")
    search_fields = ("ticket_number", "origin_office", "created_by__username")
    ordering = ("created_at", "id")

    readonly_fields = (
        "ticket_number",
        "status",
        "current_assignee",
        "claimed_at",
        "created_at",
        "updated_at",
    )

    def ledger_link(self, obj):
        url = (
            reverse("admin:registry_core_ledgerentry_changelist")
            + f"?submission__id__exact={obj.pk}"
        )
        return format_html('<a href="{}">Ledger</a>', url)

    ledger_link.short_description = "Ledger"

    def has_delete_permission(self, request, obj=None):
        return False


# =============================================================
# User roles
# =============================================================

@admin.register(UserRole)
class UserRoleAdmin(admin.ModelAdmin):
    list_display = ("user", "role", "office", "created_at")
    list_filter = ("role",)
    search_fields = ("user__username", "office")
