# registry_core/filters.py
import django_filters as df

from .models import LedgerEntry, Submission
from .workflows import LEDGER_ACTIONS, SUBMISSION_STATES


class LedgerEntryFilter(df.FilterSet):
    actor = df.NumberFilter(field_name="actor_id")
    submission = df.NumberFilter(field_name="submission_id")
    action = df.ChoiceFilter(choices=[(a, a) for a in LEDGER_ACTIONS])
    status = df.ChoiceFilter(field_name="new_status", choices=[(s, s) for s in SUBMISSION_STATES])
    created_at = df.DateFromToRangeFilter()

    class Meta:
        model = LedgerEntry
        fields = ["actor", "submission", "action", "status", "actor_role", "created_at"]


class SubmissionFilter(df.FilterSet):
    status = df.MultipleChoiceFilter(choices=[(s, s) for s in SUBMISSION_STATES])
    ticket_number = df.CharFilter(field_name="ticket_number", lookup_expr="icontains")
    origin_office = df.CharFilter(field_name="origin_office", lookup_expr="icontains")
    marriage_date = df.DateFromToRangeFilter()
    created_at = df.DateFromToRangeFilter()

    class Meta:
        model = Submission
        fields = ["status", "ticket_number", "origin_office", "marriage_date", "created_at"]
