# registry_core/views_queue.py
"""
Work lists and reports. Read-only; nothing here takes a lock.
"""

from __future__ import annotations

from django.db import connection
from django.utils.timezone import now
from rest_framework import generics
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import AllowAny, IsAdminUser, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from registry_core import selectors
from registry_core.filters import LedgerEntryFilter, SubmissionFilter
from registry_core.models import LedgerEntry
from registry_core.permissions import IsOperatorClass, resolve_acting_role
from registry_core.serializers import (
    LedgerEntrySerializer,
    ReportQuerySerializer,
    SubmissionQueueSerializer,
    SubmissionSerializer,
)
from registry_core.workflows import ORIGIN, is_operator_class, is_verifier_class


class QueueView(generics.ListAPIView):
    """
    GET /registry/queue/

    Unclaimed work for the caller's role, oldest first, 10 per page.
    """
    permission_classes = [IsAuthenticated, IsOperatorClass]
    serializer_class = SubmissionQueueSerializer

    def get_queryset(self):
        return selectors.incoming_queue(resolve_acting_role(self.request))

    def list(self, request, *args, **kwargs):
        response = super().list(request, *args, **kwargs)
        role = resolve_acting_role(request)
        response.data["role"] = role
        response.data["counters"] = selectors.queue_counters(request.user, role)
        return response


class MyWorkView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = SubmissionQueueSerializer
    filterset_class = SubmissionFilter

    def get_queryset(self):
        return selectors.my_work(self.request.user)


class HistoryView(generics.ListAPIView):
    """
    GET /registry/history/?status=APPROVED,REJECTED

    Originating offices see what they created; everyone else sees what they
    acted on.
    """
    permission_classes = [IsAuthenticated]
    serializer_class = SubmissionSerializer

    def _statuses(self):
        raw = self.request.query_params.get("status") or ""
        return [s.strip() for s in raw.split(",") if s.strip()]

    def get_queryset(self):
        user = self.request.user
        statuses = self._statuses()

        if resolve_acting_role(self.request) == ORIGIN:
            qs = selectors.origin_submissions(user)
            if statuses:
                qs = qs.filter(status__in=[s.upper() for s in statuses])
            return qs

        return selectors.acted_on(user, statuses)


class ReportView(APIView):
    """
    GET /registry/reports/?period=week|month|year|all
    """
    permission_classes = [IsAuthenticated, IsOperatorClass]

    def get(self, request):
        query = ReportQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        period = query.validated_data["period"]

        role = resolve_acting_role(request)
        if is_verifier_class(role):
            report = selectors.verifier_report(request.user, period)
        elif is_operator_class(role):
            report = selectors.operator_report(request.user, period)
        else:
            raise PermissionDenied("Reports are available to operators and verifiers only.")

        report["role"] = role
        report["status_summary"] = selectors.status_summary()
        return Response(report)


class LedgerListView(generics.ListAPIView):
    """
    GET /registry/ledger/?actor=&action=&status=&created_at_after=&created_at_before=
    """
    permission_classes = [IsAuthenticated, IsOperatorClass | IsAdminUser]
    serializer_class = LedgerEntrySerializer
    filterset_class = LedgerEntryFilter

    def get_queryset(self):
        return (
            LedgerEntry.objects
            .select_related("actor", "submission")
            .order_by("-created_at", "-id")
        )


class HealthView(APIView):
    permission_classes = [AllowAny]

    def get(self, request):
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        return Response({"status": "ok", "time": now().isoformat()})
