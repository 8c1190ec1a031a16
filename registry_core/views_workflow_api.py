# registry_core/views_workflow_api.py

from __future__ import annotations

from rest_framework import generics
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from registry_core.models import Submission
from registry_core.permissions import resolve_acting_role
from registry_core.selectors import submission_history
from registry_core.serializers import (
    LedgerEntrySerializer,
    NotesSerializer,
    RejectSerializer,
    ReturnSerializer,
    SubmissionSerializer,
    SubmitSerializer,
)
from registry_core.services import workflow_service
from registry_core.workflows import allowed_transitions, workflow_definition
from registry_core.workflows.exceptions import SubmissionNotFound
from registry_core.workflows.metrics import compute_time_in_states, compute_total_cycle_time


# =============================================================
# Helpers
# =============================================================

def _get_submission(pk) -> Submission:
    try:
        return Submission.objects.select_related("created_by", "current_assignee").get(pk=pk)
    except (Submission.DoesNotExist, ValueError, TypeError):
        raise SubmissionNotFound(pk)


def _payload(serializer_class, request):
    serializer = serializer_class(data=request.data or {})
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


def _respond(request, submission: Submission, role: str) -> Response:
    return Response(
        SubmissionSerializer(submission, context={"request": request, "role": role}).data
    )


# =============================================================
# API: Workflow definition and introspection
# =============================================================

class WorkflowDefinitionView(APIView):
    """
    GET /registry/workflow/

    The transition table as JSON, for UI rendering.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(workflow_definition())


class SubmissionDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk: int):
        submission = _get_submission(pk)
        return _respond(request, submission, resolve_acting_role(request))


class SubmissionAllowedView(APIView):
    """
    GET /registry/submissions/<pk>/allowed/

    Returns:
    - current state
    - allowed next states for the caller's acting role
    - the role considered
    """
    permission_classes = [IsAuthenticated]

    def get(self, request, pk: int):
        submission = _get_submission(pk)
        role = resolve_acting_role(request)

        return Response(
            {
                "object_id": submission.pk,
                "current": submission.status,
                "allowed": allowed_transitions(submission.status, role),
                "role": role,
                "holder": submission.current_assignee_id,
            }
        )


class SubmissionHistoryView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = LedgerEntrySerializer
    pagination_class = None

    def get_queryset(self):
        submission = _get_submission(self.kwargs["pk"])
        return submission_history(submission.pk)


class SubmissionMetricsView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk: int):
        submission = _get_submission(pk)
        durations = compute_time_in_states(submission_id=submission.pk)

        return Response(
            {
                "object_id": submission.pk,
                "current": submission.status,
                "time_in_states": {
                    state: int(delta.total_seconds()) for state, delta in durations.items()
                },
                "total_cycle_seconds": int(
                    compute_total_cycle_time(submission_id=submission.pk).total_seconds()
                ),
            }
        )


# =============================================================
# API: Workflow actions (AUTHORITATIVE)
# =============================================================

class SubmissionActionView(APIView):
    """
    Base for POST /registry/submissions/<pk>/<action>/.

    These endpoints are the ONLY API-level entry points that mutate
    submission status or claim.
    """
    permission_classes = [IsAuthenticated]
    payload_class = None

    def perform(self, request, pk, role: str, data) -> Submission:
        raise NotImplementedError

    def post(self, request, pk: int):
        role = resolve_acting_role(request)
        data = _payload(self.payload_class, request) if self.payload_class else {}
        submission = self.perform(request, pk, role, data)
        return _respond(request, submission, role)


class SubmitView(SubmissionActionView):
    payload_class = SubmitSerializer

    def perform(self, request, pk, role, data):
        return workflow_service.submit(
            pk,
            request.user,
            data.get("marriage_date"),
            actor_role=role,
        )


class ClaimView(SubmissionActionView):
    def perform(self, request, pk, role, data):
        return workflow_service.claim_for_processing(pk, request.user, role)


class ReturnToOriginView(SubmissionActionView):
    payload_class = ReturnSerializer

    def perform(self, request, pk, role, data):
        return workflow_service.return_to_origin(
            pk,
            request.user,
            data.get("reason"),
            actor_role=role,
        )


class SendToVerificationView(SubmissionActionView):
    payload_class = NotesSerializer

    def perform(self, request, pk, role, data):
        return workflow_service.send_to_verification(
            pk,
            request.user,
            data.get("notes"),
            actor_role=role,
        )


class ApproveView(SubmissionActionView):
    payload_class = NotesSerializer

    def perform(self, request, pk, role, data):
        return workflow_service.approve(pk, request.user, data.get("notes"), actor_role=role)


class RejectView(SubmissionActionView):
    payload_class = RejectSerializer

    def perform(self, request, pk, role, data):
        return workflow_service.reject(pk, request.user, data.get("notes"), actor_role=role)
