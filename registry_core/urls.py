# registry_core/urls.py

from django.urls import path

# -------------------------------------------------
# Workflow introspection and actions
# -------------------------------------------------
from .views_workflow_api import (
    ApproveView,
    ClaimView,
    RejectView,
    ReturnToOriginView,
    SendToVerificationView,
    SubmissionAllowedView,
    SubmissionDetailView,
    SubmissionHistoryView,
    SubmissionMetricsView,
    SubmitView,
    WorkflowDefinitionView,
)

# -------------------------------------------------
# Work lists and reports
# -------------------------------------------------
from .views_queue import (
    HealthView,
    HistoryView,
    LedgerListView,
    MyWorkView,
    QueueView,
    ReportView,
)


app_name = "registry_core"


urlpatterns = [
    # ============================================================
    # System
    # ============================================================
    path("health/", HealthView.as_view(), name="health"),

    # ============================================================
    # Workflow definition
    # ============================================================
    path("workflow/", WorkflowDefinitionView.as_view(), name="workflow-definition"),

    # ============================================================
    # Single submission
    # ============================================================
    path("submissions/<int:pk>/", SubmissionDetailView.as_view(), name="submission-detail"),
    path("submissions/<int:pk>/allowed/", SubmissionAllowedView.as_view(), name="submission-allowed"),
    path("submissions/<int:pk>/history/", SubmissionHistoryView.as_view(), name="submission-history"),
    path("submissions/<int:pk>/metrics/", SubmissionMetricsView.as_view(), name="submission-metrics"),

    # ============================================================
    # Workflow actions (the only mutating endpoints)
    # ============================================================
    path("submissions/<int:pk>/submit/", SubmitView.as_view(), name="submission-submit"),
    path("submissions/<int:pk>/claim/", ClaimView.as_view(), name="submission-claim"),
    path("submissions/<int:pk>/return/", ReturnToOriginView.as_view(), name="submission-return"),
    path(
        "submissions/<int:pk>/send-verification/",
        SendToVerificationView.as_view(),
        name="submission-send-verification",
    ),
    path("submissions/<int:pk>/approve/", ApproveView.as_view(), name="submission-approve"),
    path("submissions/<int:pk>/reject/", RejectView.as_view(), name="submission-reject"),

    # ============================================================
    # Work lists
    # ============================================================
    path("queue/", QueueView.as_view(), name="queue"),
    path("my-work/", MyWorkView.as_view(), name="my-work"),
    path("history/", HistoryView.as_view(), name="history"),
    path("reports/", ReportView.as_view(), name="reports"),
    path("ledger/", LedgerListView.as_view(), name="ledger"),
]
