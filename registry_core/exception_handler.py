# registry_core/exception_handler.py
from __future__ import annotations

import logging

from rest_framework.views import exception_handler

from registry_core.workflows.exceptions import WorkflowError

logger = logging.getLogger(__name__)


def workflow_exception_handler(exc, context):
    """
    DRF's handler plus the violated invariant for workflow errors.

    Body: {"detail": ..., "code": ..., <context fields>}
    """
    response = exception_handler(exc, context)

    if response is None or not isinstance(exc, WorkflowError):
        return response

    view = context.get("view")
    logger.warning(
        "%s rejected in %s: %s",
        exc.code,
        view.__class__.__name__ if view else "unknown view",
        exc.detail,
    )

    body = {"detail": str(exc.detail), "code": exc.code}
    for key, value in exc.context.items():
        if value is not None:
            body[key] = value
    response.data = body
    return response
