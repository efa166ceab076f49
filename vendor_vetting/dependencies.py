"""FastAPI dependencies shared by the routers."""

from __future__ import annotations

from fastapi import Request

from vendor_vetting.services.workflow import AssessmentWorkflow


def get_workflow(request: Request) -> AssessmentWorkflow:
    """Workflow bound to the application's repository and settings."""
    return AssessmentWorkflow(request.app.state.store, request.app.state.settings)
