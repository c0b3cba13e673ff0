from fastapi import APIRouter, Depends

from auth import get_current_user
from responses import success
from schemas import SafetyReportCreate
from workspace_service import WorkspaceService, get_workspace_service

router = APIRouter(prefix="/workspaces/{workspace_id}/safety-reports", tags=["safety-reports"])


@router.get("")
def list_safety_reports(
    workspace_id: str,
    current_user=Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    reports = service.list_safety_reports(workspace_id, current_user["id"])
    return success("Safety reports retrieved successfully", reports)


@router.post("")
def save_safety_report(
    workspace_id: str,
    payload: SafetyReportCreate,
    current_user=Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    report = service.save_safety_report(workspace_id, current_user["id"], payload)
    return success("Safety report saved successfully", report, 201)


@router.get("/{report_id}")
def get_safety_report(
    workspace_id: str,
    report_id: str,
    current_user=Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    report = service.get_safety_report(workspace_id, report_id, current_user["id"])
    return success("Safety report retrieved successfully", report)
