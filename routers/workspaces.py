from fastapi import APIRouter, Depends

from auth import get_current_user
from responses import no_content, success
from schemas import ProgressUpdate, WorkspaceCreate, WorkspaceUpdate
from workspace_service import WorkspaceService, get_workspace_service

router = APIRouter(prefix="/workspaces", tags=["workspaces"])


@router.get("")
def list_workspaces(
    current_user=Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    workspaces = service.list_workspaces(current_user["id"])
    return success("Workspaces retrieved successfully", workspaces)


@router.post("")
def create_workspace(
    payload: WorkspaceCreate,
    current_user=Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    workspace = service.create_workspace(current_user["id"], payload)
    return success("Workspace created successfully", workspace, 201)


@router.get("/{workspace_id}")
def get_workspace(
    workspace_id: str,
    current_user=Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    workspace = service.get_workspace(workspace_id, current_user["id"])
    return success("Workspace retrieved successfully", workspace)


@router.put("/{workspace_id}")
def update_workspace(
    workspace_id: str,
    payload: WorkspaceUpdate,
    current_user=Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    workspace = service.update_workspace(workspace_id, current_user["id"], payload)
    return success("Workspace updated successfully", workspace)


@router.delete("/{workspace_id}", status_code=204)
def delete_workspace(
    workspace_id: str,
    current_user=Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    service.delete_workspace(workspace_id, current_user["id"])
    return no_content()


@router.patch("/{workspace_id}/progress")
def update_progress(
    workspace_id: str,
    payload: ProgressUpdate,
    current_user=Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    workspace = service.update_progress(workspace_id, current_user["id"], payload.progress)
    return success("Progress updated successfully", workspace)


@router.patch("/{workspace_id}/status")
def toggle_status(
    workspace_id: str,
    current_user=Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    workspace = service.toggle_status(workspace_id, current_user["id"])
    return success("Status toggled successfully", workspace)
