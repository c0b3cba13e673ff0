from fastapi import APIRouter, Depends

from auth import get_current_user
from responses import no_content, success
from schemas import BulkResourceReplace, QuantityUpdate, ResourceCreate, ResourceUpdate
from workspace_service import WorkspaceService, get_workspace_service

router = APIRouter(prefix="/workspaces/{workspace_id}/resources", tags=["resources"])


@router.get("")
def list_resources(
    workspace_id: str,
    current_user=Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    resources = service.list_resources(workspace_id, current_user["id"])
    return success("Resources retrieved successfully", resources)


@router.post("")
def add_resource(
    workspace_id: str,
    payload: ResourceCreate,
    current_user=Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    resource = service.add_resource(workspace_id, current_user["id"], payload)
    return success("Resource added successfully", resource, 201)


@router.put("")
def bulk_replace_resources(
    workspace_id: str,
    payload: BulkResourceReplace,
    current_user=Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    resources = service.bulk_replace_resources(workspace_id, current_user["id"], payload.resources)
    return success("Resources replaced successfully", resources)


# Declared before /{resource_id} so "statistics" is not taken for an id.
@router.get("/statistics")
def resource_statistics(
    workspace_id: str,
    current_user=Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    stats = service.resource_statistics(workspace_id, current_user["id"])
    return success("Resource statistics retrieved successfully", stats)


@router.get("/{resource_id}")
def get_resource(
    workspace_id: str,
    resource_id: str,
    current_user=Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    resource = service.get_resource(workspace_id, resource_id, current_user["id"])
    return success("Resource retrieved successfully", resource)


@router.put("/{resource_id}")
def update_resource(
    workspace_id: str,
    resource_id: str,
    payload: ResourceUpdate,
    current_user=Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    resource = service.update_resource(workspace_id, resource_id, current_user["id"], payload)
    return success("Resource updated successfully", resource)


@router.delete("/{resource_id}", status_code=204)
def delete_resource(
    workspace_id: str,
    resource_id: str,
    current_user=Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    service.delete_resource(workspace_id, resource_id, current_user["id"])
    return no_content()


@router.patch("/{resource_id}/quantity")
def update_resource_quantity(
    workspace_id: str,
    resource_id: str,
    payload: QuantityUpdate,
    current_user=Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    resource = service.update_resource_quantity(workspace_id, resource_id, current_user["id"], payload.quantity)
    return success("Resource quantity updated successfully", resource)
