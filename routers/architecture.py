from fastapi import APIRouter, Depends

from auth import get_current_user
from responses import no_content, success
from schemas import ArchitecturePlanCreate, ArchitecturePlanUpdate, Material, Section, Stage
from workspace_service import WorkspaceService, get_workspace_service

router = APIRouter(prefix="/workspaces/{workspace_id}/architecture", tags=["architecture"])


@router.get("")
def get_plan(
    workspace_id: str,
    current_user=Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    plan = service.get_plan(workspace_id, current_user["id"])
    return success("Architecture plan retrieved successfully", plan)


@router.post("")
def save_plan(
    workspace_id: str,
    payload: ArchitecturePlanCreate,
    current_user=Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    plan = service.save_plan(workspace_id, current_user["id"], payload)
    return success("Architecture plan saved successfully", plan, 201)


@router.put("")
def update_plan(
    workspace_id: str,
    payload: ArchitecturePlanUpdate,
    current_user=Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    plan = service.update_plan(workspace_id, current_user["id"], payload)
    return success("Architecture plan updated successfully", plan)


@router.delete("", status_code=204)
def delete_plan(
    workspace_id: str,
    current_user=Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    service.delete_plan(workspace_id, current_user["id"])
    return no_content()


@router.get("/sections")
def list_sections(
    workspace_id: str,
    current_user=Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    sections = service.list_plan_items(workspace_id, current_user["id"], "sections")
    return success("Architecture sections retrieved successfully", sections)


@router.post("/sections")
def add_section(
    workspace_id: str,
    payload: Section,
    current_user=Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    plan = service.add_section(workspace_id, current_user["id"], payload)
    return success("Architecture section added successfully", plan, 201)


@router.get("/materials")
def list_materials(
    workspace_id: str,
    current_user=Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    materials = service.list_plan_items(workspace_id, current_user["id"], "materials")
    return success("Architecture materials retrieved successfully", materials)


@router.post("/materials")
def add_material(
    workspace_id: str,
    payload: Material,
    current_user=Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    plan = service.add_material(workspace_id, current_user["id"], payload)
    return success("Architecture material added successfully", plan, 201)


@router.get("/stages")
def list_stages(
    workspace_id: str,
    current_user=Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    stages = service.list_plan_items(workspace_id, current_user["id"], "stages")
    return success("Architecture stages retrieved successfully", stages)


@router.post("/stages")
def add_stage(
    workspace_id: str,
    payload: Stage,
    current_user=Depends(get_current_user),
    service: WorkspaceService = Depends(get_workspace_service),
):
    plan = service.add_stage(workspace_id, current_user["id"], payload)
    return success("Architecture stage added successfully", plan, 201)
