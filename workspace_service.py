"""
Workspace aggregate operations.

A workspace document owns its resources, architecture plan and safety reports.
Every read and write goes through ``_owned`` / ``get_workspace``, which filter
on ``(_id, ownerId)`` in a single query: a workspace owned by someone else is
indistinguishable from one that does not exist.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from fastapi import Depends
from pymongo import DESCENDING, ReturnDocument
from pymongo.database import Database

from database import WORKSPACES, get_db, parse_object_id, sanitize
from errors import BadRequestError, NotFoundError
from inventory import build_resource, classify, default_resources, statistics
from schemas import (
    FINISHED,
    UNDER_CONSTRUCTION,
    ArchitecturePlan,
    ArchitecturePlanCreate,
    ArchitecturePlanUpdate,
    Material,
    Number,
    ResourceCreate,
    ResourceUpdate,
    SafetyReport,
    SafetyReportCreate,
    Section,
    Stage,
    Workspace,
    WorkspaceCreate,
    WorkspaceUpdate,
)

logger = logging.getLogger(__name__)

WORKSPACE_NOT_FOUND = "Workspace not found"
RESOURCE_NOT_FOUND = "Resource not found"
PLAN_NOT_FOUND = "Architecture plan not found"
PLAN_REQUIRED = "Architecture plan not found. Please create a plan first."


def _touch() -> Dict[str, datetime]:
    now = datetime.now(timezone.utc)
    return {"lastUpdated": now, "updatedAt": now}


def _blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def _check_name(name: str) -> str:
    name = name.strip()
    if not 3 <= len(name) <= 100:
        raise BadRequestError("Name must be between 3 and 100 characters")
    return name


def _check_resource_numbers(quantity: Optional[Number], threshold: Optional[Number]) -> None:
    if (quantity is not None and quantity < 0) or (threshold is not None and threshold < 0):
        raise BadRequestError("Quantity and threshold must be positive numbers")


class WorkspaceService:
    def __init__(self, db: Database):
        self.collection = db[WORKSPACES]

    # ------------------------------------------------------------------
    # ownership guard
    # ------------------------------------------------------------------
    def _owned(self, workspace_id: str, owner_id: Any) -> Dict[str, ObjectId]:
        ws_oid = parse_object_id(workspace_id)
        owner_oid = parse_object_id(owner_id)
        if ws_oid is None or owner_oid is None:
            raise NotFoundError(WORKSPACE_NOT_FOUND)
        return {"_id": ws_oid, "ownerId": owner_oid}

    def _find(self, workspace_id: str, owner_id: Any) -> Dict[str, Any]:
        workspace = self.collection.find_one(self._owned(workspace_id, owner_id))
        if not workspace:
            raise NotFoundError(WORKSPACE_NOT_FOUND)
        return workspace

    def _update(self, workspace_id: str, owner_id: Any, update: Dict[str, Any]) -> Dict[str, Any]:
        update.setdefault("$set", {}).update(_touch())
        workspace = self.collection.find_one_and_update(
            self._owned(workspace_id, owner_id), update, return_document=ReturnDocument.AFTER
        )
        if not workspace:
            raise NotFoundError(WORKSPACE_NOT_FOUND)
        return workspace

    def get_workspace(self, workspace_id: str, owner_id: Any) -> Dict[str, Any]:
        return sanitize(self._find(workspace_id, owner_id))

    # ------------------------------------------------------------------
    # workspaces
    # ------------------------------------------------------------------
    def list_workspaces(self, owner_id: Any) -> List[Dict[str, Any]]:
        owner_oid = parse_object_id(owner_id)
        cursor = self.collection.find({"ownerId": owner_oid}).sort([("updatedAt", DESCENDING)])
        return [sanitize(w) for w in cursor]

    def create_workspace(self, owner_id: Any, data: WorkspaceCreate) -> Dict[str, Any]:
        fields = (data.name, data.location, data.stage, data.type, data.budget)
        if any(_blank(value) for value in fields):
            raise BadRequestError("All required fields must be provided")
        name = _check_name(data.name)

        doc = Workspace(
            owner_id=parse_object_id(owner_id),
            name=name,
            location=data.location.strip(),
            stage=data.stage.strip(),
            type=data.type.strip(),
            budget=data.budget,
            resources=default_resources(),
        ).to_doc()
        res = self.collection.insert_one(doc)
        doc["_id"] = res.inserted_id
        logger.info(f"Workspace {res.inserted_id} created for owner {owner_id}")
        return sanitize(doc)

    def update_workspace(self, workspace_id: str, owner_id: Any, data: WorkspaceUpdate) -> Dict[str, Any]:
        fields = data.to_doc(exclude_unset=True)
        for key, value in fields.items():
            if _blank(value):
                raise BadRequestError(f"{key.capitalize()} cannot be empty")
            if key != "budget":
                fields[key] = value.strip()
        if "name" in fields:
            _check_name(fields["name"])
        return sanitize(self._update(workspace_id, owner_id, {"$set": fields}))

    def delete_workspace(self, workspace_id: str, owner_id: Any) -> None:
        res = self.collection.delete_one(self._owned(workspace_id, owner_id))
        if res.deleted_count == 0:
            raise NotFoundError(WORKSPACE_NOT_FOUND)
        logger.info(f"Workspace {workspace_id} deleted")

    def update_progress(self, workspace_id: str, owner_id: Any, progress: Optional[int]) -> Dict[str, Any]:
        if progress is None or progress < 0 or progress > 100:
            raise BadRequestError("Progress must be between 0 and 100")
        return sanitize(self._update(workspace_id, owner_id, {"$set": {"progress": progress}}))

    def toggle_status(self, workspace_id: str, owner_id: Any) -> Dict[str, Any]:
        workspace = self._find(workspace_id, owner_id)
        status = FINISHED if workspace.get("status") == UNDER_CONSTRUCTION else UNDER_CONSTRUCTION
        changes: Dict[str, Any] = {"status": status}
        if status == FINISHED:
            changes["progress"] = 100
        return sanitize(self._update(workspace_id, owner_id, {"$set": changes}))

    # ------------------------------------------------------------------
    # resources
    # ------------------------------------------------------------------
    def list_resources(self, workspace_id: str, owner_id: Any) -> List[Dict[str, Any]]:
        return self._find(workspace_id, owner_id).get("resources", [])

    def get_resource(self, workspace_id: str, resource_id: str, owner_id: Any) -> Dict[str, Any]:
        for resource in self.list_resources(workspace_id, owner_id):
            if resource.get("id") == resource_id:
                return resource
        raise NotFoundError(RESOURCE_NOT_FOUND)

    def add_resource(self, workspace_id: str, owner_id: Any, data: ResourceCreate) -> Dict[str, Any]:
        if _blank(data.name) or _blank(data.unit):
            raise BadRequestError("All resource fields are required")
        _check_resource_numbers(data.quantity, data.threshold)
        resource = build_resource(data.name, data.quantity, data.unit, data.threshold).to_doc()
        self._update(workspace_id, owner_id, {"$push": {"resources": resource}})
        return resource

    def _set_resource(self, workspace_id: str, owner_id: Any, resource: Dict[str, Any]) -> Dict[str, Any]:
        query = {**self._owned(workspace_id, owner_id), "resources.id": resource["id"]}
        fields = {f"resources.$.{key}": value for key, value in resource.items() if key != "id"}
        fields.update(_touch())
        res = self.collection.update_one(query, {"$set": fields})
        if res.matched_count == 0:
            raise NotFoundError(RESOURCE_NOT_FOUND)
        return resource

    def update_resource(
        self, workspace_id: str, resource_id: str, owner_id: Any, data: ResourceUpdate
    ) -> Dict[str, Any]:
        if data.quantity is not None and data.quantity < 0:
            raise BadRequestError("Quantity must be a positive number")
        if data.threshold is not None and data.threshold < 0:
            raise BadRequestError("Threshold must be a positive number")

        resource = dict(self.get_resource(workspace_id, resource_id, owner_id))
        resource.update(data.model_dump(exclude_unset=True, exclude_none=True))
        resource["status"] = classify(resource["quantity"], resource["threshold"])
        return self._set_resource(workspace_id, owner_id, resource)

    def update_resource_quantity(
        self, workspace_id: str, resource_id: str, owner_id: Any, quantity: Optional[Number]
    ) -> Dict[str, Any]:
        if quantity is None or quantity < 0:
            raise BadRequestError("Quantity must be a positive number")
        resource = dict(self.get_resource(workspace_id, resource_id, owner_id))
        resource["quantity"] = quantity
        resource["status"] = classify(quantity, resource["threshold"])
        return self._set_resource(workspace_id, owner_id, resource)

    def delete_resource(self, workspace_id: str, resource_id: str, owner_id: Any) -> None:
        self.get_resource(workspace_id, resource_id, owner_id)
        self._update(workspace_id, owner_id, {"$pull": {"resources": {"id": resource_id}}})

    def bulk_replace_resources(
        self, workspace_id: str, owner_id: Any, items: Optional[List[ResourceCreate]]
    ) -> List[Dict[str, Any]]:
        self._find(workspace_id, owner_id)
        if items is None:
            raise BadRequestError("Resources must be provided as a list")

        resources = []
        for item in items:
            if _blank(item.name) or _blank(item.unit):
                raise BadRequestError("All resource fields are required for bulk replace")
            _check_resource_numbers(item.quantity, item.threshold)
            resources.append(build_resource(item.name, item.quantity, item.unit, item.threshold).to_doc())

        self._update(workspace_id, owner_id, {"$set": {"resources": resources}})
        logger.info(f"Workspace {workspace_id} resources replaced ({len(resources)} items)")
        return resources

    def resource_statistics(self, workspace_id: str, owner_id: Any) -> Dict[str, Any]:
        return statistics(self.list_resources(workspace_id, owner_id))

    # ------------------------------------------------------------------
    # architecture plan
    # ------------------------------------------------------------------
    def get_plan(self, workspace_id: str, owner_id: Any) -> Optional[Dict[str, Any]]:
        return self._find(workspace_id, owner_id).get("architecturePlan") or None

    def save_plan(self, workspace_id: str, owner_id: Any, data: ArchitecturePlanCreate) -> Dict[str, Any]:
        if _blank(data.summary):
            raise BadRequestError("All architecture plan fields are required")
        if not data.sections:
            raise BadRequestError("At least one section is required")
        if not data.materials:
            raise BadRequestError("At least one material is required")
        if not data.stages:
            raise BadRequestError("At least one stage is required")

        plan = ArchitecturePlan(
            sections=data.sections,
            materials=data.materials,
            stages=data.stages,
            summary=data.summary,
        ).to_doc()
        self._update(workspace_id, owner_id, {"$set": {"architecturePlan": plan}})
        return plan

    def update_plan(self, workspace_id: str, owner_id: Any, data: ArchitecturePlanUpdate) -> Dict[str, Any]:
        if not self.get_plan(workspace_id, owner_id):
            raise NotFoundError(PLAN_NOT_FOUND)

        provided = data.model_fields_set
        changes: Dict[str, Any] = {}
        for field in ("sections", "materials", "stages"):
            if field in provided:
                items = getattr(data, field)
                if not items:
                    raise BadRequestError(f"{field.capitalize()} must be a non-empty array")
                changes[f"architecturePlan.{field}"] = [item.to_doc() for item in items]
        if "summary" in provided:
            if _blank(data.summary):
                raise BadRequestError("Summary must be a non-empty string")
            changes["architecturePlan.summary"] = data.summary

        workspace = self._update(workspace_id, owner_id, {"$set": changes})
        return workspace["architecturePlan"]

    def delete_plan(self, workspace_id: str, owner_id: Any) -> None:
        if not self.get_plan(workspace_id, owner_id):
            raise NotFoundError(PLAN_NOT_FOUND)
        self._update(workspace_id, owner_id, {"$unset": {"architecturePlan": ""}})

    def list_plan_items(self, workspace_id: str, owner_id: Any, field: str) -> List[Dict[str, Any]]:
        plan = self.get_plan(workspace_id, owner_id)
        if not plan:
            return []
        return plan.get(field, [])

    def _add_plan_item(self, workspace_id: str, owner_id: Any, field: str, item: Dict[str, Any]) -> Dict[str, Any]:
        if not self.get_plan(workspace_id, owner_id):
            raise NotFoundError(PLAN_REQUIRED)
        workspace = self._update(workspace_id, owner_id, {"$push": {f"architecturePlan.{field}": item}})
        return workspace["architecturePlan"]

    def add_section(self, workspace_id: str, owner_id: Any, section: Section) -> Dict[str, Any]:
        if _blank(section.title) or _blank(section.description):
            raise BadRequestError("Section title and description are required")
        return self._add_plan_item(workspace_id, owner_id, "sections", section.to_doc())

    def add_material(self, workspace_id: str, owner_id: Any, material: Material) -> Dict[str, Any]:
        if _blank(material.name) or _blank(material.quantity) or _blank(material.specification):
            raise BadRequestError("Material name, quantity, and specification are required")
        return self._add_plan_item(workspace_id, owner_id, "materials", material.to_doc())

    def add_stage(self, workspace_id: str, owner_id: Any, stage: Stage) -> Dict[str, Any]:
        if _blank(stage.phase) or _blank(stage.duration) or not stage.tasks:
            raise BadRequestError("Stage phase, duration, and tasks are required")
        return self._add_plan_item(workspace_id, owner_id, "stages", stage.to_doc())

    # ------------------------------------------------------------------
    # safety reports
    # ------------------------------------------------------------------
    def save_safety_report(self, workspace_id: str, owner_id: Any, data: SafetyReportCreate) -> Dict[str, Any]:
        if data.risk_score < 0 or data.risk_score > 100:
            raise BadRequestError("Risk score must be between 0 and 100")
        workspace = self._find(workspace_id, owner_id)

        report = SafetyReport(risk_score=data.risk_score, hazards=data.hazards, summary=data.summary).to_doc()
        history = [report] + workspace.get("safetyReports", [])
        self._update(
            workspace_id,
            owner_id,
            {"$set": {"safetyReports": history, "safetyScore": max(0, 100 - data.risk_score)}},
        )
        return report

    def list_safety_reports(self, workspace_id: str, owner_id: Any) -> List[Dict[str, Any]]:
        return self._find(workspace_id, owner_id).get("safetyReports", [])

    def get_safety_report(self, workspace_id: str, report_id: str, owner_id: Any) -> Dict[str, Any]:
        for report in self.list_safety_reports(workspace_id, owner_id):
            if report.get("id") == report_id:
                return report
        raise NotFoundError("Safety report not found")


def get_workspace_service(db: Database = Depends(get_db)) -> WorkspaceService:
    return WorkspaceService(db)
