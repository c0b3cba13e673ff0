"""
Database Schemas and request bodies for the SiteGuard API

MongoDB documents are described below using Pydantic models. Field names are
snake_case in Python and camelCase on the wire and in storage (owner_id ->
"ownerId"), so the same model serves both with ``model_dump(by_alias=True)``.

We use these collections:
- users: registered accounts
- workspaces: construction projects, with resources, the architecture plan and
  safety reports embedded
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

ResourceStatus = Literal["Good", "Low", "Critical"]
WorkspaceStatus = Literal["Under Construction", "Finished"]
Severity = Literal["Low", "Medium", "High"]
# int first so whole-number quantities round-trip as integers
Number = Union[int, float]

UNDER_CONSTRUCTION = "Under Construction"
FINISHED = "Finished"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_doc(self, **kwargs) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, **kwargs)


# Stored documents

class User(CamelModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., description="BCrypt hash of password")
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class ResourceItem(CamelModel):
    id: str = Field(default_factory=new_id)
    name: str
    quantity: Number = Field(..., ge=0)
    unit: str
    threshold: Number = Field(..., ge=0)
    status: ResourceStatus


class Section(CamelModel):
    title: str
    description: str


class Material(CamelModel):
    name: str
    quantity: str
    specification: str


class Stage(CamelModel):
    phase: str
    duration: str
    tasks: List[str]


class ArchitecturePlan(CamelModel):
    sections: List[Section]
    materials: List[Material]
    stages: List[Stage]
    summary: str
    created_at: datetime = Field(default_factory=utcnow)


class Hazard(CamelModel):
    description: str
    severity: Severity
    recommendation: str


class SafetyReport(CamelModel):
    id: str = Field(default_factory=new_id)
    date: str = Field(default_factory=lambda: utcnow().date().isoformat())
    risk_score: int = Field(..., ge=0, le=100)
    hazards: List[Hazard] = Field(default_factory=list)
    summary: str


class Workspace(CamelModel):
    owner_id: Any
    name: str = Field(..., min_length=3, max_length=100)
    location: str
    stage: str
    type: str
    budget: str
    status: WorkspaceStatus = UNDER_CONSTRUCTION
    progress: int = Field(0, ge=0, le=100)
    safety_score: int = Field(100, ge=0, le=100)
    resources: List[ResourceItem] = Field(default_factory=list)
    architecture_plan: Optional[ArchitecturePlan] = None
    safety_reports: List[SafetyReport] = Field(default_factory=list)
    last_updated: datetime = Field(default_factory=utcnow)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


# Request bodies

class SignupRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8)


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class WorkspaceCreate(CamelModel):
    name: Optional[str] = None
    location: Optional[str] = None
    stage: Optional[str] = None
    type: Optional[str] = None
    budget: Optional[str] = None


class WorkspaceUpdate(CamelModel):
    name: Optional[str] = None
    location: Optional[str] = None
    stage: Optional[str] = None
    type: Optional[str] = None
    budget: Optional[str] = None


class ProgressUpdate(CamelModel):
    progress: int


class ResourceCreate(CamelModel):
    name: str = Field(..., min_length=1)
    quantity: Number
    unit: str = Field(..., min_length=1)
    threshold: Number


class ResourceUpdate(CamelModel):
    name: Optional[str] = None
    quantity: Optional[Number] = None
    unit: Optional[str] = None
    threshold: Optional[Number] = None


class QuantityUpdate(CamelModel):
    quantity: Number


class BulkResourceReplace(CamelModel):
    resources: List[ResourceCreate]


class ArchitecturePlanCreate(CamelModel):
    sections: List[Section]
    materials: List[Material]
    stages: List[Stage]
    summary: str


class ArchitecturePlanUpdate(CamelModel):
    sections: Optional[List[Section]] = None
    materials: Optional[List[Material]] = None
    stages: Optional[List[Stage]] = None
    summary: Optional[str] = None


class SafetyReportCreate(CamelModel):
    risk_score: int
    hazards: List[Hazard] = Field(default_factory=list)
    summary: str
