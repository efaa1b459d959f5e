from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict
from datetime import datetime


class ProjectCreate(BaseModel):
    name: str
    description: Optional[str] = None
    repository_url: Optional[str] = None
    source_url: Optional[str] = None
    branch: str = "main"
    root_directory: Optional[str] = None
    build_command: str = "npm run build"
    output_directory: str = "dist"
    auto_deploy: str = "commit"
    environment_variables: List[Dict[str, str]] = Field(default_factory=list)  # [{"key": ..., "value": ...}]
    domain: Optional[str] = None
    status: str = "pending"


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    name: str
    slug: str
    description: Optional[str] = None
    repository_url: Optional[str] = None
    source_url: Optional[str] = None
    branch: Optional[str] = None
    root_directory: Optional[str] = None
    build_command: Optional[str] = None
    output_directory: Optional[str] = None
    auto_deploy: Optional[str] = None
    environment_variables: Optional[List[Dict[str, str]]] = None
    domain: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: Optional[datetime] = None
