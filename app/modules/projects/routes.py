from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.projects.schemas import ProjectResponse
from app.modules.projects.service import ProjectService
from app.core.dependencies import get_current_user_id
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/projects", tags=["projects"])


def get_project_service(supabase: Client = Depends(get_supabase)) -> ProjectService:
    return ProjectService(supabase)


@router.get("", response_model=List[ProjectResponse])
async def list_projects(
    limit: int = 20,
    offset: int = 0,
    user_data: Dict = Depends(get_current_user_id),
    service: ProjectService = Depends(get_project_service)
):
    """List projects owned by the current user"""
    return service.list_projects(user_data["id"], limit=limit, offset=offset)
