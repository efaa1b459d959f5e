"""
Core dependencies shared by route modules
"""

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.database.supabase_client import get_supabase
from app.modules.auth.service import AuthService
from app.modules.wizard import registry
from app.modules.wizard.controller import WizardController
from supabase import Client
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    token = credentials.credentials
    user_data = auth_service.get_current_user(token)
    return user_data


def get_wizard(wizard_id: str) -> WizardController:
    """Resolve an open wizard from the path, 404 when it is unknown or already closed"""
    controller = registry.get(wizard_id)
    if controller is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Wizard not found"
        )
    return controller
