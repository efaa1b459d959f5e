"""Thread-safe registry of wizard_id -> WizardController for in-progress wizards."""
import threading
import uuid
import logging
from typing import Optional

from app.config import settings
from app.modules.wizard.controller import WizardController

logger = logging.getLogger(__name__)
_lock = threading.Lock()
_registry: dict[str, WizardController] = {}


class RegistryFullError(Exception):
    pass


def create() -> WizardController:
    wizard_id = str(uuid.uuid4())
    controller = WizardController(wizard_id)
    with _lock:
        if len(_registry) >= settings.wizard_max_sessions:
            raise RegistryFullError(f"Too many open wizards ({settings.wizard_max_sessions})")
        _registry[wizard_id] = controller
    logger.debug(f"Registered wizard {wizard_id}")
    return controller


def get(wizard_id: str) -> Optional[WizardController]:
    with _lock:
        return _registry.get(wizard_id)


def remove(wizard_id: str) -> bool:
    """Tear down and forget a wizard. Returns True if it existed."""
    with _lock:
        controller = _registry.pop(wizard_id, None)
    if controller is None:
        return False
    controller.close()
    logger.debug(f"Unregistered wizard {wizard_id}")
    return True


def clear() -> None:
    with _lock:
        controllers = list(_registry.values())
        _registry.clear()
    for controller in controllers:
        controller.close()
