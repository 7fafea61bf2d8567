"""Shared service instances for the registration intake service"""

import logging
import threading

from registration_intake.config import config
from registration_intake.services.export_service import ExportMaterializer
from registration_intake.services.registration_store import RegistrationStore

_services_lock = threading.Lock()
_registration_store = None
_export_materializer = None

logger = logging.getLogger(__name__)


def get_registration_store() -> RegistrationStore:
    """Get or create the singleton store rooted at config["data_dir"]"""
    global _registration_store
    if _registration_store is None:
        with _services_lock:
            if _registration_store is None:
                _registration_store = RegistrationStore(config["data_dir"])
                logger.info(f"Using data directory {config['data_dir']}")
    return _registration_store


def get_export_materializer() -> ExportMaterializer:
    """Get or create the singleton materializer over the shared store"""
    global _export_materializer
    if _export_materializer is None:
        store = get_registration_store()
        with _services_lock:
            if _export_materializer is None:
                _export_materializer = ExportMaterializer(store)
    return _export_materializer
