"""Public registration endpoint"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse

from registration_intake.models.registration import RegistrationResponse
from registration_intake.services import (
    get_export_materializer,
    get_registration_store,
)
from registration_intake.services.export_service import ExportMaterializer
from registration_intake.services.registration_store import RegistrationStore

router = APIRouter(tags=["Registration"])

logger = logging.getLogger(__name__)


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=RegistrationResponse,
    summary="Submit a registration",
)
async def register(
    fields: Dict[str, Any] = Body(
        ...,
        description="Submitted attributes, stored verbatim",
        examples=[{"username": "alice", "email": "a@x.com", "team": "red"}],
    ),
    store: RegistrationStore = Depends(get_registration_store),
    materializer: ExportMaterializer = Depends(get_export_materializer),
):
    """
    Store a submission and refresh the export files.

    The response reflects only whether the record was stored; a failed
    export refresh is logged and retried by the next refresh.
    """
    try:
        record = store.append(fields)
    except Exception as e:
        logger.error(f"Registration error: {type(e).__name__}: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to save registration"},
        )

    materializer.refresh()

    return RegistrationResponse(message="Registration successful", id=record.id)
