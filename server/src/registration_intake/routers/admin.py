"""Admin endpoints for reading and exporting registrations (unauthenticated)"""

import logging

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import FileResponse, JSONResponse

from registration_intake.services import (
    get_export_materializer,
    get_registration_store,
)
from registration_intake.services.export_service import (
    CSV_FILENAME,
    XLSX_FILENAME,
    ExportMaterializer,
    render_csv,
)
from registration_intake.services.registration_store import RegistrationStore

router = APIRouter(prefix="/admin", tags=["Admin"])

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.get("/registrations", summary="List all registrations")
async def list_registrations(
    store: RegistrationStore = Depends(get_registration_store),
):
    """Return the full collection as flat documents in arrival order"""
    try:
        records = store.load()
    except Exception as e:
        logger.error(f"Error fetching registrations: {type(e).__name__}: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to fetch registrations"},
        )

    return [record.to_document() for record in records]


@router.get("/export-csv", summary="Download registrations as CSV")
async def export_csv(store: RegistrationStore = Depends(get_registration_store)):
    try:
        content = render_csv(store.load())
    except Exception as e:
        logger.error(f"Error exporting CSV: {type(e).__name__}: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to export registrations"},
        )

    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={CSV_FILENAME}"},
    )


@router.get("/export-xlsx", summary="Download registrations as an Excel workbook")
async def export_xlsx(
    materializer: ExportMaterializer = Depends(get_export_materializer),
):
    """Regenerate the workbook, then serve it"""
    if not materializer.refresh() or not materializer.xlsx_file.exists():
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to export registrations"},
        )

    return FileResponse(
        materializer.xlsx_file, media_type=XLSX_MEDIA_TYPE, filename=XLSX_FILENAME
    )
