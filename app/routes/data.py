"""Export and import routes."""
from fastapi import APIRouter, Depends, Request, UploadFile
from fastapi.responses import JSONResponse

from app.core.database import Database, get_database
from app.models import ImportResult
from app.planner import transfer

router = APIRouter(prefix="/data", tags=["data"])


def _download(data: dict, filename: str) -> JSONResponse:
    return JSONResponse(data, headers={"Content-Disposition": f'attachment; filename="{filename}"'})


@router.get("/export")
async def export_all(db: Database = Depends(get_database)):
    """Full backup of every party with its guests and timeline tasks."""
    return _download(transfer.export_all(db), transfer.backup_filename())


@router.get("/export/{party_id}")
async def export_party(party_id: int, db: Database = Depends(get_database)):
    data = transfer.export_party(db, party_id)
    return _download(data, transfer.party_filename(data["party"]["name"]))


@router.post("/export/file")
async def export_all_to_file(db: Database = Depends(get_database)):
    """Write a full backup into the configured export directory."""
    return {"path": str(transfer.export_all_to_file(db))}


@router.post("/export/{party_id}/file")
async def export_party_to_file(party_id: int, db: Database = Depends(get_database)):
    return {"path": str(transfer.export_party_to_file(db, party_id))}


@router.post("/import", response_model=ImportResult)
async def import_json(request: Request, db: Database = Depends(get_database)):
    """
    Import a single-party export or a full backup from the request body.

    Always answers 200; ``success`` tells whether anything was imported.
    """
    body = await request.body()
    return transfer.import_from_json(db, body.decode("utf-8", errors="replace"))


@router.post("/import/file", response_model=ImportResult)
async def import_file(file: UploadFile, db: Database = Depends(get_database)):
    content = await file.read()
    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError:
        return ImportResult(success=False, message="Failed to read file")
    return transfer.import_from_json(db, text)
