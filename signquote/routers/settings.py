"""
Catalog and cost settings endpoints.

GET|POST /api/settings/vinyl          — vinyl media (CSV, or JSON on request)
GET|POST /api/settings/substrates     — substrate sheets
GET|POST /api/settings/costs          — raw cost settings, stored as uploaded
GET      /api/settings/costs/normalized — canonical Configuration used for pricing

Uploads replace the whole list. GET returns CSV unless ?format=json or
the Accept header asks for JSON.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import Response
from sqlalchemy.orm import Session

from .. import catalog_import, catalog_store
from ..database import get_db
from ..errors import CatalogImportError
from ..schemas import Configuration
from ..settings_normalizer import normalize_settings

router = APIRouter(prefix="/settings", tags=["settings"])


def _wants_json(request: Request, fmt: Optional[str]) -> bool:
    return fmt == "json" or "application/json" in request.headers.get("accept", "")


def _upload_format(request: Request, fmt: Optional[str]) -> str:
    if fmt in ("json", "csv"):
        return fmt
    return "json" if "application/json" in request.headers.get("content-type", "") else "csv"


def _csv_response(text: str, filename: str) -> Response:
    return Response(
        content=text,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


async def _body_text(request: Request) -> str:
    raw = await request.body()
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="Upload must be UTF-8 text")


# --- Vinyl media ---

@router.get("/vinyl")
def get_vinyl(request: Request, format: Optional[str] = Query(None), db: Session = Depends(get_db)):
    media = catalog_store.list_media(db)
    if _wants_json(request, format):
        return [m.model_dump() for m in media]
    return _csv_response(catalog_import.export_media_csv(media), "vinyl.csv")


@router.post("/vinyl")
async def upload_vinyl(request: Request, format: Optional[str] = Query(None), db: Session = Depends(get_db)):
    """Replace the vinyl media list from a CSV or JSON upload."""
    text = await _body_text(request)
    try:
        result = catalog_import.import_media(text, _upload_format(request, format))
    except CatalogImportError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not result["items"]:
        raise HTTPException(status_code=400, detail="No valid vinyl media rows in upload")
    count = catalog_store.replace_media(db, result["items"])
    return {"ok": True, "count": count, "rejected": result["rejected"],
            "duplicates": result["duplicates"]}


# --- Substrates ---

@router.get("/substrates")
def get_substrates(request: Request, format: Optional[str] = Query(None), db: Session = Depends(get_db)):
    substrates = catalog_store.list_substrates(db)
    if _wants_json(request, format):
        return [s.model_dump() for s in substrates]
    return _csv_response(catalog_import.export_substrates_csv(substrates), "substrates.csv")


@router.post("/substrates")
async def upload_substrates(request: Request, format: Optional[str] = Query(None),
                            db: Session = Depends(get_db)):
    """Replace the substrate list from a CSV or JSON upload."""
    text = await _body_text(request)
    try:
        result = catalog_import.import_substrates(text, _upload_format(request, format))
    except CatalogImportError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not result["items"]:
        raise HTTPException(status_code=400, detail="No valid substrate rows in upload")
    count = catalog_store.replace_substrates(db, result["items"])
    return {"ok": True, "count": count, "rejected": result["rejected"],
            "duplicates": result["duplicates"]}


# --- Cost settings ---

@router.get("/costs")
def get_costs(db: Session = Depends(get_db)):
    return catalog_store.get_cost_settings(db)


@router.post("/costs")
async def upload_costs(request: Request, db: Session = Depends(get_db)):
    """Store a JSON object or key,value CSV as the shop's cost settings."""
    text = await _body_text(request)
    try:
        raw = catalog_import.parse_cost_settings(text, request.headers.get("content-type", ""))
    except CatalogImportError as e:
        raise HTTPException(status_code=400, detail=str(e))
    count = catalog_store.replace_cost_settings(db, raw)
    return {"ok": True, "count": count}


@router.get("/costs/normalized", response_model=Configuration)
def get_normalized_costs(db: Session = Depends(get_db)):
    return normalize_settings(catalog_store.get_cost_settings(db))
