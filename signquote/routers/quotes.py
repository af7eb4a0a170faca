"""
Quote endpoints.

POST /api/quotes/price — price one sign, returns PriceBreakdown
POST /api/quotes/pdf   — same request, returns the quote as application/pdf

Both read one catalog snapshot per call; the engine itself never touches
the database.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.orm import Session

from .. import catalog_store
from ..database import get_db
from ..errors import QuoteValidationError
from ..pdf_generator import generate_quote_pdf
from ..pricing_engine import PricingEngine
from ..schemas import PriceBreakdown, SignRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/quotes", tags=["quotes"])

engine = PricingEngine()


def _price(request: SignRequest, db: Session) -> PriceBreakdown:
    snapshot = catalog_store.load_snapshot(db)
    try:
        return engine.build_price_breakdown(
            request, snapshot["media"], snapshot["substrates"], snapshot["config"],
        )
    except QuoteValidationError as e:
        logger.info("Quote rejected (%s): %s", type(e).__name__, e)
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/price", response_model=PriceBreakdown)
def price_sign(request: SignRequest, db: Session = Depends(get_db)):
    """Price one sign request against the current catalog."""
    return _price(request, db)


@router.post("/pdf")
def quote_pdf(request: SignRequest, db: Session = Depends(get_db)):
    """
    Price the request and render the quote document.

    Returns: application/pdf
    """
    breakdown = _price(request, db)
    pdf_bytes = generate_quote_pdf(breakdown, request)
    filename = f"quote-{request.mode.value}-{request.width_mm:g}x{request.height_mm:g}.pdf"
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
