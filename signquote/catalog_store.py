"""
Catalog store — vinyl media, substrates and raw cost settings in the database.

The pricing engine never reads the database itself; routers take a
snapshot (load_snapshot) and hand plain records to it. Replacing a list
is all-or-nothing: the old rows are deleted and the new ones added in one
transaction.
"""

import copy
import logging
from typing import List

from sqlalchemy.orm import Session

from . import models
from .defaults import DEFAULT_COST_SETTINGS, DEFAULT_MEDIA, DEFAULT_SUBSTRATES
from .schemas import Substrate, VinylMedia
from .settings_normalizer import normalize_settings

logger = logging.getLogger(__name__)


def _media_from_row(row: models.VinylMediaRow) -> VinylMedia:
    return VinylMedia(
        id=row.media_id,
        name=row.name,
        roll_width_mm=row.roll_width_mm,
        roll_printable_width_mm=row.roll_printable_width_mm,
        price_per_lm=row.price_per_lm,
        max_print_width_mm=row.max_print_width_mm,
        max_cut_width_mm=row.max_cut_width_mm,
        category=row.category,
    )


def _substrate_from_row(row: models.SubstrateRow) -> Substrate:
    return Substrate(
        id=row.substrate_id,
        name=row.name,
        size_w=row.size_w,
        size_h=row.size_h,
        price_per_sheet=row.price_per_sheet,
        thickness_mm=row.thickness_mm,
    )


def list_media(db: Session) -> List[VinylMedia]:
    rows = db.query(models.VinylMediaRow).order_by(models.VinylMediaRow.position).all()
    return [_media_from_row(r) for r in rows]


def list_substrates(db: Session) -> List[Substrate]:
    rows = db.query(models.SubstrateRow).order_by(models.SubstrateRow.position).all()
    return [_substrate_from_row(r) for r in rows]


def replace_media(db: Session, items: List[VinylMedia]) -> int:
    """Swap the whole media list for `items`, keeping upload order."""
    try:
        db.query(models.VinylMediaRow).delete()
        for position, m in enumerate(items):
            db.add(models.VinylMediaRow(
                media_id=m.id,
                name=m.name,
                roll_width_mm=m.roll_width_mm,
                roll_printable_width_mm=m.roll_printable_width_mm,
                price_per_lm=m.price_per_lm,
                max_print_width_mm=m.max_print_width_mm,
                max_cut_width_mm=m.max_cut_width_mm,
                category=m.category,
                position=position,
            ))
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Vinyl media replaced: %d item(s)", len(items))
    return len(items)


def replace_substrates(db: Session, items: List[Substrate]) -> int:
    """Swap the whole substrate list for `items`, keeping upload order."""
    try:
        db.query(models.SubstrateRow).delete()
        for position, s in enumerate(items):
            db.add(models.SubstrateRow(
                substrate_id=s.id,
                name=s.name,
                size_w=s.size_w,
                size_h=s.size_h,
                price_per_sheet=s.price_per_sheet,
                thickness_mm=s.thickness_mm,
                position=position,
            ))
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Substrates replaced: %d item(s)", len(items))
    return len(items)


def get_cost_settings(db: Session) -> dict:
    """Raw stored cost settings; the built-in defaults until a shop uploads its own."""
    row = db.query(models.CostSettingsRow).first()
    if row is None or row.raw_json is None:
        return copy.deepcopy(DEFAULT_COST_SETTINGS)
    return dict(row.raw_json)


def replace_cost_settings(db: Session, raw: dict) -> int:
    """Store an uploaded settings object as given. It replaces, not merges."""
    try:
        row = db.query(models.CostSettingsRow).first()
        if row is None:
            row = models.CostSettingsRow(raw_json=dict(raw))
            db.add(row)
        else:
            row.raw_json = dict(raw)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Cost settings replaced: %d key(s)", len(raw))
    return len(raw)


def load_snapshot(db: Session) -> dict:
    """
    Everything one pricing call needs, read once.

    Returns:
        {"media": [VinylMedia], "substrates": [Substrate], "config": Configuration}
    """
    return {
        "media": list_media(db),
        "substrates": list_substrates(db),
        "config": normalize_settings(get_cost_settings(db)),
    }


def seed_defaults(db: Session) -> dict:
    """Fill empty tables with the built-in catalog. Existing data is left alone."""
    seeded = {"media": 0, "substrates": 0, "costs": 0}
    if db.query(models.VinylMediaRow).count() == 0:
        seeded["media"] = replace_media(db, [VinylMedia(**m) for m in DEFAULT_MEDIA])
    if db.query(models.SubstrateRow).count() == 0:
        seeded["substrates"] = replace_substrates(db, [Substrate(**s) for s in DEFAULT_SUBSTRATES])
    if db.query(models.CostSettingsRow).count() == 0:
        seeded["costs"] = replace_cost_settings(db, copy.deepcopy(DEFAULT_COST_SETTINGS))
    return seeded
