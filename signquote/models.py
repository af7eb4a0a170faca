from sqlalchemy import Column, Integer, String, Float, DateTime, JSON
from datetime import datetime
from .database import Base
import enum


# --- Enums (closed option sets; rate maps are keyed by these) ---

class ProductMode(str, enum.Enum):
    SOLID_COLOUR_CUT_VINYL = "SolidColourCutVinyl"
    PRINT_AND_CUT_VINYL = "PrintAndCutVinyl"
    PRINTED_VINYL_ONLY = "PrintedVinylOnly"
    PRINTED_VINYL_ON_SUBSTRATE = "PrintedVinylOnSubstrate"
    SUBSTRATE_ONLY = "SubstrateOnly"


class Finishing(str, enum.Enum):
    NONE = "None"
    KISS_CUT_ON_ROLL = "KissCutOnRoll"
    CUT_INTO_SHEETS = "CutIntoSheets"
    INDIVIDUALLY_CUT = "IndividuallyCut"


class Complexity(str, enum.Enum):
    BASIC = "Basic"
    STANDARD = "Standard"
    COMPLEX = "Complex"


class Orientation(str, enum.Enum):
    VERTICAL = "Vertical"
    HORIZONTAL = "Horizontal"


class VinylSplitMode(str, enum.Enum):
    AUTO = "auto"
    CUSTOM = "custom"


class PlotterCut(str, enum.Enum):
    NONE = "None"
    KISS_ON_ROLL = "KissOnRoll"
    KISS_ON_SHEETS = "KissOnSheets"
    CUT_INDIVIDUALLY = "CutIndividually"
    CUT_AND_WEEDED = "CutAndWeeded"


class CuttingStyle(str, enum.Enum):
    STANDARD = "Standard"
    INTRICATE = "Intricate"


class DeliveryMode(str, enum.Enum):
    BOXED = "Boxed"
    ON_A_ROLL = "OnARoll"


class DeliveryMeasure(str, enum.Enum):
    LONGEST_SIDE = "LongestSide"
    GIRTH = "Girth"


# --- Mode capability profiles ---
# One row per ProductMode; the pricing engine validates a request against its
# row once, before any costing.

MODE_PROFILES = {
    ProductMode.SOLID_COLOUR_CUT_VINYL: {
        "needs_media": True,
        "needs_substrate": False,
        "finishing_uplift": True,
        "complexity_surcharge": True,
        "hem_eyelets": False,
    },
    ProductMode.PRINT_AND_CUT_VINYL: {
        "needs_media": True,
        "needs_substrate": False,
        "finishing_uplift": True,
        "complexity_surcharge": True,
        "hem_eyelets": True,
    },
    ProductMode.PRINTED_VINYL_ONLY: {
        "needs_media": True,
        "needs_substrate": False,
        "finishing_uplift": True,
        "complexity_surcharge": False,
        "hem_eyelets": False,
    },
    ProductMode.PRINTED_VINYL_ON_SUBSTRATE: {
        "needs_media": True,
        "needs_substrate": True,
        "finishing_uplift": True,
        "complexity_surcharge": False,
        "hem_eyelets": False,
    },
    ProductMode.SUBSTRATE_ONLY: {
        "needs_media": False,
        "needs_substrate": True,
        "finishing_uplift": False,
        "complexity_surcharge": False,
        "hem_eyelets": False,
    },
}


# --- Catalog tables (owned by the catalog store, read as snapshots) ---

class VinylMediaRow(Base):
    """Vinyl roll stock — one row per media item."""
    __tablename__ = "vinyl_media"

    id = Column(Integer, primary_key=True, index=True)
    media_id = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    roll_width_mm = Column(Float, nullable=False)
    roll_printable_width_mm = Column(Float, nullable=False)
    price_per_lm = Column(Float, nullable=False)
    max_print_width_mm = Column(Float, nullable=True)
    max_cut_width_mm = Column(Float, nullable=True)
    category = Column(String, nullable=True)  # 'Solid' | 'Printed' | free text
    position = Column(Integer, default=0)  # upload order
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class SubstrateRow(Base):
    """Rigid sheet stock — one row per sheet size/material."""
    __tablename__ = "substrates"

    id = Column(Integer, primary_key=True, index=True)
    substrate_id = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    size_w = Column(Float, nullable=False)
    size_h = Column(Float, nullable=False)
    price_per_sheet = Column(Float, nullable=False)
    thickness_mm = Column(Float, nullable=True)
    position = Column(Integer, default=0)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class CostSettingsRow(Base):
    """Raw uploaded cost settings — stored as given, normalized on read."""
    __tablename__ = "cost_settings"

    id = Column(Integer, primary_key=True, index=True)
    raw_json = Column(JSON, default=dict)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
