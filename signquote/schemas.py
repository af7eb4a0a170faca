import math
from pydantic import BaseModel, Field, AliasChoices
from typing import Optional, List, Dict
from .models import (
    ProductMode, Finishing, Complexity, Orientation, VinylSplitMode,
    PlotterCut, CuttingStyle, DeliveryMode, DeliveryMeasure,
)


def _alias(*names):
    return Field(validation_alias=AliasChoices(*names))


# --- Canonical pricing configuration (output of the settings normalizer) ---

class DeliveryBand(BaseModel):
    max_cm: float = math.inf
    charge: float = 0.0
    name: str = ""

    class Config:
        frozen = True


class DeliveryRule(BaseModel):
    base_fee: float = 0.0
    measure: DeliveryMeasure = DeliveryMeasure.LONGEST_SIDE
    bands: List[DeliveryBand] = []  # sorted ascending by max_cm

    class Config:
        frozen = True


class Configuration(BaseModel):
    # Machine-wide caps; 0 means no cap
    master_max_print_width_mm: float = 0.0
    master_max_cut_width_mm: float = 0.0

    vinyl_margin_mm: float = 5.0
    substrate_margin_mm: float = 5.0
    tile_overlap_mm: float = 10.0
    vinyl_waste_lm_per_job: float = 1.0

    setup_fee: float = 0.0
    cut_per_sign: float = 0.0
    ink_per_sqm: float = 0.0
    app_tape_per_sqm: float = 0.0
    app_tape_per_lm: float = 0.0
    white_backing_per_sqm: float = 0.0
    white_backing_per_lm: float = 0.0
    hem_eyelets_per_piece: float = 0.0
    plotter_perimeter_per_m: float = 0.0
    profit_multiplier: float = 1.0

    finishing_uplifts: Dict[Finishing, float] = {}
    complexity_per_unit: Dict[Complexity, float] = {}
    plotter_cut_per_piece: Dict[PlotterCut, float] = {}
    plotter_cut_setup: Dict[PlotterCut, float] = {}
    cutting_style_uplifts: Dict[CuttingStyle, float] = {}

    delivery: DeliveryRule = DeliveryRule()
    vat_rate_pct: float = 20.0

    class Config:
        frozen = True


# --- Catalog entries ---

class VinylMedia(BaseModel):
    id: str
    name: str
    roll_width_mm: float = _alias("roll_width_mm", "rollWidthMm")
    roll_printable_width_mm: float = _alias("roll_printable_width_mm", "rollPrintableWidthMm")
    price_per_lm: float = _alias("price_per_lm", "pricePerLm")
    max_print_width_mm: Optional[float] = Field(
        None, validation_alias=AliasChoices("max_print_width_mm", "maxPrintWidthMm"))
    max_cut_width_mm: Optional[float] = Field(
        None, validation_alias=AliasChoices("max_cut_width_mm", "maxCutWidthMm"))
    category: Optional[str] = None

    class Config:
        frozen = True


class Substrate(BaseModel):
    id: str
    name: str
    size_w: float = _alias("size_w", "sizeW")
    size_h: float = _alias("size_h", "sizeH")
    price_per_sheet: float = _alias("price_per_sheet", "pricePerSheet")
    thickness_mm: Optional[float] = Field(
        None, validation_alias=AliasChoices("thickness_mm", "thicknessMm"))

    class Config:
        frozen = True


# --- Engine input ---

class SignRequest(BaseModel):
    mode: ProductMode
    width_mm: float = Field(gt=0, validation_alias=AliasChoices("width_mm", "widthMm"))
    height_mm: float = Field(gt=0, validation_alias=AliasChoices("height_mm", "heightMm"))
    quantity: int = Field(1, ge=1, validation_alias=AliasChoices("quantity", "qty"))

    vinyl_id: Optional[str] = Field(None, validation_alias=AliasChoices("vinyl_id", "vinylId"))
    substrate_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("substrate_id", "substrateId"))

    double_sided: bool = Field(False, validation_alias=AliasChoices("double_sided", "doubleSided"))
    finishing: Finishing = Finishing.NONE
    complexity: Complexity = Complexity.STANDARD
    application_tape: bool = Field(
        False, validation_alias=AliasChoices("application_tape", "applicationTape"))
    white_backing: bool = Field(
        False, validation_alias=AliasChoices("white_backing", "backedWithWhite"))
    hem_eyelets: bool = Field(False, validation_alias=AliasChoices("hem_eyelets", "hemEyelets"))

    # Substrate panel splits (0 = one whole panel)
    panel_splits: int = Field(0, ge=0, le=6, validation_alias=AliasChoices("panel_splits", "panelSplits"))
    panel_orientation: Orientation = Field(
        Orientation.VERTICAL, validation_alias=AliasChoices("panel_orientation", "panelOrientation"))

    # Vinyl split options (roll layout)
    vinyl_split_mode: VinylSplitMode = Field(
        VinylSplitMode.AUTO, validation_alias=AliasChoices("vinyl_split_mode", "vinylSplitMode"))
    vinyl_split_count: int = Field(
        1, ge=1, le=6, validation_alias=AliasChoices("vinyl_split_count", "vinylSplitOverride"))
    vinyl_split_orientation: Orientation = Field(
        Orientation.VERTICAL,
        validation_alias=AliasChoices("vinyl_split_orientation", "vinylSplitOrientation"))

    # Cut options
    plotter_cut: PlotterCut = Field(PlotterCut.NONE, validation_alias=AliasChoices("plotter_cut", "plotterCut"))
    cutting_style: CuttingStyle = Field(
        CuttingStyle.STANDARD, validation_alias=AliasChoices("cutting_style", "cuttingStyle"))

    delivery_mode: DeliveryMode = Field(
        DeliveryMode.BOXED, validation_alias=AliasChoices("delivery_mode", "deliveryMode"))

    class Config:
        frozen = True


# --- Engine output ---

class VinylCostItem(BaseModel):
    media: str
    lm: float
    price_per_lm: float
    cost: float


class SubstrateCostItem(BaseModel):
    material: str
    sheet: str  # e.g. "2440×1220"
    needed_sheets: float
    charged_sheets: float
    price_per_sheet: float
    cost: float


class CostItems(BaseModel):
    vinyl: List[VinylCostItem] = []
    substrate: List[SubstrateCostItem] = []


class PriceBreakdown(BaseModel):
    mode: ProductMode
    quantity: int

    # Money
    materials: float
    ink: float
    setup: float
    cutting: float
    finishing_uplift: float
    pre_delivery: float
    delivery: float
    total: float
    vat: float
    total_inc_vat: float

    # Usage
    vinyl_lm: Optional[float] = None
    vinyl_lm_with_waste: Optional[float] = None
    effective_width_mm: Optional[float] = None
    substrate_sheets_needed: Optional[float] = None
    substrate_sheets_charged: Optional[float] = None
    panel_width_mm: Optional[float] = None
    panel_height_mm: Optional[float] = None
    panels_per_sheet: Optional[int] = None
    sheet_usage_pct: Optional[float] = None
    sheet_waste_pct: Optional[float] = None

    delivery_band: str = ""
    costs: CostItems = CostItems()
    notes: List[str] = []

    class Config:
        frozen = True
