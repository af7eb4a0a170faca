"""
Catalog import/export — vinyl media, substrates and cost settings files.

Shops maintain their price lists in spreadsheets, so uploads are CSV by
default (JSON lists are accepted too). Every row is coerced and checked
before it reaches the store; a row that breaks a catalog invariant is
dropped and counted, never half-imported.

Vinyl CSV:      name, rollWidthMm, rollPrintableWidthMm, pricePerLm,
                maxPrintWidthMm, maxCutWidthMm, category  (+ optional id)
Substrate CSV:  name, sizeW, sizeH, pricePerSheet, thicknessMm  (+ optional id)
Costs:          JSON object, or key,value CSV
"""

import csv
import io
import json
import logging
import math
import re

from .errors import CatalogImportError
from .schemas import Substrate, VinylMedia

logger = logging.getLogger(__name__)

VINYL_COLUMNS = [
    "name", "rollWidthMm", "rollPrintableWidthMm", "pricePerLm",
    "maxPrintWidthMm", "maxCutWidthMm", "category",
]
SUBSTRATE_COLUMNS = ["name", "sizeW", "sizeH", "pricePerSheet", "thicknessMm"]

# CSV column -> record field
VINYL_FIELDS = {
    "rollWidthMm": "roll_width_mm",
    "rollPrintableWidthMm": "roll_printable_width_mm",
    "pricePerLm": "price_per_lm",
    "maxPrintWidthMm": "max_print_width_mm",
    "maxCutWidthMm": "max_cut_width_mm",
}
SUBSTRATE_FIELDS = {
    "sizeW": "size_w",
    "sizeH": "size_h",
    "pricePerSheet": "price_per_sheet",
    "thicknessMm": "thickness_mm",
}

_NUMBER_NOISE = re.compile(r"[£$€,\s]")


def to_number(value):
    """Coerce a cell to a finite float; None when blank or not a number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    text = _NUMBER_NOISE.sub("", str(value))
    if not text:
        return None
    try:
        n = float(text)
    except ValueError:
        return None
    return n if math.isfinite(n) else None


def slugify(*parts) -> str:
    text = "-".join(str(p) for p in parts if p not in (None, ""))
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


def _clean_key(key) -> str:
    return str(key or "").strip().lstrip("\ufeff")


def read_rows(text: str, fmt: str = "csv") -> list:
    """Parse an upload into a list of plain dicts (header-keyed for CSV)."""
    text = (text or "").lstrip("\ufeff")
    if fmt == "json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise CatalogImportError(f"Invalid JSON: {e.msg}") from e
        if isinstance(data, dict) and isinstance(data.get("items"), list):
            data = data["items"]
        if not isinstance(data, list) or not all(isinstance(r, dict) for r in data):
            raise CatalogImportError("Expected a JSON list of objects")
        return [{_clean_key(k): v for k, v in row.items()} for row in data]

    if not text.strip():
        return []
    reader = csv.DictReader(io.StringIO(text.strip()))
    rows = []
    for row in reader:
        cleaned = {_clean_key(k): (v.strip() if isinstance(v, str) else v)
                   for k, v in row.items() if k is not None}
        if any(v not in (None, "") for v in cleaned.values()):
            rows.append(cleaned)
    return rows


def _field(row: dict, field: str, column: str):
    """Row value by record field name, falling back to the CSV column name."""
    value = row.get(field)
    if value in (None, ""):
        value = row.get(column)
    return value


def _optional_positive(value):
    n = to_number(value)
    return n if n is not None and n > 0 else None


def coerce_media_row(row: dict):
    """One raw row -> VinylMedia, or None if the row breaks a catalog invariant."""
    name = str(row.get("name") or "").strip()
    if not name:
        return None
    values = {f: _field(row, f, c) for c, f in VINYL_FIELDS.items()}
    roll_width = to_number(values["roll_width_mm"])
    printable = to_number(values["roll_printable_width_mm"])
    price = to_number(values["price_per_lm"])
    if roll_width is None or roll_width <= 0:
        return None
    if printable is None or printable <= 0 or printable > roll_width:
        return None
    if price is None or price <= 0:
        return None

    media_id = str(row.get("id") or "").strip() or slugify(name, f"{roll_width:g}")
    category = str(row.get("category") or "").strip() or None
    return VinylMedia(
        id=media_id,
        name=name,
        roll_width_mm=roll_width,
        roll_printable_width_mm=printable,
        price_per_lm=price,
        max_print_width_mm=_optional_positive(values["max_print_width_mm"]),
        max_cut_width_mm=_optional_positive(values["max_cut_width_mm"]),
        category=category,
    )


def coerce_substrate_row(row: dict):
    """One raw row -> Substrate, or None if the row breaks a catalog invariant."""
    name = str(row.get("name") or "").strip()
    if not name:
        return None
    values = {f: _field(row, f, c) for c, f in SUBSTRATE_FIELDS.items()}
    size_w = to_number(values["size_w"])
    size_h = to_number(values["size_h"])
    price = to_number(values["price_per_sheet"])
    if size_w is None or size_w <= 0 or size_h is None or size_h <= 0:
        return None
    if price is None or price <= 0:
        return None

    substrate_id = str(row.get("id") or "").strip() or slugify(name, f"{size_w:g}x{size_h:g}")
    return Substrate(
        id=substrate_id,
        name=name,
        size_w=size_w,
        size_h=size_h,
        price_per_sheet=price,
        thickness_mm=_optional_positive(values["thickness_mm"]),
    )


def _import(rows: list, coerce, kind: str) -> dict:
    items = []
    seen = set()
    rejected = 0
    duplicates = 0
    for row in rows:
        item = coerce(row)
        if item is None:
            rejected += 1
            continue
        if item.id in seen:
            duplicates += 1
            continue
        seen.add(item.id)
        items.append(item)

    if rejected or duplicates:
        logger.warning("%s import: %d rejected row(s), %d duplicate id(s) skipped",
                       kind, rejected, duplicates)
    logger.info("%s import: %d row(s) accepted", kind, len(items))
    return {"items": items, "rejected": rejected, "duplicates": duplicates}


def import_media(text: str, fmt: str = "csv") -> dict:
    """
    Parse a vinyl media upload.

    Returns:
        {"items": [VinylMedia], "rejected": int, "duplicates": int}
    """
    return _import(read_rows(text, fmt), coerce_media_row, "Vinyl media")


def import_substrates(text: str, fmt: str = "csv") -> dict:
    """Parse a substrate upload; same result shape as import_media()."""
    return _import(read_rows(text, fmt), coerce_substrate_row, "Substrate")


def _csv_cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


def _export(rows: list, header: list) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(["id"] + header)
    for row in rows:
        writer.writerow([_csv_cell(v) for v in row])
    return buf.getvalue()


def export_media_csv(media: list) -> str:
    return _export(
        [[m.id, m.name, m.roll_width_mm, m.roll_printable_width_mm, m.price_per_lm,
          m.max_print_width_mm, m.max_cut_width_mm, m.category] for m in media],
        VINYL_COLUMNS,
    )


def export_substrates_csv(substrates: list) -> str:
    return _export(
        [[s.id, s.name, s.size_w, s.size_h, s.price_per_sheet, s.thickness_mm]
         for s in substrates],
        SUBSTRATE_COLUMNS,
    )


# --- Cost settings ---

def _cost_value(raw: str):
    """Number if it reads as one; a nested JSON map/list if it parses; else text."""
    n = to_number(raw)
    if n is not None:
        return n
    if raw[:1] in ("{", "["):
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            pass
    return raw


def parse_costs_csv(text: str) -> dict:
    """key,value rows; an optional key/value header row is skipped."""
    lines = [line for line in (text or "").lstrip("\ufeff").splitlines() if line.strip()]
    out = {}
    if not lines:
        return out
    first = lines[0].lower()
    start = 1 if ("key" in first or "name" in first) and "value" in first else 0
    for parts in csv.reader(lines[start:]):
        if len(parts) < 2:
            continue
        key = _clean_key(parts[0])
        raw = ",".join(parts[1:]).strip()
        if key:
            out[key] = _cost_value(raw)
    return out


def parse_cost_settings(text: str, content_type: str = "") -> dict:
    """
    Raw cost settings upload -> dict, stored as given and normalized on read.

    JSON when the content type says so or the body opens with '{';
    otherwise key,value CSV.
    """
    body = (text or "").lstrip("\ufeff")
    if "application/json" in (content_type or "") or body.lstrip().startswith("{"):
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError as e:
            raise CatalogImportError(f"Invalid JSON: {e.msg}") from e
        if not isinstance(parsed, dict):
            raise CatalogImportError("Expected a JSON object")
        return {_clean_key(k): v for k, v in parsed.items() if _clean_key(k)}
    return parse_costs_csv(body)
