"""
Built-in catalog — seeded into an empty database on first run.

Cost settings are stored in the same raw (camelCase) shape an uploaded
costs.json uses, so they go through the settings normalizer like any upload.
Prices are GBP, ex VAT.
"""

DEFAULT_COST_SETTINGS = {
    # Machine limits; 0 = no machine-wide cap
    "masterMaxPrintWidthMm": 0,
    "masterMaxCutWidthMm": 0,

    # Margins & overlaps
    "vinylMarginMm": 5,
    "substrateMarginMm": 5,
    "tileOverlapMm": 10,
    "vinylWasteLmPerJob": 1,

    # Costs
    "setupFee": 5.0,
    "cutPerSign": 0.25,
    "appTapePerSqm": 2.0,
    "inkElecPerSqm": 4.0,
    "profitMultiplier": 1.8,

    "finishingUplifts": {
        "IndividuallyCut": 0.10,
        "CutIntoSheets": 0.05,
        "KissCutOnRoll": 0.00,
        "None": 0.00,
    },
    "complexityPerSticker": {"Basic": 0.0, "Standard": 0.0, "Complex": 0.0},

    # Plotter cut options, zero until a shop uploads its own rates
    "plotterPerimeterPerM": 0,
    "plotterCutPerPiece": {
        "None": 0,
        "KissOnRoll": 0,
        "KissOnSheets": 0,
        "CutIndividually": 0,
        "CutAndWeeded": 0,
    },
    "cuttingStyleUplifts": {"Standard": 0, "Intricate": 0},
    "whiteBackingPerSqm": 0,

    # Delivery (legacy flat form, normalized into base fee + bands)
    "deliveryBase": 5,
    "deliveryBands": [
        {"maxSumCm": 100, "surcharge": 0},
        {"maxSumCm": 200, "surcharge": 3},
        {"maxSumCm": 300, "surcharge": 5},
        {"maxSumCm": 400, "surcharge": 8},
    ],

    "vatRatePct": 20,
}

DEFAULT_MEDIA = [
    {
        "id": "mono-print-1370",
        "name": "Monomeric Print 1370",
        "category": "Printed",
        "roll_width_mm": 1370,
        "roll_printable_width_mm": 1340,
        "price_per_lm": 3.5,
        "max_print_width_mm": 1340,
        "max_cut_width_mm": 1340,
    },
    {
        "id": "poly-print-1370",
        "name": "Polymeric Print 1370",
        "category": "Printed",
        "roll_width_mm": 1370,
        "roll_printable_width_mm": 1340,
        "price_per_lm": 5.2,
        "max_print_width_mm": 1340,
        "max_cut_width_mm": 1340,
    },
    {
        "id": "clear-gloss-1370",
        "name": "Clear Gloss 1370",
        "category": "Printed",
        "roll_width_mm": 1370,
        "roll_printable_width_mm": 1340,
        "price_per_lm": 4.2,
        "max_print_width_mm": 1340,
        "max_cut_width_mm": 1340,
    },
    {
        "id": "black-matt-610",
        "name": "Black Matt 610",
        "category": "Solid",
        "roll_width_mm": 610,
        "roll_printable_width_mm": 610,
        "price_per_lm": 3.2,
        "max_cut_width_mm": 610,
    },
    {
        "id": "frosted-610",
        "name": "Frosted 610",
        "category": "Solid",
        "roll_width_mm": 610,
        "roll_printable_width_mm": 610,
        "price_per_lm": 4.1,
        "max_cut_width_mm": 610,
    },
]

DEFAULT_SUBSTRATES = [
    {"id": "foamex-2440x1220-3", "name": "Foamex 3mm 2440x1220", "thickness_mm": 3,
     "size_w": 2440, "size_h": 1220, "price_per_sheet": 18},
    {"id": "foamex-3050x1560-3", "name": "Foamex 3mm 3050x1560", "thickness_mm": 3,
     "size_w": 3050, "size_h": 1560, "price_per_sheet": 32},
    {"id": "acm-3050x2030-3", "name": "ACM 3mm 3050x2030", "thickness_mm": 3,
     "size_w": 3050, "size_h": 2030, "price_per_sheet": 58},
]
