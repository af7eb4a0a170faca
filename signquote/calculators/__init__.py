"""
Deterministic sign costing — layout planners and one calculator per product mode.

Pure Python math, no I/O. Given a sign request, the catalog entries it
selected and a canonical Configuration, produce exact roll and sheet usage
and the mode-specific part of the cost.
"""
