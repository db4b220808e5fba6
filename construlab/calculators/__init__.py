"""
Deterministic calculation engine.

Pure Python math. Given a footprint or box dimensions and a set of
per-m³ ratios, produce concrete volume and material quantities.
"""
