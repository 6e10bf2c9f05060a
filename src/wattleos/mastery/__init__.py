"""
Mastery Module

Per-student mastery tracking, status summaries and the class heatmap.
"""

from .aggregator import MasterySummary, PersistedMastery, SynthesizedMastery
from .heatmap import ClassHeatmap, ClassHeatmapRow
from .service import MasteryService, StatusChange

__all__ = [
    "MasteryService",
    "StatusChange",
    "MasterySummary",
    "PersistedMastery",
    "SynthesizedMastery",
    "ClassHeatmap",
    "ClassHeatmapRow",
]
