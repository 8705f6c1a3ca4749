"""
Matching subpackage exposes the tolerance search engine and orchestrator.
"""

from .comparator import mismatch_mask, pixels_match
from .engine import TemplateSearchEngine, candidate_origins, similarity_map, validate_zone
from .orchestrator import TemplateMatchOrchestrator, get_template_matches
from .scorer import evaluate_window, mismatch_budget

__all__ = [
    "TemplateMatchOrchestrator",
    "TemplateSearchEngine",
    "candidate_origins",
    "evaluate_window",
    "get_template_matches",
    "mismatch_budget",
    "mismatch_mask",
    "pixels_match",
    "similarity_map",
    "validate_zone",
]
