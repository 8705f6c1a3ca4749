"""
Tolerance-based exhaustive template matching for fixed on-screen elements.
"""

from .config import MatchSettings
from .exceptions import ConfigurationError, ImageDecodeError, MatchCancelledError, TolmatchError
from .matching.engine import TemplateSearchEngine, similarity_map
from .matching.orchestrator import TemplateMatchOrchestrator, get_template_matches
from .models import MatchOutputSet, MatchResult, SearchZone, Template, TemplateFailure, TemplateParams

__all__ = [
    "ConfigurationError",
    "ImageDecodeError",
    "MatchCancelledError",
    "MatchOutputSet",
    "MatchResult",
    "MatchSettings",
    "SearchZone",
    "Template",
    "TemplateFailure",
    "TemplateMatchOrchestrator",
    "TemplateParams",
    "TemplateSearchEngine",
    "TolmatchError",
    "get_template_matches",
    "similarity_map",
]
