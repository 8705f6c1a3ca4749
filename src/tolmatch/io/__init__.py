"""
IO helpers for loading image assets consumed by matching routines.
"""

from .image_loader import load_rgba, to_rgba
from .template_loader import list_template_files, load_templates, parse_template_name
from .visualize import draw_matches

__all__ = ["draw_matches", "list_template_files", "load_rgba", "load_templates", "parse_template_name", "to_rgba"]
