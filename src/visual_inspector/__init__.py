"""Visual inspector: live HTML element selection with CSS write-back."""
from __future__ import annotations

__version__ = "1.0.0"

from visual_inspector.config import InspectorConfig
from visual_inspector.editor import ApplyResult, apply_css_change, get_styles_for_selector
from visual_inspector.session import SessionCoordinator
from visual_inspector.stylesheet import CssChange

__all__ = [
    "__version__",
    "InspectorConfig",
    "SessionCoordinator",
    "CssChange",
    "ApplyResult",
    "apply_css_change",
    "get_styles_for_selector",
]
