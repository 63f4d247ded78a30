"""
Module: core

Purpose:
    Shared data models and the external tool interface used by both the
    extractor and the builder.
"""

from .models import CropBox, grid_boxes, SourceImage, Fragment, Placeholder, PLACEHOLDER
from .tools import ToolResult, ToolError, invoke, run_command

__all__ = [
    "CropBox",
    "grid_boxes",
    "SourceImage",
    "Fragment",
    "Placeholder",
    "PLACEHOLDER",
    "ToolResult",
    "ToolError",
    "invoke",
    "run_command",
]
