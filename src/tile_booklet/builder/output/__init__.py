"""
Module: builder.output

Purpose:
    Page rendering and PDF output for the booklet builder.

Key Functions:
    - render_pages(): Compose one image per page plan
    - assemble_pdf(): Concatenate page images into a PDF
    - compress_pdf(): Optional Ghostscript compression pass

Dependencies:
    - PIL: Page composition
    - reportlab: PDF generation
    - Ghostscript: PDF compression

Used By:
    - builder.controller: Pipeline orchestration
"""

from .montage import compose_page, render_page, render_pages, clear_rendered_pages
from .renderer import assemble_pdf, AssemblyError
from .compressor import compress_pdf, find_ghostscript, COMPRESSION_TIERS

__all__ = [
    "compose_page",
    "render_page",
    "render_pages",
    "clear_rendered_pages",
    "assemble_pdf",
    "AssemblyError",
    "compress_pdf",
    "find_ghostscript",
    "COMPRESSION_TIERS",
]
