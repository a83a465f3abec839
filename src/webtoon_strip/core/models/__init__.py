"""
Core Models Package

Small dataclasses describing pages as they move through the conversion
pipeline.

| Model | Meaning |
|-------|---------|
| `PageRaster` | Decoded page image in canonical RGBA mode |
| `PagePlacement` | Where an accepted page sits inside the strip |
| `PageSkip` | A page left out of the strip, and why |
"""

from .pages import ImageFormat, PagePlacement, PageRaster, PageSkip, SkipReason

__all__ = [
    "ImageFormat",
    "PagePlacement",
    "PageRaster",
    "PageSkip",
    "SkipReason",
]
