"""
webtoon-strip Core Package

Shared data models used by the converter and the HTTP server.

**DESIGN NOTES:**

1. **Pages are owned by one conversion**
   - A PageRaster is created by the decoder and handed to exactly one
     StripCompositor; nothing is cached across conversions.

2. **Skips are data, not exceptions**
   - Per-page outcomes (decode failure, width mismatch) are recorded as
     PageSkip values on the result instead of aborting the conversion.
"""

from .models import ImageFormat, PagePlacement, PageRaster, PageSkip, SkipReason

__all__ = [
    "ImageFormat",
    "PagePlacement",
    "PageRaster",
    "PageSkip",
    "SkipReason",
]
