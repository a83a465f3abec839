"""
Module: converter.timing

Purpose:
    Timing instrumentation for the conversion pipeline, to see whether
    a slow archive is spending its time decoding, compositing or
    encoding.

Key Classes:
    - TimingLog: Collects archive-level and page-level timing metrics

Key Functions:
    - timed_phase: Context manager for timing code blocks

Dependencies:
    - time (std)
    - contextlib (std)
    - dataclasses (std)

Used By:
    - converter.pipeline: Main conversion orchestrator
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Generator, List, Optional


@dataclass
class TimingLog:
    """
    Timing metrics for one conversion.

    Attributes:
        archive_timings: Dict of phase_name -> duration_seconds
        page_timings: Dict of entry_name -> {phase_name -> duration_seconds}

    Example:
        >>> log = TimingLog()
        >>> log.log_archive("open_archive", 0.004)
        >>> log.log_page("001.jpg", "decode", 0.031)
        >>> print(log.summary())
    """
    archive_timings: Dict[str, float] = field(default_factory=dict)
    page_timings: Dict[str, Dict[str, float]] = field(default_factory=dict)

    def log_archive(self, phase: str, duration: float) -> None:
        """Log an archive-level timing metric."""
        self.archive_timings[phase] = duration

    def log_page(self, name: str, phase: str, duration: float) -> None:
        """Log a page-level timing metric."""
        if name not in self.page_timings:
            self.page_timings[name] = {}
        self.page_timings[name][phase] = duration

    def get_page_total(self, name: str) -> float:
        """Get total time spent on a page."""
        if name not in self.page_timings:
            return 0.0
        return sum(self.page_timings[name].values())

    def get_phase_totals(self) -> Dict[str, float]:
        """Sum each page-level phase across all pages."""
        totals: Dict[str, float] = {}
        for phases in self.page_timings.values():
            for phase, duration in phases.items():
                totals[phase] = totals.get(phase, 0.0) + duration
        return totals

    def get_slowest_pages(self, n: int = 3) -> List[tuple]:
        """Get the N slowest pages as (name, total_seconds)."""
        results = [(name, sum(phases.values())) for name, phases in self.page_timings.items()]
        results.sort(key=lambda x: x[1], reverse=True)
        return results[:n]

    @property
    def total(self) -> float:
        """Archive-level time plus all page-level time."""
        return sum(self.archive_timings.values()) + sum(self.get_phase_totals().values())

    def summary(self) -> str:
        """Generate human-readable timing summary."""
        lines = ["", "=== Conversion Timing Summary ==="]

        if self.archive_timings:
            lines.append("Archive-level:")
            for phase, duration in sorted(self.archive_timings.items()):
                lines.append(f"  {phase:25s} {duration:.3f}s")

        totals = self.get_phase_totals()
        if totals:
            lines.append("")
            lines.append(f"Page-level totals ({len(self.page_timings)} pages):")
            for phase, duration in sorted(totals.items(), key=lambda x: -x[1]):
                lines.append(f"  {phase:25s} {duration:.3f}s")

        slowest = self.get_slowest_pages(3)
        if slowest:
            lines.append("")
            lines.append("Slowest pages:")
            for name, total in slowest:
                lines.append(f"  {name}: {total:.3f}s")

        lines.append("")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Export timing data as dictionary."""
        return {
            "archive_timings": self.archive_timings,
            "page_timings": self.page_timings,
            "phase_totals": self.get_phase_totals(),
            "slowest_pages": [
                {"name": name, "total": total}
                for name, total in self.get_slowest_pages(5)
            ],
        }


@contextmanager
def timed_phase(
    log: TimingLog,
    phase: str,
    page: Optional[str] = None,
) -> Generator[None, None, None]:
    """
    Time a block and record it in the log, even if the block raises.

    Args:
        log: TimingLog to record into
        phase: Phase name
        page: Entry name for page-level phases, None for archive-level

    Example:
        >>> with timed_phase(log, "decode", page="001.jpg"):
        ...     raster = decode_page(name, data)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        if page is None:
            log.log_archive(phase, duration)
        else:
            log.log_page(page, phase, duration)
