"""
Region growing shared by the energy and VAD detectors.

Both detectors reduce audio to one activity decision per fixed-duration
step; this module turns that decision sequence into speech regions.
"""

import logging
from typing import Iterable, List, Optional

from ..config import DetectionConfig
from ..models import Region


logger = logging.getLogger(__name__)

# Absorbs float error when comparing accumulated step times against limits
_EPSILON = 1e-9


class RegionGrower:
    """
    Single-pass region growing over per-step activity decisions.

    A region opens on the first active step while closed and closes on the
    next inactive step, or when absorbing one more step would make it longer
    than ``max_region_size``. Closed spans shorter than ``min_region_size``
    are discarded.
    """

    def __init__(self, chunk_duration: float, config: DetectionConfig):
        """
        Initialize the grower.

        Args:
            chunk_duration: Duration of one step in seconds
            config: Detection configuration
        """
        if chunk_duration <= 0:
            raise ValueError(f"chunk_duration must be positive, got {chunk_duration}")
        # A single step must fit inside the longest allowed region
        if chunk_duration > config.max_region_size + _EPSILON:
            raise ValueError(
                f"chunk_duration {chunk_duration:.3f}s exceeds max_region_size "
                f"{config.max_region_size}s"
            )

        self.chunk_duration = chunk_duration
        self.config = config
        self.regions: List[Region] = []
        self._region_start: Optional[float] = None
        self._steps = 0

    @property
    def elapsed_time(self) -> float:
        return self._steps * self.chunk_duration

    @property
    def is_open(self) -> bool:
        return self._region_start is not None

    def feed(self, active: bool) -> Optional[Region]:
        """
        Consume one step.

        Args:
            active: Whether the step holds speech

        Returns:
            The region closed by this step, if one was emitted
        """
        elapsed = self.elapsed_time
        emitted = None

        if self._region_start is not None:
            max_exceeded = (
                elapsed + self.chunk_duration - self._region_start
                > self.config.max_region_size + _EPSILON
            )
            if max_exceeded or not active:
                emitted = self._close(elapsed)
        elif active:
            self._region_start = elapsed

        self._steps += 1
        return emitted

    def feed_all(self, decisions: Iterable[bool]) -> List[Region]:
        """Feed every decision and finish."""
        for active in decisions:
            self.feed(active)
        return self.finish()

    def finish(self) -> List[Region]:
        """
        End the stream.

        An open region is dropped unless ``flush_open_region_at_end`` is set.

        Returns:
            Regions emitted so far, in order
        """
        if self._region_start is not None:
            if self.config.flush_open_region_at_end:
                self._close(self.elapsed_time)
            else:
                logger.debug(
                    f"Dropping region open at end of stream "
                    f"({self._region_start:.3f}s-{self.elapsed_time:.3f}s)"
                )
                self._region_start = None
        return list(self.regions)

    def _close(self, end: float) -> Optional[Region]:
        start = self._region_start
        self._region_start = None

        if end - start + _EPSILON < self.config.min_region_size or end <= start:
            logger.debug(f"Discarding short span {start:.3f}s-{end:.3f}s")
            return None

        region = Region(start, end)
        self.regions.append(region)
        return region
