"""
Concurrent, order-preserving region extraction.

Every region is sliced by a bounded thread pool. Workers are tagged with
the input index of their region at submission time and store their result
under that index; the results are then reassembled in input order, so the
output never depends on which worker finished first.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from ..config import DetectionConfig
from ..errors import ExtractionError
from ..models import Region, SliceResult
from .slicer import extract_slice


logger = logging.getLogger(__name__)

SliceFunc = Callable[[float, float, str, str], Path]
ProgressCallback = Callable[[int, int], None]


class RegionExtractor:
    """
    Extracts regions of a PCM file into independent slices.

    Extraction failures never abort the batch; the failed index carries an
    ``ExtractionError`` in its ``SliceResult``.
    """

    def __init__(self, config: Optional[DetectionConfig] = None,
                 slice_func: SliceFunc = extract_slice,
                 output_dir: Optional[str] = None,
                 progress_callback: Optional[ProgressCallback] = None):
        """
        Initialize the extractor.

        Args:
            config: Detection configuration (pool size and timeout)
            slice_func: Slice collaborator called as ``(start, end, source, output_dir)``
            output_dir: Directory for slices (defaults to the configured output dir)
            progress_callback: Called with ``(completed, total)`` after each region
        """
        self.config = config or DetectionConfig()
        self.slice_func = slice_func
        self.output_dir = Path(output_dir) if output_dir else self.config.resolve_output_dir()
        self.progress_callback = progress_callback

    def extract_regions(self, source_path: str, regions: Sequence[Region]) -> List[SliceResult]:
        """
        Slice every region of a source file.

        Args:
            source_path: Path to the PCM file
            regions: Regions to extract

        Returns:
            One ``SliceResult`` per region, in input order
        """
        total = len(regions)
        if total == 0:
            return []

        results: Dict[int, SliceResult] = {}
        lock = threading.Lock()

        def worker(index: int, region: Region) -> None:
            try:
                path = self._slice_within_timeout(index, region, str(source_path))
                result = SliceResult(index, region, path=Path(path))
            except Exception as e:
                logger.error(f"Failed to extract region {index} {region}: {e}")
                error = e if isinstance(e, ExtractionError) else ExtractionError(
                    f"Failed to extract region {index}",
                    details=str(e),
                    context={'index': index, 'start': region.start, 'end': region.end},
                )
                result = SliceResult(index, region, error=error)

            with lock:
                results.setdefault(index, result)
                completed = len(results)
            if self.progress_callback is not None:
                self.progress_callback(completed, total)

        logger.info(
            f"Extracting {total} regions from {source_path} "
            f"with up to {self.config.max_concurrent} workers"
        )

        with ThreadPoolExecutor(max_workers=self.config.max_concurrent,
                                thread_name_prefix="region-extract") as executor:
            for index, region in enumerate(regions):
                executor.submit(worker, index, region)

        with lock:
            snapshot = dict(results)

        ordered = [snapshot[index] for index in sorted(snapshot)]
        failed = sum(1 for r in ordered if not r.ok)
        logger.info(f"Extracted {total - failed} of {total} regions")
        return ordered

    def _slice_within_timeout(self, index: int, region: Region, source_path: str) -> Path:
        """
        Run the slice collaborator for one region under ``extraction_timeout``.

        The deadline starts when the worker picks the region up. A call that
        overruns keeps running on its own thread, but its pool slot is released
        and any file it writes afterwards is deleted.

        Raises:
            ExtractionError: If the call does not finish in time
        """
        timeout = self.config.extraction_timeout
        output_dir = str(self.output_dir)
        if timeout is None:
            return self.slice_func(region.start, region.end, source_path, output_dir)

        state_lock = threading.Lock()
        state: Dict[str, object] = {'abandoned': False}

        def run() -> None:
            try:
                path = self.slice_func(region.start, region.end, source_path, output_dir)
            except Exception as e:
                with state_lock:
                    state['error'] = e
                return
            with state_lock:
                abandoned = state['abandoned']
                state['path'] = path
            if abandoned:
                logger.warning(f"Removing late slice for timed out region {index}: {path}")
                Path(path).unlink(missing_ok=True)

        thread = threading.Thread(target=run, name=f"region-slice-{index}", daemon=True)
        thread.start()
        thread.join(timeout)

        with state_lock:
            if 'error' in state:
                raise state['error']
            if 'path' in state:
                return state['path']
            state['abandoned'] = True

        raise ExtractionError(
            f"Extraction of region {index} timed out",
            details=f"No result after {timeout}s",
            context={'index': index, 'start': region.start, 'end': region.end},
        )


def successful_paths(results: Sequence[SliceResult]) -> List[Path]:
    """
    Paths of the successful slices in input order.

    Failed regions leave no entry, so the list is shorter than the input
    whenever an extraction failed.
    """
    return [r.path for r in results if r.ok]
