"""
Main entry point for the voice slicer.

Complete pipeline from an input recording to one audio slice per
detected speech region.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import Config, DetectionConfig
from .errors import ErrorHandler, VoiceSlicerError
from .audio.processor import VoiceProcessor


def setup_logging(verbose: bool = False):
    """Set up logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


def build_config(args: argparse.Namespace) -> DetectionConfig:
    """Translate command line arguments into a detection configuration."""
    return DetectionConfig(
        max_region_size=args.max_region,
        min_region_size=args.min_region,
        vad_frame_duration_ms=args.frame_ms,
        vad_mode=args.vad_mode,
        max_concurrent=args.workers,
        extraction_timeout=args.timeout,
        flush_open_region_at_end=args.flush_tail,
        output_dir=args.output,
    )


def run_pipeline(input_file: Path, config: DetectionConfig, vad_mode: bool,
                 error_handler: ErrorHandler,
                 processor: Optional[VoiceProcessor] = None) -> int:
    """
    Detect and extract the speech regions of one file.

    Args:
        input_file: Recording to process
        config: Detection configuration
        vad_mode: Use the VAD detector instead of the energy detector
        error_handler: Collects errors for the final summary
        processor: Processor to use (built from ``config`` if omitted)

    Returns:
        Exit code: 0 on success, 1 if detection failed, 2 if some slices failed
    """
    logger = logging.getLogger(__name__)
    processor = processor or VoiceProcessor(config)

    with processor:
        try:
            processor.open(str(input_file), vad_mode=vad_mode)
            regions = processor.regions()
        except VoiceSlicerError as e:
            error_handler.add_exception(e)
            return 1
        except ValueError as e:
            logger.error(f"Invalid configuration for {input_file}: {e}")
            print(f"Invalid option: {e}", file=sys.stderr)
            return 1

        logger.info(f"Detected {len(regions)} speech regions")
        for i, region in enumerate(regions):
            print(f"region {i:04d}: {region.start:9.3f}s - {region.end:9.3f}s")

        def report_progress(completed: int, total: int) -> None:
            logger.debug(f"Extracted {completed}/{total}")

        results = processor.extract(regions, progress_callback=report_progress)

    for result in results:
        if result.ok:
            print(f"slice  {result.index:04d}: {result.path}")
        else:
            error_handler.add_exception(result.error)

    return 2 if error_handler.has_errors() else 0


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    defaults = DetectionConfig()
    parser = argparse.ArgumentParser(
        description="Split a recording into speech regions and extract each as a WAV slice",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s interview.wav
  %(prog)s lecture.mp3 --vad --vad-mode 2 -o slices/
  %(prog)s podcast.flac --max-region 10 --workers 4 --flush-tail
        """
    )

    parser.add_argument(
        "input_file",
        type=Path,
        help="Path to the recording to split"
    )

    parser.add_argument(
        "-o", "--output",
        type=Path,
        default=None,
        help=f"Directory for the extracted slices (default: {Config.OUTPUT_DIR})"
    )

    parser.add_argument(
        "--vad",
        action="store_true",
        help="Detect regions with WebRTC VAD instead of chunk energy"
    )

    parser.add_argument(
        "--vad-mode",
        type=int,
        default=defaults.vad_mode,
        choices=range(4),
        help="WebRTC VAD aggressiveness, 0-3"
    )

    parser.add_argument(
        "--frame-ms",
        type=int,
        default=defaults.vad_frame_duration_ms,
        choices=[10, 20, 30],
        help="VAD frame duration in milliseconds"
    )

    parser.add_argument(
        "--min-region",
        type=float,
        default=defaults.min_region_size,
        help="Minimum region length in seconds"
    )

    parser.add_argument(
        "--max-region",
        type=float,
        default=defaults.max_region_size,
        help="Maximum region length in seconds"
    )

    parser.add_argument(
        "--workers",
        type=int,
        default=defaults.max_concurrent,
        help="Maximum number of concurrent extractions"
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Give up on extractions still running after this many seconds"
    )

    parser.add_argument(
        "--flush-tail",
        action="store_true",
        help="Keep a region still open when the recording ends"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = build_config(args)
    except ValueError as e:
        print(f"Invalid option: {e}", file=sys.stderr)
        return 1

    error_handler = ErrorHandler()
    exit_code = run_pipeline(args.input_file, config, args.vad, error_handler)

    summary = error_handler.get_error_summary()
    if summary['error_count']:
        print(f"{summary['error_count']} error(s):", file=sys.stderr)
        for error in summary['errors']:
            print(f"  [{error['code']}] {error['message']}", file=sys.stderr)
            for action in error['suggested_actions']:
                print(f"      - {action}", file=sys.stderr)

    return exit_code


if __name__ == "__main__":
    sys.exit(main())
