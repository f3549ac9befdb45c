#!/usr/bin/env python3
"""
Elbow-angle rep counter: live webcam (default) or a video file.
Usage:
  Live:  python run.py [--camera 0] [--model models/pose.onnx]
  Video: python run.py --video path/to/video.mp4 [--no-display]
Settings can also come from .env (REPCOUNT_MODEL_PATH, REPCOUNT_CAMERA, REPCOUNT_LOG_LEVEL).
"""
from __future__ import annotations

import argparse
import logging
import os
import signal
import sys
from pathlib import Path

from dotenv import load_dotenv

from repcount.io_stream import CaptureError
from repcount.live import FRAME_DELAY_MS, CancellationToken, run_live_pipeline
from repcount.pose import DEFAULT_MODEL_PATH, PoseModelError

logger = logging.getLogger("repcount")


def _load_env() -> None:
    load_dotenv()
    load_dotenv(Path(__file__).resolve().parent / ".env")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Count reps from elbow angle with an ONNX pose model")
    ap.add_argument(
        "--model", type=str,
        default=os.getenv("REPCOUNT_MODEL_PATH", DEFAULT_MODEL_PATH),
        help="Path to the ONNX pose model (default models/pose.onnx)",
    )
    ap.add_argument(
        "--camera", type=int,
        default=int(os.getenv("REPCOUNT_CAMERA", "0")),
        help="Camera device id (default 0)",
    )
    ap.add_argument("--video", type=str, default=None, help="Read frames from a video file instead of the camera")
    ap.add_argument(
        "--frame-delay-ms", type=int, default=FRAME_DELAY_MS,
        help=f"Pause after each frame in ms (default {FRAME_DELAY_MS})",
    )
    ap.add_argument("--no-display", action="store_true", help="Run without a window (log status instead)")
    ap.add_argument(
        "--log-level", type=str,
        default=os.getenv("REPCOUNT_LOG_LEVEL", "INFO"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return ap


def main(argv: list[str] | None = None) -> int:
    _load_env()
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.video and not os.path.isfile(args.video):
        logger.error("video file not found: %s", args.video)
        return 1

    token = CancellationToken()
    previous_handler = signal.signal(signal.SIGINT, lambda signum, frame: token.cancel())

    try:
        reps = run_live_pipeline(
            model_path=args.model,
            camera_id=args.camera,
            video_path=args.video,
            frame_delay_ms=args.frame_delay_ms,
            display=not args.no_display,
            token=token,
        )
    except (PoseModelError, CaptureError, FileNotFoundError) as exc:
        logger.error("startup failed: %s", exc)
        return 1
    except Exception:
        logger.exception("pipeline failed")
        return 1
    finally:
        signal.signal(signal.SIGINT, previous_handler)
    logger.info("done. Reps: %s", reps)
    return 0


if __name__ == "__main__":
    sys.exit(main())
