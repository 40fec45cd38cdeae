"""NARA command-line interface with subcommands.

Usage:
    nara-cli hash <video>
    nara-cli assess <video> [--interval 0.8] [--format jpeg] [--quality 0.8] [-o result.json]
"""

import argparse
import asyncio
import json
import logging
import mimetypes
import shutil
import sys
from pathlib import Path
from uuid import uuid4

from nara.api.deps import build_pipeline
from nara.config import settings
from nara.errors import NaraError
from nara.models.media import ExtractionSettings, UploadInfo
from nara.models.pipeline import PipelineState
from nara.services.identifier import hash_file


# --- hash subcommand ---

def cmd_hash(args: argparse.Namespace) -> None:
    """Print the content identifier of a video."""
    video_path = Path(args.input).resolve()
    if not video_path.exists():
        print(f"Error: file not found: {video_path}", file=sys.stderr)
        sys.exit(1)

    print(hash_file(video_path))


# --- assess subcommand ---

async def cmd_assess(args: argparse.Namespace) -> None:
    """Run the full assessment pipeline on a local video."""
    video_path = Path(args.input).resolve()
    if not video_path.exists():
        print(f"Error: file not found: {video_path}", file=sys.stderr)
        sys.exit(1)

    settings.ensure_directories()

    # The pipeline deletes its input, so it gets a copy.
    staged = settings.upload_dir / uuid4().hex
    shutil.copyfile(video_path, staged)

    upload = UploadInfo(
        filename=video_path.name,
        content_type=mimetypes.guess_type(video_path.name)[0],
        size=staged.stat().st_size,
    )
    extraction_settings = ExtractionSettings.from_form(
        args.interval,
        args.format,
        args.quality,
        defaults=ExtractionSettings(
            interval=settings.frame_interval,
            format=settings.frame_format,
            quality=settings.frame_quality,
        ),
    )

    def on_state(state: PipelineState, identifier: str | None) -> None:
        if state.is_terminal and identifier:
            print(f"  [{state.value}] {identifier}", file=sys.stderr)
        else:
            print(f"  [{state.value}]", file=sys.stderr)

    pipeline = build_pipeline(settings, state_callback=on_state)

    print(f"Assessing: {video_path.name}", file=sys.stderr)
    try:
        payload = await pipeline.run(staged, upload, extraction_settings)
    except (NaraError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    data = payload.model_dump(mode="json", by_alias=True)
    if args.output:
        output_path = Path(args.output)
        with open(output_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        print(f"Saved: {output_path}", file=sys.stderr)
    else:
        print(json.dumps(data, ensure_ascii=False, indent=2))


# --- Main CLI ---

def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="nara-cli",
        description="NARA - narrative arc assessment CLI",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- hash ---
    p_hash = subparsers.add_parser("hash", help="Print the content identifier (SHA-256)")
    p_hash.add_argument("input", type=str, help="Input video file")

    # --- assess ---
    p_assess = subparsers.add_parser("assess", help="Assess a video's narrative arc")
    p_assess.add_argument("input", type=str, help="Input video file")
    p_assess.add_argument("--interval", type=float, help="Seconds between frames (default: 0.8)")
    p_assess.add_argument("--format", type=str, help="Frame image format (default: jpeg)")
    p_assess.add_argument("--quality", type=float, help="Frame quality 0-1 (default: 0.8)")
    p_assess.add_argument("-o", "--output", type=str, help="Output JSON path (default: stdout)")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Dispatch
    if args.command == "hash":
        cmd_hash(args)
    elif args.command == "assess":
        asyncio.run(cmd_assess(args))


if __name__ == "__main__":
    main()
