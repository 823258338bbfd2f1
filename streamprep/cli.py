#!/usr/bin/env python3
# streamprep/cli.py
from __future__ import annotations

import argparse
import json
import logging
import shlex
import sys
from pathlib import Path
from typing import List, Optional

from streamprep.common.logging import get_logger
from streamprep.common.settings import Settings, get_settings
from streamprep.domain.dataclasses.options import RunOptions
from streamprep.domain.dataclasses.reports import ConversionReport
from streamprep.domain.errors import StreamprepError
from streamprep.services.convert.service import ConversionService
from streamprep.services.watermark.validator import load_watermark

logger = get_logger("streamprep")

#============================================

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.
    """
    parser = argparse.ArgumentParser(
        prog="streamprep",
        description="Convert a video file to streaming-ready mp4 renditions",
    )
    parser.add_argument('input_file', type=Path, help='video file to convert')
    parser.add_argument('output_prefix', type=Path, nargs='?',
        help='output path prefix (default: input path without extension)')
    parser.add_argument('-f', '--force', action='store_true',
        help='force removal of output files if they exist')
    parser.add_argument('-t', '--test', action='store_true',
        help='for testing only encode the first 30 seconds of the file')
    parser.add_argument('-q', '--quiet', action='store_true',
        help='only log warnings and errors')
    parser.add_argument('-n', '--dry-run', dest='dry_run', action='store_true',
        help='probe and plan, print the encoder commands, encode nothing')
    parser.add_argument('-a', '--adelay', type=float, default=0.0,
        help='delay audio by this number of seconds')
    parser.add_argument('-k', '--keyframe_timecode_file', dest='keyframe_file', type=Path,
        help='force keyframes at timecodes listed in file')
    parser.add_argument('-w', '--watermark',
        help='FILE[:ORIENTATION[:WIDTH_PERCENTAGE]] add watermark; orientation is '
             'TL|TR|BL|BR|C (default BR), width defaults to 40%% of the output')
    parser.add_argument('-p', '--profiles', dest='profiles_path', action='append',
        help='profile definition file (repeatable; overrides STREAMPREP_PROFILES_PATH)')
    parser.add_argument('--json', dest='json_report', action='store_true',
        help='print the run report as JSON')
    return parser.parse_args(argv)

#============================================

def build_settings(args: argparse.Namespace) -> Settings:
    cfg = get_settings()
    if args.profiles_path:
        cfg = cfg.model_copy(update={"profiles_path": list(args.profiles_path)})
    return cfg


def build_options(args: argparse.Namespace) -> RunOptions:
    watermark = load_watermark(args.watermark) if args.watermark else None
    return RunOptions(
        input_file=args.input_file,
        output_prefix=args.output_prefix,
        force=args.force,
        test=args.test,
        quiet=args.quiet,
        dry_run=args.dry_run,
        audio_delay=args.adelay or 0.0,
        keyframe_file=args.keyframe_file,
        watermark=watermark,
    )


def print_report(rpt: ConversionReport, *, as_json: bool, dry_run: bool) -> None:
    if as_json:
        print(json.dumps(rpt.as_dict(), indent=2))
        return
    if dry_run:
        for cmd in rpt.commands:
            print(" ".join(shlex.quote(c) for c in cmd))
    for path in rpt.outputs:
        print(path)

#============================================

def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    try:
        cfg = build_settings(args)
        level = logging.WARNING if args.quiet else cfg.log_level.upper()
        get_logger("streamprep", level)
        options = build_options(args)
        rpt = ConversionService(cfg).run(options)
    except StreamprepError as e:
        logger.error("%s", e)
        return 1

    print_report(rpt, as_json=args.json_report, dry_run=args.dry_run)
    if rpt.error_details:
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
