#!/usr/bin/env python3
"""
Kit renderer tool: turn one recording into a folder (or ZIP) of glitch shots.

Usage:
    python tools/render_kit.py <subcommand> [options]

Subcommands:
    kit <input>             Generate a kit and write one WAV per shot
    transients <input>      List detected transient offsets

Options:
    --seed <int>            Fixed seed (default: random)
    --threshold <float>     Transient threshold ratio 0..1
    --attack <sec>          Attack time in seconds
    --max-length <sec>      Maximum slice length in seconds
    --pitch-variation <n>   Max pitch offset in semitones
    --count <int>           Number of kit slots (default: 8)
    --workers <int>         Worker threads for shot processing
    --output-dir <path>     Output directory (default: unique timestamped dir)
    --zip                   Write glitch_kit.zip instead of loose WAVs
    --debug                 Save kit.resolved.json with params and fingerprints
"""
import sys
import os
import json
import hashlib
import argparse
from datetime import datetime
from pathlib import Path

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from glitchkit.core.errors import DecodeError, MissingSource
from glitchkit.core.io import AudioIO
from glitchkit.dsp.transients import detect_transients
from glitchkit.export.exporter import ARCHIVE_NAME, Exporter, shot_filename
from glitchkit.export.wav import encode_wav
from glitchkit.kit.generator import KitGenerator
from glitchkit.params import KIT_SIZE, resolve_params


def get_unique_output_dir(base_name: str) -> Path:
    """renders/{base_name}/YYYYMMDD_HHMMSS/"""
    now = datetime.now()
    return Path("renders") / base_name / now.strftime("%Y%m%d_%H%M%S")


def _raw_params(args) -> dict:
    raw = {
        "threshold": args.threshold,
        "attack_s": args.attack,
        "max_length_s": args.max_length,
        "pitch_variation": args.pitch_variation,
    }
    return {k: v for k, v in raw.items() if v is not None}


def cmd_kit(args):
    """Generate and write a kit."""
    params = resolve_params(_raw_params(args))
    source = AudioIO.load(args.input)

    generator = KitGenerator(seed=args.seed, workers=args.workers)
    kit = generator.generate(source, params, args.count)

    stem = Path(args.input).stem
    output_dir = Path(args.output_dir) if args.output_dir else get_unique_output_dir(stem)
    output_dir.mkdir(parents=True, exist_ok=True)

    shots_info = []
    if args.zip:
        zip_path = output_dir / ARCHIVE_NAME
        zip_path.write_bytes(Exporter.create_kit_zip(kit, name=stem, params=params.to_dict()))
        print(f"Archive: {zip_path}")
    for position, shot in enumerate(kit):
        wav_bytes = encode_wav(shot.buffer)
        if not args.zip:
            (output_dir / shot_filename(position)).write_bytes(wav_bytes)
        shots_info.append({
            "id": shot.id,
            "file": shot_filename(position),
            "duration_s": shot.buffer.duration,
            "sha256": hashlib.sha256(wav_bytes).hexdigest(),
        })

    print(f"\n=== Kit Complete ===")
    print(f"Source: {args.input} ({source.duration:.2f}s, {source.num_channels} ch @ {source.sample_rate} Hz)")
    print(f"Seed: {generator.seed}")
    print(f"Generated {kit.produced}/{kit.requested} shots -> {output_dir}")
    for info in shots_info:
        print(f"  {info['file']}: {info['duration_s'] * 1000:.1f} ms  {info['sha256'][:16]}...")
    for skipped in kit.skipped:
        print(f"  slot {skipped.index}: skipped ({skipped.reason})")

    if args.debug:
        json_path = output_dir / "kit.resolved.json"
        with open(json_path, "w") as f:
            json.dump({
                "source": str(args.input),
                "timestamp": datetime.now().isoformat(),
                "seed": generator.seed,
                "resolved_params": params.to_dict(),
                "requested": kit.requested,
                "produced": kit.produced,
                "skipped": [{"index": s.index, "reason": s.reason} for s in kit.skipped],
                "shots": shots_info,
            }, f, indent=2)
        print(f"Debug JSON: {json_path}")

    return 0


def cmd_transients(args):
    """Print transient offsets for the given threshold."""
    params = resolve_params(_raw_params(args))
    source = AudioIO.load(args.input)
    offsets = detect_transients(source, params.threshold)
    print(f"{len(offsets)} transients at threshold {params.threshold:.2f}")
    for offset in offsets:
        print(f"  {offset:>10d}  {offset / source.sample_rate:8.3f}s")
    return 0


def main():
    parser = argparse.ArgumentParser(
        description="Glitch kit renderer"
    )

    subparsers = parser.add_subparsers(dest="command", help="Subcommand")

    # Common arguments
    def add_common_args(p):
        p.add_argument("input", help="Source audio file")
        p.add_argument("--threshold", type=float, default=None, help="Transient threshold ratio 0..1")
        p.add_argument("--attack", type=float, default=None, help="Attack time (s)")
        p.add_argument("--max-length", type=float, default=None, help="Max slice length (s)")
        p.add_argument("--pitch-variation", type=int, default=None, help="Max pitch offset (semitones)")

    p_kit = subparsers.add_parser("kit", help="Generate a kit")
    add_common_args(p_kit)
    p_kit.add_argument("--seed", type=int, default=None, help="Fixed seed (default: random)")
    p_kit.add_argument("--count", type=int, default=KIT_SIZE, help="Number of kit slots")
    p_kit.add_argument("--workers", type=int, default=1, help="Worker threads")
    p_kit.add_argument("--output-dir", type=str, help="Output directory (default: unique timestamped)")
    p_kit.add_argument("--zip", action="store_true", help=f"Write {ARCHIVE_NAME} instead of loose WAVs")
    p_kit.add_argument("--debug", action="store_true", help="Save kit.resolved.json")

    p_tr = subparsers.add_parser("transients", help="List detected transients")
    add_common_args(p_tr)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    try:
        if args.command == "kit":
            return cmd_kit(args)
        elif args.command == "transients":
            return cmd_transients(args)
    except (DecodeError, MissingSource, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
