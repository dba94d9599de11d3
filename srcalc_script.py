import argparse
import json
import logging
import sys
from pathlib import Path

import algorithm
from performance import ScoreStatistics, calculate_performance
from taiko_mods import parse_mods
from taiko_objects import Beatmap, HitEvent, HitKind, TimingSegment


def resource_path(relative_path: str) -> Path:
    base_path = Path(getattr(sys, '_MEIPASS', Path(__file__).parent))
    return base_path / relative_path


def credit_string() -> str:
    build_time_file = resource_path("build_time")
    if build_time_file.exists():
        version_str = f" (algorithm version: {build_time_file.read_text(encoding='utf-8').strip()})"
    else:
        version_str = ""
    return f"taiko-srcalc{version_str}"


def _hit_kind(name):
    try:
        return HitKind(name.lower())
    except ValueError:
        raise ValueError(f"Unknown hit object kind: {name!r}") from None


def _optional_float(value):
    return float(value) if value is not None else None


def beatmap_from_dict(data: dict) -> Beatmap:
    events = tuple(
        HitEvent(start_time=float(o["time"]),
                 kind=_hit_kind(o["kind"]),
                 duration=float(o.get("duration", 0.0)),
                 slider_velocity=_optional_float(o.get("slider_velocity")))
        for o in data.get("hit_objects", [])
    )
    segments = tuple(
        TimingSegment(time=float(t["time"]), bpm=float(t["bpm"]),
                      slider_velocity=float(t.get("slider_velocity", 1.0)))
        for t in data.get("timing_points", [])
    )
    return Beatmap(
        hit_events=events,
        overall_difficulty=float(data.get("overall_difficulty", 5.0)),
        slider_multiplier=float(data.get("slider_multiplier", 1.4)),
        timing_segments=segments,
    )


def read_beatmap_json(path: Path) -> Beatmap:
    with open(path, encoding="utf-8") as f:
        return beatmap_from_dict(json.load(f))


def build_parser():
    parser = argparse.ArgumentParser(description="Calculate SR (and optionally pp) for taiko beatmaps.")
    parser.add_argument("folder_path", nargs='?', default=Path.cwd(), type=Path, help='Path to the folder containing .json beatmaps.')
    parser.add_argument("--mod", "-M", nargs='*', default=["NM"], help='Mods to apply (NM, DT, NC, HT, DC, EZ, HR, HD, FL).')
    parser.add_argument("--great", type=int, help="Number of great judgements of a score.")
    parser.add_argument("--ok", type=int, default=0, help="Number of ok judgements of a score.")
    parser.add_argument("--miss", type=int, default=0, help="Number of misses of a score.")
    parser.add_argument("--repeat", action="store_true", help="Wait for Enter and run again after each pass.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log calculation details.")
    parser.add_argument("--version", "-V", action="store_true", help="Show build version (build time) and exit.")
    return parser


def run(folder_path, mods, score_counts=None):
    label = "".join(mod.value for mod in mods) or "NM"
    for file in sorted(Path(folder_path).glob("*.json")):
        beatmap = read_beatmap_json(file)
        attributes = algorithm.calculate(beatmap, mods)
        print(f"({label}) {file.stem} | {attributes.star_rating:.4f}")

        if score_counts is not None:
            great, ok, miss = score_counts
            score = ScoreStatistics(count_great=great, count_ok=ok, count_miss=miss, mods=mods)
            result = calculate_performance(score, attributes)
            print(f"    pp {result.total:.2f} (difficulty {result.difficulty:.2f}, accuracy {result.accuracy:.2f})")


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    credit_str = credit_string()
    if args.version:
        print(credit_str)
        sys.exit(0)

    folder_path = args.folder_path
    if not folder_path.is_dir():
        print(f"Error: {folder_path} is not a valid directory.", file=sys.stderr)
        sys.exit(1)

    try:
        mods = parse_mods(args.mod)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    score_counts = (args.great, args.ok, args.miss) if args.great is not None else None

    print(credit_str)
    print(f"Dir: {folder_path}, Mod: {' '.join(args.mod)}\n")

    while True:
        try:
            run(folder_path, mods, score_counts)
        except (OSError, ValueError, KeyError, TypeError) as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)

        if not args.repeat:
            return
        try:
            input("SR calculation completed. Press Enter to run again or 'Ctrl+C' to exit.")
            print()
        except KeyboardInterrupt:
            sys.exit(0)


if __name__ == "__main__":
    main()
