#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from citylines.schemas import Difficulty, GenerationConfig
from citylines.services.errors import GenerationError
from citylines.services.generator import generate_level
from citylines.services.grid import render_ascii
from citylines.services.level_loader import grid_from_record
from citylines.services.progression import load_level


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate a City Lines level and print an ASCII preview."
    )
    parser.add_argument(
        "--level",
        type=int,
        help="Level number from the progression. Overrides the explicit config flags.",
    )
    parser.add_argument("--rows", type=int, default=5)
    parser.add_argument("--cols", type=int, default=5)
    parser.add_argument("--landmarks", type=int, default=2)
    parser.add_argument(
        "--difficulty",
        choices=[d.value for d in Difficulty],
        default=Difficulty.EASY.value,
    )
    parser.add_argument("--min-path", type=int, default=2)
    parser.add_argument("--seed", type=int, help="32-bit seed. Random (and printed) when omitted.")
    parser.add_argument("--out", type=Path, help="Write the level record as JSON to this file.")
    return parser.parse_args()


def main() -> int:
    args = parse_args()

    if args.level is not None:
        response = load_level(args.level)
        record = response.data
        print(f"Level {args.level}: {response.source}, attempts={response.attempts}, seed={record.seed}")
    else:
        config = GenerationConfig(
            grid_size={"rows": args.rows, "cols": args.cols},
            landmark_count=args.landmarks,
            difficulty=args.difficulty,
            min_path_length=args.min_path,
            seed=args.seed,
        )
        try:
            generated = generate_level(config)
        except GenerationError as e:
            print(f"Generation failed ({e.kind}): {e}", file=sys.stderr)
            return 1
        record = generated.to_record()
        print(f"Generated {args.rows}x{args.cols}, seed={generated.seed}, scrambled={generated.scrambled}, upgrades={generated.upgrades}")

    grid = grid_from_record(record)
    print("\nSolved:")
    print(render_ascii(grid, use_solution=True))
    print("\nScrambled:")
    print(render_ascii(grid))

    for path in record.solution_paths:
        cells = " -> ".join(f"({p.row},{p.col})" for p in path.path)
        print(f"  {path.landmark_id}: {cells}")

    if args.out is not None:
        args.out.write_text(
            json.dumps(record.model_dump(mode="json"), ensure_ascii=False, indent=2) + "\n",
            encoding="utf-8",
        )
        print(f"\nWrote {args.out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
