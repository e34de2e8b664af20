"""CLI entrypoint for the Crossclimb word-ladder solver."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

from crossclimb.core.constants import SolverStrategy
from crossclimb.core.exceptions import LadderError
from crossclimb.engine.ends import EndsSolver
from crossclimb.engine.orchestrator import LadderConfig, RetryOrchestrator
from crossclimb.io.candidates import (CandidateGenerator, LLMCandidateGenerator,
                                      StaticCandidateGenerator)
from crossclimb.utils.logger import configure_logging, get_logger
from crossclimb.utils.pretty import format_attempts, pretty_print_ladder


LOGGER = get_logger("crossclimb.cli")


def parse_clues_file(path: Path) -> List[str]:
    """Read clues from a file, one per line. Blank lines and # comments are skipped."""
    entries: List[str] = []
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        entries.append(line)
    return entries


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Solve Crossclimb word ladders from clues",
    )
    parser.add_argument("--word-length", type=int, required=True, help="Length of every rung")
    parser.add_argument(
        "--clue",
        action="append",
        dest="clues",
        metavar="CLUE",
        help="Clue text; repeat once per rung",
    )
    parser.add_argument(
        "--clues-file",
        type=Path,
        metavar="FILE",
        help="File with one clue per line (# comments and blank lines ignored)",
    )
    parser.add_argument(
        "--candidates-file",
        type=Path,
        metavar="FILE",
        help='Offline candidates as JSON {"clue": [{"word": ..., "reason": ...}]}',
    )
    parser.add_argument(
        "--provider",
        type=str,
        choices=["gemini", "azure"],
        default="gemini",
        help="Language model used for candidates when no --candidates-file is given",
    )
    parser.add_argument(
        "--strategy",
        action="append",
        dest="strategies",
        choices=[s.value for s in SolverStrategy],
        help="Solver strategy; repeat to add fallbacks (default: slot_order)",
    )
    parser.add_argument(
        "--algorithmic",
        action="store_true",
        help="Single candidate round searched by slot_order then reorder",
    )
    parser.add_argument("--max-attempts", type=int, default=None, help="Candidate rounds")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for filler words")
    parser.add_argument(
        "--neighbor-word",
        type=str,
        default=None,
        help="Solve a single end: find an answer for --clue one letter away from this word",
    )
    parser.add_argument("--pretty", action="store_true", help="Print a table instead of JSON")
    parser.add_argument("--output", type=Path, help="Optional path to JSON output")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def build_generator(args: argparse.Namespace) -> CandidateGenerator:
    if args.candidates_file:
        return StaticCandidateGenerator.from_file(args.candidates_file)
    if args.provider == "azure":
        from crossclimb.io.azure_openai_client import AzureOpenAIClient

        return LLMCandidateGenerator(AzureOpenAIClient())
    from crossclimb.io.gemini_client import GeminiClient

    return LLMCandidateGenerator(GeminiClient())


def build_config(args: argparse.Namespace) -> LadderConfig:
    overrides: Dict[str, Any] = {"seed": args.seed}
    if args.max_attempts is not None:
        overrides["max_attempts"] = args.max_attempts
    if args.strategies:
        overrides["strategies"] = tuple(SolverStrategy(value) for value in args.strategies)
    if args.algorithmic:
        return LadderConfig.algorithmic(**overrides)
    return LadderConfig(**overrides)


def emit(payload: Dict[str, Any], output: Path | None) -> None:
    output_text = json.dumps(payload, ensure_ascii=False, indent=2)
    if output:
        output.write_text(output_text, encoding="utf-8")
    else:
        print(output_text)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    clues: List[str] = list(args.clues or [])
    if args.clues_file:
        clues.extend(parse_clues_file(args.clues_file))
    if not clues:
        parser.error("provide at least one --clue or --clues-file")
    if args.neighbor_word is not None and len(clues) != 1:
        parser.error("--neighbor-word requires exactly one clue")

    try:
        generator = build_generator(args)
        if args.neighbor_word is not None:
            ends = EndsSolver(generator)
            result = ends.solve(args.word_length, clues[0], args.neighbor_word)
            emit(result.to_jsonable(), args.output)
            return 0

        orchestrator = RetryOrchestrator(generator, build_config(args))
        solved = orchestrator.solve(args.word_length, clues)
    except (RuntimeError, OSError) as exc:
        parser.error(str(exc))
    except LadderError as exc:
        LOGGER.error("Solve failed: %s", exc)
        emit(exc.to_jsonable(), args.output)
        return 1

    if args.pretty and not args.output:
        pretty_print_ladder(solved.chain, label=f"Solved in {len(solved.attempts)} attempt(s)")
        print(format_attempts(solved.attempts))
    else:
        emit(solved.to_jsonable(), args.output)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
