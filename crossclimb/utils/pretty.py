"""Pretty-print helpers for word ladders."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from ..core.models import Attempt, Chain


def format_ladder(chain: Chain) -> str:
    width = max((len(link.word) for link in chain.links), default=0)
    lines: List[str] = []
    for position, link in enumerate(chain.links):
        lines.append(f"{position + 1:>2} | {link.word:<{width}} | {link.clue}")
    return "\n".join(lines)


def format_attempts(attempts: List[Attempt]) -> str:
    lines = []
    for attempt in attempts:
        code = attempt.error_code.value if attempt.error_code else "-"
        lines.append(f"#{attempt.number} {attempt.outcome.value:<7} {code:<24} {attempt.reason}")
    return "\n".join(lines)


def pretty_print_ladder(chain: Chain, *, label: str | None = None, stream=None) -> None:
    """Print the ladder in a human-friendly format."""

    stream = stream or sys.stdout
    if label:
        print(label, file=stream)
    print(format_ladder(chain), file=stream)
