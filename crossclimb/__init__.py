"""Crossclimb word-ladder solver.

This package exposes the public API surface via:

- ``crossclimb.engine.orchestrator.RetryOrchestrator``: candidate rounds, search and validation.
- ``crossclimb.engine.solvers``: slot-order, reorder and CP-SAT ladder solvers.
- ``crossclimb.engine.ends.EndsSolver``: single-end solving against a known neighbour.
- ``crossclimb.io.candidates`` helpers: LLM, static and random candidate generators.
"""

from .core.exceptions import LadderError
from .core.models import Chain, ChainLink
from .engine.ends import EndsResult, EndsSolver
from .engine.orchestrator import LadderConfig, RetryOrchestrator, SolveResult
from .io.candidates import LLMCandidateGenerator, StaticCandidateGenerator

__all__ = [
    "Chain",
    "ChainLink",
    "EndsResult",
    "EndsSolver",
    "LadderConfig",
    "LadderError",
    "LLMCandidateGenerator",
    "RetryOrchestrator",
    "SolveResult",
    "StaticCandidateGenerator",
]

__version__ = "0.1.0"
