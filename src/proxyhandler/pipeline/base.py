"""
=============================================================================
SHORT-CIRCUITING STAGE PIPELINE
=============================================================================

Dispatching a request is a fixed sequence of checks, any of which may end
the request early with a response (a 400, a 415, a CORS approval...).
Each check is a STAGE that returns an Outcome instead of raising:

    Continue(value)     → hand ``value`` to the next stage
    Terminate(response) → stop here; ``response`` is final

=============================================================================
FOLDING STAGES
=============================================================================

    state ──► stage 1 ──Continue──► stage 2 ──Continue──► stage 3 ──► ...
                 │                     │
                 │                     └──Terminate(415)──┐
                 └──Terminate(400)─────────────────────────┤
                                                           ▼
                                                   final response

The pipeline folds stages left to right and stops at the first Terminate.
Exceptions are NOT outcomes: they are left to propagate to whoever runs
the pipeline, which maps them to the 500 tiers.

=============================================================================
"""

from dataclasses import dataclass
from typing import Callable, Generic, Iterator, List, Optional, TypeVar, Union
import logging

from ..http.response import ProxyResponse


logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Continue(Generic[T]):
    """Keep going with ``value``."""

    value: T

    @property
    def is_terminal(self) -> bool:
        return False


@dataclass(frozen=True)
class Terminate:
    """Stop the pipeline; ``response`` is the final answer."""

    response: ProxyResponse

    @property
    def is_terminal(self) -> bool:
        return True


Outcome = Union[Continue[T], Terminate]

# A stage takes the current value and decides whether to continue
Stage = Callable[[T], Outcome]


class StagePipeline(Generic[T]):
    """
    An ordered list of stages folded left to right.

    Usage:
        pipeline = (StagePipeline()
            .add(check_method)
            .add(check_headers)
            .add(invoke_handler))

        outcome = pipeline.run(initial_state)
        if outcome.is_terminal:
            return outcome.response
    """

    def __init__(self, name: str = "pipeline"):
        self.name = name
        self._stages: List[tuple[str, Stage]] = []

    def add(self, stage: Stage, name: Optional[str] = None) -> "StagePipeline[T]":
        """
        Append a stage.

        Args:
            stage: Callable taking the current value and returning an Outcome.
            name: Name used in debug logs (defaults to the callable's name).

        Returns:
            Self for method chaining.
        """
        stage_name = name or getattr(stage, "__name__", repr(stage))
        self._stages.append((stage_name, stage))
        return self

    def run(self, value: T) -> Outcome:
        """
        Fold the stages over ``value``.

        Returns:
            The first Terminate produced, or Continue with the value left
            by the last stage.
        """
        for stage_name, stage in self._stages:
            outcome = stage(value)
            if outcome.is_terminal:
                logger.debug(
                    f"{self.name}: {stage_name} terminated with "
                    f"{outcome.response.status_code}"
                )
                return outcome
            value = outcome.value
        return Continue(value)

    @property
    def stage_names(self) -> List[str]:
        return [stage_name for stage_name, _ in self._stages]

    def __len__(self) -> int:
        return len(self._stages)

    def __iter__(self) -> Iterator[Stage]:
        return iter(stage for _, stage in self._stages)
