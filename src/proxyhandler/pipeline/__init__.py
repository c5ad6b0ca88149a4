"""
=============================================================================
DISPATCH PIPELINE
=============================================================================

The building blocks the dispatcher is assembled from.

StagePipeline / Continue / Terminate:
    Folds a list of checks over a request, stopping at the first check
    that produces a final response.

PreflightNegotiator:
    The CORS preflight protocol, driven by the handler registry.

AccessLogger:
    One structured access log line per dispatch.

=============================================================================
"""

from .base import Continue, Terminate, Outcome, Stage, StagePipeline
from .cors import PreflightNegotiator, PreflightState
from .logging import AccessLogger, DispatchLog

__all__ = [
    # Outcomes
    "Continue",
    "Terminate",
    "Outcome",
    "Stage",
    "StagePipeline",

    # CORS
    "PreflightNegotiator",
    "PreflightState",

    # Access log
    "AccessLogger",
    "DispatchLog",
]
