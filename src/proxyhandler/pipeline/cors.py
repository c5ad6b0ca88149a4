"""
=============================================================================
CORS PREFLIGHT NEGOTIATION
=============================================================================

Answers the OPTIONS request a browser sends before a non-simple
cross-origin request.

=============================================================================
PREFLIGHT FLOW
=============================================================================

    ┌─────────┐                                          ┌──────────────┐
    │ Browser │──────────── OPTIONS /orders ────────────▶│ Dispatcher   │
    │         │   Origin: https://shop.example           │              │
    │         │   Access-Control-Request-Method: POST    │  POST is     │
    │         │   Access-Control-Request-Headers:        │  registered, │
    │         │     X-Api-Key, Content-Type              │  its handler │
    │         │                                          │  requires    │
    │         │◀──────────────── 200 OK ─────────────────│  x-api-key   │
    │         │   Access-Control-Allow-Origin:           │              │
    │         │     https://shop.example                 │              │
    │         │   Access-Control-Allow-Headers:          │              │
    │         │     x-api-key, content-type              │              │
    │         │   Access-Control-Allow-Methods: POST     │              │
    └─────────┘                                          └──────────────┘

Unlike a blanket "allow everything" CORS layer, the answer is derived
from the handler registered for the TARGET method: the preflight only
succeeds if the browser is going to send every header that handler
declares as required.

=============================================================================
NEGOTIATION STEPS (first failure wins, every failure is a 400)
=============================================================================

    1. Origin present?                              else reject
    2. Access-Control-Request-Method present?       else reject
    3. Target method registered?                    else reject
    4. Read required headers from the target's handler
    5. Required headers non-empty but
       Access-Control-Request-Headers absent?       → reject
    6. Proposed = request-headers, all whitespace removed,
       split on ",", lower-cased, order kept
    7. Proposed ⊇ required?                         else reject
    8. Approve: echo origin, proposed headers, requested method

Extra proposed headers are allowed; they are echoed back as sent
(lower-cased). Header names are not validated beyond that.

=============================================================================
"""

from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional
import logging

from .base import Continue, Outcome, StagePipeline, Terminate
from .. import errors
from ..http import headers as h
from ..http.response import ProxyResponse, ResponseBuilder
from ..http.status_codes import HTTPStatus
from ..registry import HandlerRegistry


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreflightState:
    """What the negotiation has established so far."""

    headers: Mapping[str, str]
    configuration: Any = None
    origin: Optional[str] = None
    requested_method: Optional[str] = None
    required_headers: frozenset[str] = field(default_factory=frozenset)
    proposed_headers: tuple[str, ...] = ()

    @property
    def target_method(self) -> str:
        """The requested method in canonical case."""
        return (self.requested_method or "").lower()


class PreflightNegotiator:
    """
    Runs the preflight steps against a handler registry.

    Usage:
        negotiator = PreflightNegotiator(registry)
        response = negotiator.negotiate(normalized_headers, configuration)
    """

    def __init__(self, registry: HandlerRegistry):
        self.registry = registry
        self._pipeline: StagePipeline[PreflightState] = (StagePipeline("preflight")
            .add(self._require_origin)
            .add(self._require_request_method)
            .add(self._require_registered_target)
            .add(self._collect_required_headers)
            .add(self._collect_proposed_headers)
            .add(self._require_all_proposed))

    def negotiate(self, headers: Mapping[str, str], configuration: Any) -> ProxyResponse:
        """
        Approve or reject a preflight request.

        Args:
            headers: Request headers with lower-case names.
            configuration: Per-invocation configuration, used to build the
                           target method's handler.

        Returns:
            The 200 approval or the 400 rejection. Either is final.
        """
        outcome = self._pipeline.run(PreflightState(headers, configuration))
        if outcome.is_terminal:
            logger.info(f"Preflight rejected: {outcome.response.body}")
            return outcome.response
        return self._approve(outcome.value)

    # =========================================================================
    # STEPS
    # =========================================================================

    def _require_origin(self, state: PreflightState) -> Outcome:
        origin = state.headers.get(h.ORIGIN)
        if origin is None:
            return Terminate(errors.cors_missing_header(h.ORIGIN))
        return Continue(replace(state, origin=origin))

    def _require_request_method(self, state: PreflightState) -> Outcome:
        requested = state.headers.get(h.ACCESS_CONTROL_REQUEST_METHOD)
        if requested is None:
            return Terminate(errors.cors_missing_header(h.ACCESS_CONTROL_REQUEST_METHOD))
        return Continue(replace(state, requested_method=requested))

    def _require_registered_target(self, state: PreflightState) -> Outcome:
        if not self.registry.is_registered(state.target_method):
            return Terminate(errors.unsupported_method(state.target_method))
        return Continue(state)

    def _collect_required_headers(self, state: PreflightState) -> Outcome:
        handler = self.registry.resolve(state.configuration, state.target_method)
        required = frozenset(name.lower() for name in handler.required_headers())
        return Continue(replace(state, required_headers=required))

    def _collect_proposed_headers(self, state: PreflightState) -> Outcome:
        proposed = state.headers.get(h.ACCESS_CONTROL_REQUEST_HEADERS)
        if proposed is None:
            if state.required_headers:
                return Terminate(
                    errors.cors_headers_not_present([h.ACCESS_CONTROL_REQUEST_HEADERS])
                )
            return Continue(state)
        return Continue(replace(state, proposed_headers=tuple(h.split_header_list(proposed))))

    def _require_all_proposed(self, state: PreflightState) -> Outcome:
        missing = state.required_headers.difference(state.proposed_headers)
        if missing:
            return Terminate(errors.cors_headers_not_present(sorted(missing)))
        return Continue(state)

    # =========================================================================
    # APPROVAL
    # =========================================================================

    def _approve(self, state: PreflightState) -> ProxyResponse:
        logger.info(
            f"Preflight approved for {state.requested_method} from {state.origin}"
        )
        return (ResponseBuilder()
            .status(HTTPStatus.OK)
            .header(h.ACCESS_CONTROL_ALLOW_ORIGIN, state.origin)
            .header(h.ACCESS_CONTROL_ALLOW_HEADERS, ", ".join(state.proposed_headers))
            .header(h.ACCESS_CONTROL_ALLOW_METHODS, state.requested_method)
            .build())
