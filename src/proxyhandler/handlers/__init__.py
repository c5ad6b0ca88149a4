"""
=============================================================================
HANDLERS MODULE
=============================================================================

The contract between the dispatcher and the business logic.

    ┌─────────────────────────────────────────────────────────────────────┐
    │ Type              │ Use Case                                        │
    ├─────────────────────────────────────────────────────────────────────┤
    │ MethodHandler     │ Handlers that need the per-invocation           │
    │ subclass          │ configuration (tables, clients, settings)       │
    ├─────────────────────────────────────────────────────────────────────┤
    │ FunctionHandler / │ Stateless endpoints                             │
    │ @method_handler   │ def get(req, ct, accept, ctx): return ok(...)   │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .base import MethodHandler, FunctionHandler, HandlerFunction, method_handler

__all__ = [
    "MethodHandler",
    "FunctionHandler",
    "HandlerFunction",
    "method_handler",
]
