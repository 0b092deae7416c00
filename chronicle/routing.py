"""Payload-type dispatch for event appliers and event handlers.

Aggregates mark their state transitions with ``@applies_event`` and
projections mark their folds with ``@handles_event``. The payload type is
read from the annotation of the method's first parameter; annotating it as
``Event[Payload]`` asks for the envelope instead of the bare payload.
Payload types without a registered method are ignored.
"""

import inspect
from collections.abc import Callable
from functools import singledispatch
from typing import Any, TypeVar

T = TypeVar("T")

_ROUTE_ATTR = "_chronicle_route"


def _payload_type(func: Callable[..., Any]) -> tuple[type, bool]:
    """Return (payload type, wants envelope) for a decorated method."""
    params = list(inspect.signature(func).parameters.values())
    if len(params) < 2 or params[1].annotation is inspect.Parameter.empty:
        raise ValueError(f"Handler {func.__name__} needs an annotated event parameter")
    annotation = params[1].annotation

    # Import here to avoid circular dependency
    from .domain import Event

    if isinstance(annotation, type) and issubclass(annotation, Event):
        # Pydantic builds Event[T] as a subclass carrying its type argument
        args = annotation.__pydantic_generic_metadata__.get("args", ())
        if not args:
            raise ValueError(f"Handler {func.__name__}: use Event[Payload], not bare Event")
        return (args[0], True)
    return (annotation, False)


class MessageRouter:
    """Routes an event payload to the method registered for its type.

    Built once per class by `setup_event_applying` / `setup_event_handling`.
    Subclasses of a registered payload type reach the same method.
    """

    __slots__ = ("_dispatch", "_default")

    def __init__(self) -> None:
        @singledispatch
        def dispatch(message: object, instance: object, event_wrapper: Any = None) -> None:
            return None

        self._dispatch = dispatch
        self._default = dispatch.dispatch(object)

    def register(self, message_type: type, handler: Callable[..., object], wants_wrapper: bool) -> None:
        def call(msg: object, inst: object, event_wrapper: Any = None) -> object:
            if wants_wrapper and event_wrapper is not None:
                return handler(inst, event_wrapper)
            return handler(inst, msg)

        self._dispatch.register(message_type)(call)

    def handles(self, message_type: type) -> bool:
        """True if routing this type reaches a registered method."""
        return self._dispatch.dispatch(message_type) is not self._default

    def route(self, instance: Any, message: Any, event_wrapper: Any = None) -> object:
        """Call the method registered for ``type(message)`` on ``instance``.

        Args:
            instance: The aggregate or projection.
            message: The event payload.
            event_wrapper: The envelope, handed to methods annotated with
                ``Event[Payload]``.
        """
        return self._dispatch(message, instance, event_wrapper)


def _marker(kind: str) -> Callable[[Callable[..., T]], Callable[..., T]]:
    def decorate(func: Callable[..., T]) -> Callable[..., T]:
        setattr(func, _ROUTE_ATTR, (kind, *_payload_type(func)))
        return func

    return decorate


applies_event = _marker("applies")
applies_event.__doc__ = """Mark an aggregate method as the applier of one event type.

Example:
    >>> class BankAccount(Aggregate):
    ...     @applies_event
    ...     def apply_deposited(self, evt: MoneyDeposited):
    ...         self.balance += evt.amount
"""

handles_event = _marker("handles")
handles_event.__doc__ = """Mark a projection method as the handler of one event type.

Example:
    >>> class AccountSummaryProjection(Projection):
    ...     @handles_event
    ...     def on_closed(self, event: Event[AccountClosed]):
    ...         self.summaries[event.aggregate_id].closed_at = event.timestamp
"""


def _build_router(cls: type, kind: str) -> MessageRouter:
    router = MessageRouter()
    # Base classes first so overrides in subclasses win
    for klass in reversed(cls.__mro__):
        for value in vars(klass).values():
            route = getattr(value, _ROUTE_ATTR, None)
            if isinstance(route, tuple) and route[0] == kind:
                router.register(route[1], value, wants_wrapper=route[2])
    return router


def setup_event_applying(cls: type) -> MessageRouter:
    """Build the applier router for an aggregate class."""
    return _build_router(cls, "applies")


def setup_event_handling(cls: type) -> MessageRouter:
    """Build the handler router for a projection class."""
    return _build_router(cls, "handles")
