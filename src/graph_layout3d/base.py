"""
Base class for tick-driven layouts.

IterativeLayout provides the event system (start/tick/end callbacks) and
the convergence loop shared by layouts that advance one simulation step
per tick. A host application either calls tick() from its own frame
loop, or calls run() to iterate until convergence.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Optional

if TYPE_CHECKING:
    from typing_extensions import Self

from .types import Event, EventType, LayoutSummary

EventCallback = Callable[[Optional[Event]], None]


class IterativeLayout(ABC):
    """
    Abstract base class for iterative layouts.

    Subclasses implement step(), which advances the simulation once and
    reports a LayoutSummary; the base class turns summaries into events
    and convergence decisions.

    Example:
        layout.on("tick", lambda event: renderer.mark_dirty())
        layout.run(iterations=500, tolerance=1e-4)
    """

    def __init__(
        self,
        *,
        on_start: Optional[EventCallback] = None,
        on_tick: Optional[EventCallback] = None,
        on_end: Optional[EventCallback] = None,
    ) -> None:
        self._events: dict[EventType, list[EventCallback]] = {}
        self._ticks: int = 0
        self._running: bool = False

        if on_start:
            self.on(EventType.start, on_start)
        if on_tick:
            self.on(EventType.tick, on_tick)
        if on_end:
            self.on(EventType.end, on_end)

    # -------------------------------------------------------------------------
    # Event System
    # -------------------------------------------------------------------------

    def on(self, event: EventType | str, callback: EventCallback) -> Self:
        """
        Subscribe to a layout event.

        Several callbacks may listen to the same event; they are called in
        subscription order.

        Args:
            event: Event type (EventType enum or string name)
            callback: Function to call when event fires

        Returns:
            self (for chaining)
        """
        if isinstance(event, str):
            event = EventType[event]
        self._events.setdefault(event, []).append(callback)
        return self

    def off(self, event: EventType | str, callback: Optional[EventCallback] = None) -> Self:
        """
        Unsubscribe from a layout event.

        Args:
            event: Event type
            callback: Callback to remove. If None, removes all callbacks for event.

        Returns:
            self (for chaining)
        """
        if isinstance(event, str):
            event = EventType[event]
        if callback is None:
            self._events.pop(event, None)
        elif event in self._events:
            self._events[event] = [cb for cb in self._events[event] if cb is not callback]
        return self

    def trigger(self, event: Event) -> None:
        """
        Trigger an event, calling the registered callbacks.

        Args:
            event: Event payload with type and optional data
        """
        event_type = event.get("type")
        if event_type is None:
            return
        for callback in list(self._events.get(event_type, ())):
            callback(event)

    # -------------------------------------------------------------------------
    # Lifecycle Methods
    # -------------------------------------------------------------------------

    @property
    def ticks(self) -> int:
        """Number of ticks run so far."""
        return self._ticks

    @property
    def running(self) -> bool:
        """True while run() is iterating."""
        return self._running

    @abstractmethod
    def step(self) -> LayoutSummary:
        """Advance the simulation by one tick and fire the tick event."""
        pass

    @property
    @abstractmethod
    def tolerance(self) -> float:
        """Default convergence threshold on max displacement."""
        pass

    @property
    @abstractmethod
    def iterations(self) -> int:
        """Default tick budget for run()."""
        pass

    def tick(self) -> bool:
        """
        Perform one iteration of the layout.

        Returns:
            True if converged (max displacement below tolerance), False otherwise.
        """
        summary = self.step()
        return summary.max_displacement < self.tolerance

    def run(
        self,
        iterations: Optional[int] = None,
        tolerance: Optional[float] = None,
    ) -> Optional[LayoutSummary]:
        """
        Tick repeatedly until convergence or the iteration budget runs out.

        Args:
            iterations: Maximum ticks (default: configured iterations)
            tolerance: Convergence threshold (default: configured tolerance)

        Returns:
            Summary of the last tick, or None if stop() was called before any tick
        """
        budget = self.iterations if iterations is None else max(0, int(iterations))
        threshold = self.tolerance if tolerance is None else float(tolerance)

        self._running = True
        self.trigger({"type": EventType.start, "tick": self._ticks})

        summary: Optional[LayoutSummary] = None
        for _ in range(budget):
            if not self._running:
                break
            summary = self.step()
            if summary.max_displacement < threshold:
                break

        self._running = False
        self.trigger({"type": EventType.end, "tick": self._ticks, "summary": summary})
        return summary

    def stop(self) -> Self:
        """Stop a run() in progress after the current tick (e.g. from a tick callback)."""
        self._running = False
        return self


__all__ = ["IterativeLayout", "EventCallback"]
