"""Priority-ordered filter and action hooks.

A hook name maps to an explicit list of ``Hook`` records.  Callbacks run in
ascending ``priority`` order; callbacks sharing a priority run in the order
they were added.  Filters thread a value through every callback, actions
ignore return values, and ``first_result`` stops at the first callback that
produces a non-empty value.
"""

import logging
from dataclasses import dataclass, field
from itertools import count
from typing import Any, Callable

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 10

_sequence = count()


@dataclass(order=True)
class Hook:
    """One callback attached to a hook name."""

    priority: int
    seq: int = field(default_factory=lambda: next(_sequence))
    callback: Callable[..., Any] = field(default=None, compare=False)
    accepted_args: int = field(default=1, compare=False)

    def __call__(self, *args):
        return self.callback(*args[: self.accepted_args])


class HookRegistry:
    """Filters and actions for one site."""

    def __init__(self) -> None:
        self._hooks: dict[str, list[Hook]] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def add_filter(
        self,
        name: str,
        callback: Callable[..., Any],
        priority: int = DEFAULT_PRIORITY,
        accepted_args: int = 1,
    ) -> Hook:
        """Attach ``callback`` to ``name`` and return the Hook record."""
        hook = Hook(priority=priority, callback=callback, accepted_args=accepted_args)
        hooks = self._hooks.setdefault(name, [])
        hooks.append(hook)
        hooks.sort()
        logger.debug(f"Hooked {getattr(callback, '__qualname__', callback)!s} to '{name}' at {priority}")
        return hook

    # Actions share the filter storage; only the calling convention differs.
    add_action = add_filter

    def remove_filter(self, name: str, callback: Callable[..., Any], priority: int | None = None) -> bool:
        """Detach ``callback`` from ``name``. Returns True if anything was removed."""
        hooks = self._hooks.get(name, [])
        kept = [
            h for h in hooks
            if not (h.callback == callback and (priority is None or h.priority == priority))
        ]
        removed = len(kept) != len(hooks)
        if kept:
            self._hooks[name] = kept
        else:
            self._hooks.pop(name, None)
        return removed

    remove_action = remove_filter

    def has_filter(self, name: str, callback: Callable[..., Any] | None = None) -> bool:
        hooks = self._hooks.get(name, [])
        if callback is None:
            return bool(hooks)
        return any(h.callback == callback for h in hooks)

    has_action = has_filter

    def hooks(self, name: str) -> list[Hook]:
        """Snapshot of the hooks attached to ``name``, in run order."""
        return list(self._hooks.get(name, []))

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def apply_filters(self, name: str, value: Any, *args: Any) -> Any:
        """Pass ``value`` through every filter on ``name`` and return the result."""
        for hook in self.hooks(name):
            value = hook(value, *args)
        return value

    def first_result(self, name: str, value: Any, *args: Any) -> Any:
        """Run filters on ``name`` until one returns a non-empty value.

        Each filter still receives the current value, so a well-behaved filter
        that sees a non-empty value passes it through.  The chain stops as soon
        as a non-empty value exists.
        """
        for hook in self.hooks(name):
            if value:
                break
            value = hook(value, *args)
        return value

    def do_action(self, name: str, *args: Any) -> None:
        """Call every callback on ``name``, discarding return values."""
        for hook in self.hooks(name):
            hook(*args)
