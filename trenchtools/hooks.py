"""A replaceable function slot where each new function may wrap the previous one."""

from __future__ import annotations

from typing import Any, Callable


class Hook:
    """Holds a function; ``set`` replaces it with one built from the previous."""

    __slots__ = ("func",)

    def __init__(self, func: Callable[..., Any]) -> None:
        self.func = func

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self.func(*args, **kwargs)

    def set(self, provider: Callable[[Callable[..., Any]], Callable[..., Any]]) -> None:
        """Replace the function with ``provider(previous_function)``."""
        self.func = provider(self.func)

    def __repr__(self) -> str:
        name = getattr(self.func, "__qualname__", type(self.func).__name__)
        return f"Hook<{name}>"