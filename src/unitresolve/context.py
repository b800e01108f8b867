"""
Cancellation-bearing execution contexts.

Every collaborator call made on behalf of a resolution request receives the
request's Context. A context becomes done when it is canceled, when its
deadline passes, or when its parent becomes done; from then on err()
returns the same ContextError instance.

Usage:
    ctx, cancel = with_timeout(background(), 5.0)
    try:
        pkg, pgf = narrowest_package_for_file(ctx, snapshot, uri)
    finally:
        cancel()
"""

import threading
import time
from typing import Callable, List, Optional, Tuple

from unitresolve.exceptions import UnitResolveError


class ContextError(UnitResolveError):
    """Base class for errors signalling that a context is done."""
    pass


class Canceled(ContextError):
    """The context was canceled."""
    def __init__(self):
        super().__init__("context canceled")


class DeadlineExceeded(ContextError):
    """The context's deadline passed."""
    def __init__(self):
        super().__init__("context deadline exceeded")


class Context:
    """
    A node in a tree of contexts.

    Not created directly; use background(), with_cancel() or with_timeout().
    """

    def __init__(
        self,
        parent: Optional["Context"] = None,
        deadline: Optional[float] = None,
        cancelable: bool = True,
    ):
        self._parent = parent
        self._cancelable = cancelable
        self._done = threading.Event()
        self._lock = threading.Lock()
        self._err: Optional[ContextError] = None
        self._children: List["Context"] = []

        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self.deadline = deadline

        if parent is not None:
            parent._add_child(self)

    def _add_child(self, child: "Context") -> None:
        # The root never finishes, so it does not track children.
        if not self._cancelable:
            return
        with self._lock:
            err = self._err
            if err is None:
                self._children.append(child)
        if err is not None:
            child._finish(err)

    def _remove_child(self, child: "Context") -> None:
        with self._lock:
            if child in self._children:
                self._children.remove(child)

    def _finish(self, err: ContextError) -> None:
        with self._lock:
            if self._err is not None:
                return
            self._err = err
            children, self._children = self._children, []
            self._done.set()
        for child in children:
            child._finish(err)
        if self._parent is not None:
            self._parent._remove_child(self)

    def cancel(self) -> None:
        if self._cancelable:
            self._finish(Canceled())

    def err(self) -> Optional[ContextError]:
        """Return None while the context is live, else the error that ended it."""
        if self._err is None and self.deadline is not None and time.monotonic() >= self.deadline:
            self._finish(DeadlineExceeded())
        return self._err

    def check(self) -> None:
        """Raise the context's error if it is done."""
        err = self.err()
        if err is not None:
            raise err

    def done(self) -> bool:
        return self.err() is not None

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the context is done or timeout seconds elapse."""
        if self.deadline is not None:
            remaining = max(0.0, self.deadline - time.monotonic())
            timeout = remaining if timeout is None else min(timeout, remaining)
        self._done.wait(timeout)
        return self.done()


_background = Context(cancelable=False)


def background() -> Context:
    """The root context: never canceled, no deadline."""
    return _background


def with_cancel(parent: Context) -> Tuple[Context, Callable[[], None]]:
    ctx = Context(parent)
    return ctx, ctx.cancel


def with_timeout(parent: Context, seconds: float) -> Tuple[Context, Callable[[], None]]:
    ctx = Context(parent, deadline=time.monotonic() + seconds)
    return ctx, ctx.cancel
