"""
Reporting of internal-consistency faults.

A bug is a condition the program's own invariants say cannot happen, for
example a type-checked package that lacks one of its member files. Bugs
are kept apart from ordinary errors: they are logged at ERROR with
structured fields, recorded in a process-wide registry, and passed to
any registered handlers so that they can be surfaced to developers
without being shown to users as "not found".
"""

import inspect
import threading
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Set

from pydantic import BaseModel, Field

from unitresolve.config import get_config
from unitresolve.exceptions import UnitResolveError
from unitresolve.logging_config import logger


class Bug(BaseModel):
    """A recorded internal-consistency fault."""
    message: str
    file: str
    line: int
    key: str
    data: Dict[str, Any] = Field(default_factory=dict)
    timestamp: float = Field(default_factory=time.time)


class BugPanic(UnitResolveError):
    """Raised by report() instead of recording when panic_on_bugs is set."""
    def __init__(self, bug: Bug):
        self.bug = bug
        super().__init__(f"bug at {bug.file}:{bug.line}: {bug.message}")


_lock = threading.Lock()
_exemplars: Dict[str, Bug] = {}
# Keys of every bug reported, including those past the recording limit.
_seen: Set[str] = set()
_handlers: List[Callable[[Bug], None]] = []


def report(message: str, **data: Any) -> Bug:
    """
    Record a bug reported from the caller's source location.

    Bugs with the same location and message are recorded once; later
    reports of the same key are still logged and returned.

    Raises:
        BugPanic: if panic_on_bugs is configured.
    """
    caller = inspect.currentframe().f_back
    file = Path(caller.f_code.co_filename).name
    line = caller.f_lineno
    del caller

    bug = Bug(
        message=message,
        file=file,
        line=line,
        key=f"{file}:{line}: {message}",
        data=data,
    )

    logger.bind(bug_key=bug.key, **data).error(f"BUG: {message} ({file}:{line})")

    config = get_config()
    if config.panic_on_bugs:
        raise BugPanic(bug)

    with _lock:
        is_new = bug.key not in _seen
        if is_new:
            _seen.add(bug.key)
            if len(_exemplars) < config.max_recorded_bugs:
                _exemplars[bug.key] = bug
        handlers = list(_handlers)

    if is_new:
        for handler in handlers:
            handler(bug)

    return bug


def list_bugs() -> List[Bug]:
    """Return the distinct bugs recorded so far, oldest first."""
    with _lock:
        return sorted(_exemplars.values(), key=lambda b: b.timestamp)


def handle(callback: Callable[[Bug], None]) -> None:
    """Register a callback invoked once for each newly seen bug."""
    with _lock:
        _handlers.append(callback)


def clear() -> None:
    """Forget recorded bugs and registered handlers."""
    with _lock:
        _exemplars.clear()
        _seen.clear()
        _handlers.clear()
