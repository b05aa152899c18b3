"""
Practice Engine Errors.

Only collaborator failures surface as errors. Bad scorer inputs are clamped
and missing data falls back to defaults, so neither raises.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger


class PracticeEngineError(Exception):
    """Base class for practice engine errors."""


class DependencyUnavailable(PracticeEngineError):
    """A store or repository call failed. Retrying is the caller's decision."""

    def __init__(self, dependency: str, operation: str, message: str | None = None):
        self.dependency = dependency
        self.operation = operation
        detail = f": {message}" if message else ""
        super().__init__(f"{dependency}.{operation} unavailable{detail}")


@contextmanager
def dependency_call(dependency: str, operation: str) -> Iterator[None]:
    """
    Re-raise any collaborator failure as DependencyUnavailable.

    Args:
        dependency: Collaborator name (e.g. "QuestionRepository")
        operation: Method being called

    Raises:
        DependencyUnavailable: chained to the original exception
    """
    try:
        yield
    except DependencyUnavailable:
        raise
    except Exception as exc:  # Intentionally broad - any collaborator failure
        logger.error(f"{dependency}.{operation} failed: {exc}")
        raise DependencyUnavailable(dependency, operation, str(exc)) from exc
