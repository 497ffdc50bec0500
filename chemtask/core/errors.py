"""
Task engine error taxonomy.

Every failure raised by the generation pipeline derives from
TaskEngineError so callers can decide on retries with a single except
clause. Explanation rendering is the only stage that recovers locally.
"""

from __future__ import annotations


class TaskEngineError(Exception):
    """Base class for all exercise-generation failures."""

    pass


class UnknownIdentifierError(TaskEngineError, KeyError):
    """Raised for an unknown template, generator, solver, prompt, or mode id."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""


class InsufficientDataError(TaskEngineError):
    """Raised when the candidate pool cannot satisfy a generator's cardinality."""

    pass


class MissingSlotDataError(TaskEngineError):
    """Raised when a solver needs a slot or ontology entry that is not available."""

    pass
