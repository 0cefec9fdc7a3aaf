"""
FILE: questboard/core/exceptions.py
PURPOSE: Custom exception classes for error handling
EXPORTS:
  - QuestboardError (base exception)
  - TaskNotFoundError
  - InvalidInputError
  - InvalidRecordError
  - StorageError
DEPENDENCIES:
  - None (stdlib only)
NOTES:
  - All exceptions inherit from QuestboardError for easy catching
  - Board commands never raise these for user mistakes; they return None instead
  - InvalidRecordError/StorageError are caught inside the persistence boundary
  - TaskNotFoundError/InvalidInputError are raised by *_or_raise helpers for UI layers
"""


class QuestboardError(Exception):
    """Base exception for all Questboard errors."""
    pass


class TaskNotFoundError(QuestboardError):
    """Task with given ID doesn't exist."""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task {task_id} not found")


class InvalidInputError(QuestboardError):
    """Input validation failed."""

    def __init__(self, message: str):
        super().__init__(message)


class InvalidRecordError(QuestboardError):
    """A persisted record could not be turned back into a domain object."""

    def __init__(self, kind: str, reason: str):
        self.kind = kind
        self.reason = reason
        super().__init__(f"Invalid {kind} record: {reason}")


class StorageError(QuestboardError):
    """The durable store could not be read or written."""
    pass
