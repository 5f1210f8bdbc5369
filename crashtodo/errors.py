class TodoError(Exception):
    """Base class for errors raised by crashtodo."""


class StorageError(TodoError):
    """The local store could not be written."""


class ImportRejected(TodoError):
    """An imported file is not a JSON array of tasks."""
