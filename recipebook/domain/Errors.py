"""Error and warning taxonomy shared by the storage layer and the repositories."""
from typing import Optional


class RecipeBookError(Exception):
    """Root of every recoverable error raised by the recipe book."""
    code = "error"


class ValidationError(RecipeBookError):
    """Bad input shape; carries the first unmet constraint."""
    code = "validation_error"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class NotFoundError(RecipeBookError):
    code = "not_found"

    def __init__(self, entity: str, key: str):
        super().__init__(f"{entity} not found: {key}")
        self.entity = entity
        self.key = key


class StorageError(RecipeBookError):
    code = "storage_error"


class StorageFullError(StorageError):
    """Write rejected: serialized data over the budget or refused by the store.

    The previously stored data is left untouched.
    """
    code = "storage_full"

    def __init__(self, message: str = "Storage full! Delete some recipes first.", size: Optional[int] = None,
                 limit: Optional[int] = None):
        super().__init__(message)
        self.size = size
        self.limit = limit


class BackendError(StorageError):
    """Remote request failed (transport error or HTTP error status)."""
    code = "backend_error"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class PartialReplaceError(StorageError):
    """Bulk replace failed after the existing plan was already deleted."""
    code = "partial_replace"

    def __init__(self, cause: Exception):
        super().__init__(f"Meal plan replace failed after clearing the old plan: {cause}")
        self.cause = cause


class StorageWarning(UserWarning):
    """Read-side self-heal: the cache was reset to empty."""
    code = "storage_warning"


class StorageCorruptWarning(StorageWarning):
    code = "storage_corrupt"


class StorageTooLargeWarning(StorageWarning):
    code = "storage_too_large"


__all__ = [
    'RecipeBookError', 'ValidationError', 'NotFoundError', 'StorageError', 'StorageFullError',
    'BackendError', 'PartialReplaceError', 'StorageWarning', 'StorageCorruptWarning', 'StorageTooLargeWarning',
]
