"""Result value returned by every repository operation."""
from typing import Any, Iterable, List, Optional

from recipebook.domain.Errors import RecipeBookError, StorageWarning


class Result:
    def __init__(self, ok: bool, value: Any = None, error: Optional[RecipeBookError] = None,
                 warnings: Optional[Iterable[StorageWarning]] = None):
        self.ok = ok
        self.value = value
        self.error = error
        self.warnings: List[StorageWarning] = list(warnings or [])

    @classmethod
    def success(cls, value: Any = None, warnings: Optional[Iterable[StorageWarning]] = None) -> "Result":
        return cls(True, value=value, warnings=warnings)

    @classmethod
    def failure(cls, error: RecipeBookError, warnings: Optional[Iterable[StorageWarning]] = None) -> "Result":
        return cls(False, error=error, warnings=warnings)

    def unwrap(self) -> Any:
        """Return the value or raise the carried error."""
        if not self.ok:
            raise self.error
        return self.value

    def __bool__(self) -> bool:
        return self.ok

    def __repr__(self) -> str:
        if self.ok:
            return f"Result.success({self.value!r})"
        return f"Result.failure({self.error!r})"
