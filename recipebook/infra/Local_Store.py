"""Key-value stores backing the local cache (keys: 'recipes', 'mealPlan').

Both stores expose get(key) -> str | None, set(key, value) -> bool and remove(key).
set() returns False instead of raising when the value cannot be stored.
"""
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Dict, Optional, Union

logger = logging.getLogger(__name__)


class MemoryStore:
    """In-process store; `quota` (characters per value) emulates a browser storage quota."""

    def __init__(self, quota: Optional[int] = None):
        self.quota = quota
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> bool:
        if self.quota is not None and len(value) > self.quota:
            logger.warning("Quota exceeded for key %r (%d > %d chars)", key, len(value), self.quota)
            return False
        self._data[key] = value
        return True

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """One file per key inside `directory`; writes go through a temp file + move."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            return None
        except UnicodeDecodeError:
            # Undecodable bytes are handed back so the guard treats them as corrupt
            return path.read_bytes().decode("utf-8", errors="replace")
        except OSError as e:
            logger.error("Could not read %s: %s", path, e)
            return None

    def set(self, key: str, value: str) -> bool:
        path = self._path(key)
        try:
            os.makedirs(self.directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=f".{key}_", suffix=".json")
        except OSError as e:
            logger.error("Failed to prepare write for %s: %s", path, e)
            return False
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                tmp.write(value)
            shutil.move(tmp_path, path)
            return True
        except OSError as e:
            logger.error("Failed to save %s: %s", path, e)
            return False
        finally:
            if os.path.exists(tmp_path):
                try:
                    os.remove(tmp_path)
                except OSError:
                    pass

    def remove(self, key: str) -> None:
        try:
            os.remove(self._path(key))
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error("Failed to remove %s: %s", self._path(key), e)
