from pathlib import Path

from recipebook.utilities.config import DATA_DIR

# Centralized paths for the file-backed local store (single source of truth)
LOCAL_STORE_DIR: Path = DATA_DIR / 'local_store'

__all__ = ['DATA_DIR', 'LOCAL_STORE_DIR']
