"""Configuration management for the Recipe Book application."""
import os
from typing import Final
from pathlib import Path

from dotenv import load_dotenv

from recipebook.utilities.constants import MAX_CACHE_BYTES as _DEFAULT_MAX_CACHE_BYTES

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)

# Storage backend selection: 'local' (file-backed cache) or 'remote' (REST backend)
BACKEND: Final[str] = os.getenv('RECIPEBOOK_BACKEND', 'local').strip().lower()

# Remote backend
SUPABASE_URL: Final[str] = os.getenv('SUPABASE_URL', '').rstrip('/')
SUPABASE_ANON_KEY: Final[str] = os.getenv('SUPABASE_ANON_KEY', '')
REMOTE_TIMEOUT: Final[float] = float(os.getenv('REMOTE_TIMEOUT', '10'))

# Local cache
MAX_CACHE_BYTES: Final[int] = int(os.getenv('MAX_CACHE_BYTES', str(_DEFAULT_MAX_CACHE_BYTES)))

# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'DEBUG' if DEBUG else 'INFO').upper()

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent
DATA_DIR: Final[Path] = Path(os.getenv('RECIPEBOOK_DATA_DIR', str(BASE_DIR / 'data'))).resolve()
