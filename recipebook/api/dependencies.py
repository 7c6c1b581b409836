"""Repository providers for the routers (overridable in tests via app.dependency_overrides)."""
import logging
from functools import lru_cache

from recipebook.infra.Cache_Guard import LocalCacheGuard
from recipebook.infra.Local_Backend import LocalBackend
from recipebook.infra.Local_Store import JsonFileStore
from recipebook.infra.Plan_Repository import MealPlanRepository
from recipebook.infra.Recipe_Repository import RecipeRepository
from recipebook.infra.Remote_Backend import RemoteBackend
from recipebook.infra.Storage_Backend import StorageBackend
from recipebook.infra.paths import LOCAL_STORE_DIR
from recipebook.utilities import config

logger = logging.getLogger(__name__)


@lru_cache
def get_backend() -> StorageBackend:
    if config.BACKEND == "remote":
        if config.SUPABASE_URL and config.SUPABASE_ANON_KEY:
            logger.info("Using remote backend at %s", config.SUPABASE_URL)
            return RemoteBackend(config.SUPABASE_URL, config.SUPABASE_ANON_KEY, timeout=config.REMOTE_TIMEOUT)
        logger.error("RECIPEBOOK_BACKEND=remote but SUPABASE_URL / SUPABASE_ANON_KEY are missing; using local store")
    logger.info("Using local store in %s", LOCAL_STORE_DIR)
    return LocalBackend(LocalCacheGuard(JsonFileStore(LOCAL_STORE_DIR), max_bytes=config.MAX_CACHE_BYTES))


async def close_backend() -> None:
    """Close the shared backend if one was created, and forget it and its repositories."""
    if get_backend.cache_info().currsize:
        await get_backend().aclose()
        logger.info("Storage backend closed")
    get_backend.cache_clear()
    get_recipe_repository.cache_clear()
    get_plan_repository.cache_clear()


@lru_cache
def get_recipe_repository() -> RecipeRepository:
    return RecipeRepository(get_backend())


@lru_cache
def get_plan_repository() -> MealPlanRepository:
    return MealPlanRepository(get_backend())
