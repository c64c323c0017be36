"""
Hero ID to name mapping backed by the Steam GetHeroes endpoint.

Only used to make /live output readable; match tracking never needs it.
"""

from functools import wraps
from typing import Dict, Iterable, List

from cachetools import TTLCache

from .api import SteamClient
from .config import Config, logger
from .http import SteamAPIError

# The hero list changes with game patches, so a day-long TTL is plenty
hero_cache = TTLCache(maxsize=10, ttl=Config.HERO_CACHE_TTL)


def cached_hero_call(cache_key_func):
    """Cache successful hero catalog lookups. Failures are not cached."""
    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            key = cache_key_func(*args, **kwargs)

            if key in hero_cache:
                logger.debug(f"Hero cache hit for: {key}")
                return hero_cache[key]

            logger.debug(f"Hero cache miss, calling API for: {key}")
            result = await func(*args, **kwargs)
            hero_cache[key] = result
            return result
        return wrapper
    return decorator


@cached_hero_call(lambda client, language=Config.HERO_LANGUAGE: f"heroes:{language}")
async def load_hero_catalog(client: SteamClient, language: str = Config.HERO_LANGUAGE) -> Dict[int, str]:
    heroes = await client.get_hero_catalog(language)
    logger.info(f"Loaded {len(heroes)} heroes ({language})")
    return heroes


async def get_hero_names(client: SteamClient, hero_ids: Iterable[int]) -> List[str]:
    """Resolve hero ids to names, falling back to "Hero <id>" when unknown."""
    try:
        heroes = await load_hero_catalog(client)
    except SteamAPIError as e:
        logger.warning(f"Could not load hero catalog: {e}")
        heroes = {}
    return [heroes.get(hero_id, f"Hero {hero_id}") for hero_id in hero_ids]
