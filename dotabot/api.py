from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

import aiohttp

from .config import BASE, STEAM_API_KEY, logger
from .http import RateLimiter, SteamAPIError, fetch_json
from .models import LiveMatch, MatchDetails, parse_hero_catalog


@dataclass(frozen=True)
class Endpoint:
    """A Steam Web API method and the check its ``result`` must pass."""

    name: str
    path: str
    is_success: Callable[[Mapping[str, Any]], bool]


# Steam is not consistent about what "ok" looks like
LIVE_LEAGUE_GAMES = Endpoint(
    "GetLiveLeagueGames",
    "/IDOTA2Match_570/GetLiveLeagueGames/v1/",
    lambda result: result.get("status") == 200,
)
MATCH_HISTORY = Endpoint(
    "GetMatchHistory",
    "/IDOTA2Match_570/GetMatchHistory/v1/",
    lambda result: result.get("status") == 1,
)
MATCH_DETAILS = Endpoint(
    "GetMatchDetails",
    "/IDOTA2Match_570/GetMatchDetails/v1/",
    lambda result: "error" not in result and "radiant_win" in result,
)
HEROES = Endpoint(
    "GetHeroes",
    "/IEconDOTA2_570/GetHeroes/v1/",
    lambda result: result.get("status") == 200,
)


class SteamClient:
    """Read-only client for the Dota 2 endpoints of the Steam Web API."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        api_key: str = STEAM_API_KEY,
        base_url: str = BASE,
        limiter: Optional[RateLimiter] = None,
    ) -> None:
        self.session = session
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.limiter = limiter or RateLimiter()

    async def _get_result(self, endpoint: Endpoint, params: Dict[str, str]) -> Mapping[str, Any]:
        query = {"key": self.api_key, **params}
        data = await fetch_json(self.session, f"{self.base_url}{endpoint.path}", params=query, limiter=self.limiter)
        result = data.get("result") if isinstance(data, dict) else None
        if not isinstance(result, dict):
            raise SteamAPIError(f"{endpoint.name}: response has no result object")
        if not endpoint.is_success(result):
            detail = result.get("error") or result.get("statusDetail") or result.get("status")
            raise SteamAPIError(f"{endpoint.name}: bad steam result ({detail})")
        return result

    async def get_live_league_games(self, league_id: int) -> List[LiveMatch]:
        result = await self._get_result(LIVE_LEAGUE_GAMES, {"league_id": str(league_id)})
        try:
            games = [LiveMatch.from_json(g) for g in result.get("games") or []]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise SteamAPIError(f"{LIVE_LEAGUE_GAMES.name}: malformed game entry: {e}") from e
        logger.debug(f"League {league_id}: {len(games)} live games")
        return games

    async def get_match_history(self, league_id: int) -> List[int]:
        result = await self._get_result(MATCH_HISTORY, {"league_id": str(league_id)})
        try:
            return [int(m["match_id"]) for m in result.get("matches") or []]
        except (KeyError, TypeError, ValueError) as e:
            raise SteamAPIError(f"{MATCH_HISTORY.name}: malformed match entry: {e}") from e

    async def get_match_details(self, match_id: int) -> MatchDetails:
        result = await self._get_result(MATCH_DETAILS, {"match_id": str(match_id)})
        try:
            return MatchDetails.from_json(result)
        except (KeyError, TypeError, ValueError) as e:
            raise SteamAPIError(f"{MATCH_DETAILS.name}: malformed details for {match_id}: {e}") from e

    async def get_hero_catalog(self, language: str) -> Dict[int, str]:
        result = await self._get_result(HEROES, {"language": language})
        try:
            return parse_hero_catalog(result.get("heroes") or [])
        except (KeyError, TypeError, ValueError) as e:
            raise SteamAPIError(f"{HEROES.name}: malformed hero entry: {e}") from e
