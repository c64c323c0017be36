from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Tuple


@dataclass(frozen=True)
class LiveMatch:
    match_id: int
    game_number: int
    radiant_name: str
    dire_name: str
    duration: float = 0.0
    radiant_picks: Tuple[int, ...] = field(default_factory=tuple)  # hero ids
    dire_picks: Tuple[int, ...] = field(default_factory=tuple)

    @property
    def pick_count(self) -> int:
        return len(self.radiant_picks) + len(self.dire_picks)

    @classmethod
    def from_json(cls, game: Mapping[str, Any]) -> "LiveMatch":
        """Build a live match from one entry of GetLiveLeagueGames' ``games``.

        Raises KeyError/TypeError/ValueError on malformed entries; the client
        turns those into ``SteamAPIError``.
        """
        scoreboard = game.get("scoreboard") or {}
        return cls(
            match_id=int(game["match_id"]),
            game_number=int(game.get("game_number") or 0),
            radiant_name=_team_name(game.get("radiant_team"), "Radiant"),
            dire_name=_team_name(game.get("dire_team"), "Dire"),
            duration=float(scoreboard.get("duration") or 0.0),
            radiant_picks=_hero_ids((scoreboard.get("radiant") or {}).get("picks")),
            dire_picks=_hero_ids((scoreboard.get("dire") or {}).get("picks")),
        )


@dataclass(frozen=True)
class MatchDetails:
    radiant_win: bool
    radiant_name: str
    dire_name: str
    radiant_score: int
    dire_score: int

    @classmethod
    def from_json(cls, result: Mapping[str, Any]) -> "MatchDetails":
        return cls(
            radiant_win=bool(result["radiant_win"]),
            radiant_name=result.get("radiant_name") or "Radiant",
            dire_name=result.get("dire_name") or "Dire",
            radiant_score=int(result.get("radiant_score") or 0),
            dire_score=int(result.get("dire_score") or 0),
        )


@dataclass(frozen=True)
class FinishedMatch:
    """Outcome of a finished match, oriented winner-first for rendering."""

    match_id: int
    game_number: int
    winner_name: str
    loser_name: str
    winner_score: int
    loser_score: int

    @classmethod
    def from_details(cls, match_id: int, game_number: int, details: MatchDetails) -> "FinishedMatch":
        if details.radiant_win:
            return cls(
                match_id=match_id,
                game_number=game_number,
                winner_name=details.radiant_name,
                loser_name=details.dire_name,
                winner_score=details.radiant_score,
                loser_score=details.dire_score,
            )
        return cls(
            match_id=match_id,
            game_number=game_number,
            winner_name=details.dire_name,
            loser_name=details.radiant_name,
            winner_score=details.dire_score,
            loser_score=details.radiant_score,
        )


def _team_name(team: Any, default: str) -> str:
    if not isinstance(team, dict):
        return default
    return team.get("team_name") or team.get("name") or default


def _hero_ids(picks: Any) -> Tuple[int, ...]:
    if not picks:
        return ()
    return tuple(int(p["hero_id"]) for p in picks)


def parse_hero_catalog(heroes: List[Dict[str, Any]]) -> Dict[int, str]:
    return {int(h["id"]): h.get("localized_name") or h.get("name") or f"Hero {h['id']}" for h in heroes}
