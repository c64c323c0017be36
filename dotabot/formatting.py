from __future__ import annotations

from typing import Dict, Iterable, List, Sequence, Tuple

from .models import FinishedMatch, LiveMatch


def _escape_html(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


# Notifications are plain text, one line per match


def fmt_matches_drafting(matches: Iterable[LiveMatch]) -> str:
    return "\n".join(
        f"In Drafting: {m.radiant_name} vs. {m.dire_name} (Game {m.game_number})" for m in matches
    )


def fmt_matches_started(matches: Iterable[LiveMatch]) -> str:
    return "\n".join(
        f"Match Started: {m.radiant_name} vs. {m.dire_name} (Game {m.game_number})" for m in matches
    )


def fmt_matches_finished(outcomes: Iterable[FinishedMatch]) -> str:
    return "\n".join(
        f"Match Ended: {o.winner_name} defeated {o.loser_name} "
        f"({o.winner_score} - {o.loser_score}, Game {o.game_number})"
        for o in outcomes
    )


def fmt_live_games(
    league_id: int,
    games: Sequence[Tuple[LiveMatch, List[str], List[str]]],
) -> str:
    """Render /live output. Each game comes with its radiant and dire hero names."""
    title = f"🎮 <b>Live games</b> · league <code>{league_id}</code>"
    if not games:
        return f"{title}\n\n<i>No live games right now</i>"

    blocks: List[str] = []
    for match, radiant_heroes, dire_heroes in games:
        if match.duration > 0:
            minutes, seconds = divmod(int(match.duration), 60)
            clock = f"⏱️ {minutes}:{seconds:02d}"
        else:
            clock = "📝 drafting"
        lines = [
            f"<b>{_escape_html(match.radiant_name)}</b> vs. <b>{_escape_html(match.dire_name)}</b> "
            f"(Game {match.game_number}) · {clock}"
        ]
        if radiant_heroes:
            lines.append(f"  🟢 {_escape_html(', '.join(radiant_heroes))}")
        if dire_heroes:
            lines.append(f"  🔴 {_escape_html(', '.join(dire_heroes))}")
        blocks.append("\n".join(lines))
    return f"{title}\n\n" + "\n\n".join(blocks)


def fmt_status(league_id: int, summary: Dict[str, int], channel_count: int) -> str:
    return (
        f"📊 <b>Tracking league</b> <code>{league_id}</code>\n"
        f"📝 Drafting seen: {summary.get('drafting', 0)}\n"
        f"▶️ Started seen: {summary.get('started', 0)}\n"
        f"🏁 Finished seen: {summary.get('finished', 0)}\n"
        f"⏳ Waiting for results: {summary.get('pending_details', 0)}\n"
        f"📣 Subscribed channels: {channel_count}"
    )
