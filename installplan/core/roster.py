from __future__ import annotations

from typing import Iterable

from installplan.core.calendar import iter_days, parse_day_key
from installplan.core.errors import RosterError

PAIR_SEPARATOR = " + "


def pair_name(first: str, second: str) -> str:
    first = (first or "").strip()
    second = (second or "").strip()
    if not first or not second:
        raise RosterError("a team needs two installers")
    if first == second:
        raise RosterError("a team needs two different installers")
    return f"{first}{PAIR_SEPARATOR}{second}"


def split_pair(team: str) -> list[str]:
    return [name.strip() for name in team.split(PAIR_SEPARATOR.strip()) if name.strip()]


def _check_range(start: str | None, end: str | None) -> None:
    if not start or not end:
        raise RosterError("start and end dates are required")
    try:
        first, last = parse_day_key(start), parse_day_key(end)
    except ValueError as exc:
        raise RosterError(str(exc)) from exc
    if last < first:
        raise RosterError("end date is before start date")


def apply_team_pairs(
    teams: dict[str, list[str]],
    start: str | None,
    end: str | None,
    pairs: Iterable[str],
) -> dict[str, list[str]]:
    """Give every day from ``start`` to ``end`` exactly ``pairs``.

    Days outside the range keep their lists; days inside are overwritten.
    """

    _check_range(start, end)
    pairs = [pair.strip() for pair in pairs if pair and pair.strip()]
    if not pairs:
        raise RosterError("at least one team pair is required")
    if len(set(pairs)) != len(pairs):
        raise RosterError("duplicate team pairs")

    updated = {day: list(names) for day, names in teams.items()}
    for day in iter_days(start, end):
        updated[day] = list(pairs)
    return updated


def clear_team_days(teams: dict[str, list[str]], start: str | None, end: str | None) -> dict[str, list[str]]:
    _check_range(start, end)
    updated = {day: list(names) for day, names in teams.items()}
    for day in iter_days(start, end):
        updated[day] = []
    return updated
