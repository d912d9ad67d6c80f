"""Skins resolution.

A hole is won outright by the single player holding the lowest score. Ties at
the lowest score carry the hole's stake forward. Resolution is a full
recomputation from the recorded scores every time it runs, so repeated or
reordered runs always land on the same flags.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Mapping, Optional, Sequence

from .settings import RESOLVE_PROVISIONAL


OUTCOME_EMPTY = 'empty'
OUTCOME_PENDING = 'pending'
OUTCOME_TIE = 'tie'
OUTCOME_WINNER = 'winner'


@dataclass(frozen=True)
class HoleResolution:
    outcome: str
    winner_score_id: Optional[int] = None
    low_score: Optional[int] = None

    @property
    def completed(self) -> bool:
        return self.outcome == OUTCOME_WINNER

    @property
    def carryover(self) -> bool:
        return self.outcome == OUTCOME_TIE


def resolve_hole(scores: Sequence, joined_user_ids: Iterable[int], policy: str) -> HoleResolution:
    """Decide a hole from its score entries (objects with id, user_id, score)."""
    if not scores:
        return HoleResolution(OUTCOME_EMPTY)
    if policy != RESOLVE_PROVISIONAL:
        scored = {s.user_id for s in scores}
        if not set(joined_user_ids) <= scored:
            return HoleResolution(OUTCOME_PENDING)
    low = min(s.score for s in scores)
    winners = [s for s in scores if s.score == low]
    if len(winners) > 1:
        return HoleResolution(OUTCOME_TIE, low_score=low)
    return HoleResolution(OUTCOME_WINNER, winner_score_id=winners[0].id, low_score=low)


def apply_resolution(hole, scores: Sequence, resolution: HoleResolution) -> None:
    for entry in scores:
        entry.is_skin_winner = entry.id == resolution.winner_score_id
    hole.completed = resolution.completed
    hole.carryover_from_previous = resolution.carryover


def carried_holes_before(hole_number: int, carried_by_number: Mapping[int, bool]) -> int:
    """Count consecutive carried-over holes immediately preceding ``hole_number``."""
    count = 0
    number = hole_number - 1
    while number >= 1 and carried_by_number.get(number):
        count += 1
        number -= 1
    return count


def stake_for_hole(entry_fee, hole_number: int, carried_by_number: Mapping[int, bool], carryover: bool = True) -> Decimal:
    """Base stake plus one base stake per consecutive tied hole before it."""
    base = Decimal(str(entry_fee or 0))
    if not carryover:
        return base
    return base * (1 + carried_holes_before(hole_number, carried_by_number))


def refresh_stakes(holes: Sequence, entry_fee, from_hole: int = 1, carryover: bool = True) -> list:
    """Recompute ``skin_value`` for every hole numbered ``from_hole`` or later.

    Returns the holes whose stake changed.
    """
    carried = {h.hole_number: bool(h.carryover_from_previous) for h in holes}
    changed = []
    for hole in holes:
        if hole.hole_number < from_hole:
            continue
        stake = stake_for_hole(entry_fee, hole.hole_number, carried, carryover)
        if hole.skin_value is None or Decimal(str(hole.skin_value)) != stake:
            hole.skin_value = stake
            changed.append(hole)
    return changed
