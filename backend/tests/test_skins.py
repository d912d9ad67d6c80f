from collections import namedtuple
from decimal import Decimal
import itertools

from golfskins.services.matches.settings import RESOLVE_ALL_PLAYERS, RESOLVE_PROVISIONAL
from golfskins.services.matches.skins import (
    OUTCOME_EMPTY,
    OUTCOME_PENDING,
    OUTCOME_TIE,
    OUTCOME_WINNER,
    apply_resolution,
    carried_holes_before,
    refresh_stakes,
    resolve_hole,
    stake_for_hole,
)


Entry = namedtuple('Entry', 'id user_id score')


class Row:
    def __init__(self, id, user_id, score):
        self.id = id
        self.user_id = user_id
        self.score = score
        self.is_skin_winner = False


class FakeHole:
    def __init__(self, hole_number, carryover=False, skin_value=None):
        self.hole_number = hole_number
        self.carryover_from_previous = carryover
        self.completed = False
        self.skin_value = skin_value


def test_no_scores_is_a_no_op():
    assert resolve_hole([], [1, 2], RESOLVE_PROVISIONAL).outcome == OUTCOME_EMPTY


def test_unique_minimum_wins():
    entries = [Entry(10, 1, 4), Entry(11, 2, 3), Entry(12, 3, 5)]
    result = resolve_hole(entries, [1, 2, 3], RESOLVE_ALL_PLAYERS)
    assert result.outcome == OUTCOME_WINNER
    assert result.winner_score_id == 11
    assert result.completed and not result.carryover


def test_tie_at_minimum_carries():
    entries = [Entry(10, 1, 4), Entry(11, 2, 4), Entry(12, 3, 5)]
    result = resolve_hole(entries, [1, 2, 3], RESOLVE_PROVISIONAL)
    assert result.outcome == OUTCOME_TIE
    assert result.carryover and not result.completed
    assert result.winner_score_id is None


def test_all_players_policy_waits():
    entries = [Entry(10, 1, 3)]
    assert resolve_hole(entries, [1, 2], RESOLVE_ALL_PLAYERS).outcome == OUTCOME_PENDING
    assert resolve_hole(entries, [1, 2], RESOLVE_PROVISIONAL).outcome == OUTCOME_WINNER


def test_scores_from_departed_players_still_count():
    entries = [Entry(10, 1, 4), Entry(11, 9, 3)]
    result = resolve_hole(entries, [1], RESOLVE_ALL_PLAYERS)
    assert result.winner_score_id == 11


def test_resolution_is_order_independent():
    base = [Entry(1, 1, 5), Entry(2, 2, 4), Entry(3, 3, 4), Entry(4, 4, 6)]
    outcomes = {resolve_hole(list(p), [1, 2, 3, 4], RESOLVE_ALL_PLAYERS) for p in itertools.permutations(base)}
    assert len(outcomes) == 1


def test_apply_resolution_resets_stale_flags():
    hole = FakeHole(1)
    rows = [Row(1, 1, 4), Row(2, 2, 5)]
    apply_resolution(hole, rows, resolve_hole(rows, [1, 2], RESOLVE_PROVISIONAL))
    assert [r.is_skin_winner for r in rows] == [True, False]
    assert hole.completed is True

    rows.append(Row(3, 3, 4))
    apply_resolution(hole, rows, resolve_hole(rows, [1, 2, 3], RESOLVE_PROVISIONAL))
    assert [r.is_skin_winner for r in rows] == [False, False, False]
    assert hole.completed is False
    assert hole.carryover_from_previous is True


def test_carried_holes_before_counts_consecutive_run():
    carried = {1: True, 2: False, 3: True, 4: True}
    assert carried_holes_before(1, carried) == 0
    assert carried_holes_before(3, carried) == 0
    assert carried_holes_before(5, carried) == 2
    # A missing hole breaks the run
    assert carried_holes_before(7, {5: True}) == 0


def test_stake_for_hole():
    carried = {1: True, 2: True}
    assert stake_for_hole(10, 3, carried) == Decimal('30')
    assert stake_for_hole(10, 3, carried, carryover=False) == Decimal('10')
    assert stake_for_hole(Decimal('2.50'), 2, carried) == Decimal('5.00')
    assert stake_for_hole(None, 2, carried) == Decimal('0')


def test_refresh_stakes_only_touches_later_holes():
    holes = [FakeHole(1, carryover=True, skin_value=Decimal('99')), FakeHole(2, skin_value=Decimal('10')), FakeHole(3)]
    changed = refresh_stakes(holes, 10, from_hole=2)
    assert holes[0].skin_value == Decimal('99')
    assert holes[1].skin_value == Decimal('20')
    assert holes[2].skin_value == Decimal('10')
    assert changed == holes[1:]
