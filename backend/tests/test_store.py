from datetime import date, time

from golfskins import db
from golfskins.models import Hole, Match, MatchStatus
from golfskins.services.matches.store import MatchStore


def _match(store, host_id, code='123456', status=MatchStatus.CREATED):
    match = store.insert_match(
        host_id=host_id,
        course_name='Bethpage Black',
        date=date(2026, 6, 1),
        time=time(8, 0),
        max_players=4,
        entry_fee=10,
        game_type='standard',
        status=status,
        join_code=code,
    )
    store.commit()
    return match


def test_conditional_transition_has_one_winner(app_ctx, make_user):
    store = MatchStore()
    match = _match(store, make_user('host'))

    # Two requests that both read "created" before writing
    assert store.transition(match.id, [MatchStatus.CREATED], MatchStatus.ACTIVE)
    store.commit()
    assert not store.transition(match.id, [MatchStatus.CREATED], MatchStatus.CANCELLED)
    store.rollback()
    assert db.session.get(Match, match.id).status == MatchStatus.ACTIVE


def test_join_code_unique_only_among_live_matches(app_ctx, make_user):
    store = MatchStore()
    host_id = make_user('host')
    first = _match(store, host_id, code='654321')
    assert store.insert_match(
        host_id=host_id, course_name='Dup', date=date(2026, 6, 1), time=time(8, 0),
        max_players=2, entry_fee=0, game_type='standard', status=MatchStatus.CREATED, join_code='654321',
    ) is None

    store.transition(first.id, MatchStatus.LIVE, MatchStatus.CANCELLED)
    store.commit()
    assert not store.join_code_in_use('654321')
    second = _match(store, host_id, code='654321')
    assert store.find_live_match_by_code('654321').id == second.id


def test_create_hole_if_absent_returns_existing_row(app_ctx, make_user):
    store = MatchStore()
    match = _match(store, make_user('host'))
    hole, created = store.create_hole_if_absent(match.id, 4, par=3, skin_value=10)
    store.commit()
    assert created

    again, created_again = store.create_hole_if_absent(match.id, 4, par=5, skin_value=99)
    assert not created_again
    assert again.id == hole.id
    assert again.par == 3
    assert Hole.query.filter_by(match_id=match.id).count() == 1


def test_duplicate_inserts_report_none(app_ctx, make_user):
    store = MatchStore()
    host_id = make_user('host')
    match = _match(store, host_id)
    assert store.insert_membership(match.id, host_id) is not None
    store.commit()
    assert store.insert_membership(match.id, host_id) is None

    hole, _ = store.create_hole_if_absent(match.id, 1, par=4, skin_value=10)
    store.commit()
    assert store.insert_score_if_absent(hole.id, host_id, 4) is not None
    store.commit()
    assert store.insert_score_if_absent(hole.id, host_id, 3) is None
    assert [s.score for s in store.list_scores_for_hole(hole.id)] == [4]


def test_delete_only_while_created(app_ctx, make_user):
    store = MatchStore()
    host_id = make_user('host')
    match = _match(store, host_id)
    store.insert_membership(match.id, host_id)
    store.create_hole_if_absent(match.id, 1, par=4, skin_value=0)
    store.commit()

    store.transition(match.id, [MatchStatus.CREATED], MatchStatus.ACTIVE)
    store.commit()
    assert not store.delete_match_if_status(match.id, MatchStatus.CREATED)
    assert store.count_joined(match.id) == 1
    assert len(store.list_holes(match.id)) == 1
