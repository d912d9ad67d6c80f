"""Persistence operations the match services rely on.

Every write that can race with another request is expressed either as a
conditional statement (``UPDATE/DELETE ... WHERE status = :expected``) whose
row count says whether it won, or as an insert guarded by a unique
constraint. Callers get distinct outcomes (row, None, True/False) instead of
database exceptions.

Inserts that report a conflict roll back the current unit of work, so they
must be the first write of that unit.
"""
from typing import Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from golfskins import db
from golfskins.models import Hole, HoleScore, Match, MatchPlayer, MatchStatus, PlayerStatus, utcnow


class MatchStore:

    def __init__(self, session=None):
        self._session = session

    @property
    def session(self):
        return self._session if self._session is not None else db.session

    # ---- unit of work ----
    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    def _insert(self, row):
        self.session.add(row)
        try:
            self.session.flush()
        except IntegrityError:
            self.session.rollback()
            return None
        return row

    # ---- matches ----
    def get_match(self, match_id: int, lock: bool = False) -> Optional[Match]:
        query = Match.query.filter_by(id=match_id)
        if lock:
            # Serialises roster and ledger writes per match where the backend supports it
            query = query.with_for_update()
        return query.populate_existing().first()

    def find_live_match_by_code(self, join_code: str) -> Optional[Match]:
        return (
            Match.query
            .filter(Match.join_code == join_code, Match.status.in_(MatchStatus.LIVE))
            .first()
        )

    def join_code_in_use(self, join_code: str) -> bool:
        return self.find_live_match_by_code(join_code) is not None

    def insert_match(self, **values) -> Optional[Match]:
        """Insert a match; None when its join code collided with a live match."""
        return self._insert(Match(**values))

    def list_matches(self, page: int, limit: int, status: Optional[str] = None, date=None) -> Tuple[List[Match], int]:
        query = Match.query
        if status:
            query = query.filter(Match.status == status)
        if date:
            query = query.filter(Match.date == date)
        total = query.count()
        items = (
            query.order_by(Match.created_at.desc(), Match.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )
        return items, total

    def update_match_if_status(self, match_id: int, expected: Sequence[str], values: dict) -> bool:
        """Compare-and-set on the match row; True when a row was written."""
        values = dict(values)
        values.setdefault('updated_at', utcnow())
        changed = (
            Match.query
            .filter(Match.id == match_id, Match.status.in_(tuple(expected)))
            .update(values, synchronize_session=False)
        )
        return changed > 0

    def transition(self, match_id: int, expected: Sequence[str], new_status: str) -> bool:
        return self.update_match_if_status(match_id, expected, {'status': new_status})

    def delete_match_if_status(self, match_id: int, expected: str) -> bool:
        hole_ids = [h.id for h in Hole.query.with_entities(Hole.id).filter(Hole.match_id == match_id)]
        if hole_ids:
            HoleScore.query.filter(HoleScore.hole_id.in_(hole_ids)).delete(synchronize_session=False)
        Hole.query.filter_by(match_id=match_id).delete(synchronize_session=False)
        MatchPlayer.query.filter_by(match_id=match_id).delete(synchronize_session=False)
        deleted = (
            Match.query
            .filter(Match.id == match_id, Match.status == expected)
            .delete(synchronize_session=False)
        )
        if not deleted:
            # The match moved on (or vanished); keep its children
            self.session.rollback()
            return False
        return True

    # ---- memberships ----
    def get_membership(self, match_id: int, user_id: int) -> Optional[MatchPlayer]:
        return MatchPlayer.query.filter_by(match_id=match_id, user_id=user_id).populate_existing().first()

    def list_memberships(self, match_id: int) -> List[MatchPlayer]:
        return MatchPlayer.query.filter_by(match_id=match_id).order_by(MatchPlayer.id).all()

    def count_joined(self, match_id: int) -> int:
        return (
            self.session.query(func.count(MatchPlayer.id))
            .filter(MatchPlayer.match_id == match_id, MatchPlayer.status == PlayerStatus.JOINED)
            .scalar()
        )

    def joined_user_ids(self, match_id: int) -> set:
        rows = (
            MatchPlayer.query.with_entities(MatchPlayer.user_id)
            .filter(MatchPlayer.match_id == match_id, MatchPlayer.status == PlayerStatus.JOINED)
        )
        return {r.user_id for r in rows}

    def insert_membership(self, match_id: int, user_id: int) -> Optional[MatchPlayer]:
        """Insert a Joined membership; None when one already exists for the pair."""
        return self._insert(MatchPlayer(
            match_id=match_id,
            user_id=user_id,
            status=PlayerStatus.JOINED,
            entry_fee_paid=False,
        ))

    def set_membership_status(self, membership_id: int, expected: str, new_status: str) -> bool:
        changed = (
            MatchPlayer.query
            .filter(MatchPlayer.id == membership_id, MatchPlayer.status == expected)
            .update({'status': new_status}, synchronize_session=False)
        )
        return changed > 0

    # ---- holes ----
    def get_hole(self, match_id: int, hole_number: int) -> Optional[Hole]:
        return Hole.query.filter_by(match_id=match_id, hole_number=hole_number).populate_existing().first()

    def list_holes(self, match_id: int) -> List[Hole]:
        return Hole.query.filter_by(match_id=match_id).order_by(Hole.hole_number).all()

    def create_hole_if_absent(self, match_id: int, hole_number: int, **values) -> Tuple[Hole, bool]:
        """Return ``(hole, created)``; a lost insert race reads the winner's row."""
        hole = self.get_hole(match_id, hole_number)
        if hole is not None:
            return hole, False
        hole = self._insert(Hole(match_id=match_id, hole_number=hole_number, **values))
        if hole is not None:
            return hole, True
        return self.get_hole(match_id, hole_number), False

    def insert_holes(self, match_id: int, rows: Iterable[dict]) -> bool:
        for values in rows:
            self.session.add(Hole(match_id=match_id, **values))
        try:
            self.session.flush()
        except IntegrityError:
            self.session.rollback()
            return False
        return True

    # ---- scores ----
    def get_score(self, hole_id: int, user_id: int) -> Optional[HoleScore]:
        return HoleScore.query.filter_by(hole_id=hole_id, user_id=user_id).first()

    def insert_score_if_absent(self, hole_id: int, user_id: int, score: int) -> Optional[HoleScore]:
        """Insert a score entry; None when (hole, user) already has one."""
        return self._insert(HoleScore(hole_id=hole_id, user_id=user_id, score=score, is_skin_winner=False))

    def list_scores_for_hole(self, hole_id: int) -> List[HoleScore]:
        return HoleScore.query.filter_by(hole_id=hole_id).order_by(HoleScore.id).populate_existing().all()

    def list_scores_for_match(self, match_id: int) -> List[HoleScore]:
        return (
            HoleScore.query.join(Hole, HoleScore.hole_id == Hole.id)
            .filter(Hole.match_id == match_id)
            .order_by(Hole.hole_number, HoleScore.id)
            .all()
        )
