from flask import current_app

from golfskins.errors import Conflict, Forbidden, Full, InvalidState, NotFound
from golfskins.models import MatchStatus, PlayerStatus
from .ledger import resettle_holes
from .validation import parse_join_code


class Roster:
    """Joining and leaving matches.

    Writes membership rows, plus hole flags and stakes when a player leaves an
    active match.
    """

    def __init__(self, store, projector, settings):
        self.store = store
        self.projector = projector
        self.settings = settings

    def join(self, match_id, user_id):
        match = self.store.get_match(match_id, lock=True)
        if match is None:
            raise NotFound('Match not found')
        return self._join(match, user_id)

    def join_by_code(self, join_code, user_id):
        code = parse_join_code(join_code)
        match = self.store.find_live_match_by_code(code)
        if match is None:
            raise NotFound('Match not found with this join code')
        match = self.store.get_match(match.id, lock=True)
        if match is None:
            raise NotFound('Match not found with this join code')
        return self._join(match, user_id)

    def _join(self, match, user_id):
        if match.status != MatchStatus.CREATED:
            self.store.rollback()
            raise InvalidState('Cannot join match that is not in created status')

        membership = self.store.get_membership(match.id, user_id)
        if membership is not None and membership.status == PlayerStatus.JOINED:
            self.store.rollback()
            raise Conflict('Already joined this match')
        if membership is not None and membership.status == PlayerStatus.REMOVED:
            self.store.rollback()
            raise Forbidden('You were removed from this match')

        if self.store.count_joined(match.id) >= match.max_players:
            self.store.rollback()
            raise Full('Match is full')

        if membership is not None:
            if not self.store.set_membership_status(membership.id, PlayerStatus.LEFT, PlayerStatus.JOINED):
                self.store.rollback()
                raise Conflict('Already joined this match')
            action = 'rejoin'
        else:
            if self.store.insert_membership(match.id, user_id) is None:
                raise Conflict('Already joined this match')
            action = 'join'

        # Capacity holds after the write, within the same unit
        if self.store.count_joined(match.id) > match.max_players:
            self.store.rollback()
            raise Full('Match is full')

        self.store.commit()
        current_app.logger.info(f"[{action}] match={match.id} user={user_id}")
        return self.projector.match_view(match.id)

    def leave(self, match_id, user_id):
        match = self.store.get_match(match_id, lock=True)
        if match is None:
            raise NotFound('Match not found')
        membership = self.store.get_membership(match.id, user_id)
        if membership is None:
            raise NotFound('Not a member of this match')
        if membership.status != PlayerStatus.JOINED:
            raise InvalidState('Not currently joined to this match')
        if match.host_id == user_id:
            raise Forbidden('Host cannot leave the match; cancel or delete it instead')

        if not self.store.set_membership_status(membership.id, PlayerStatus.JOINED, PlayerStatus.LEFT):
            self.store.rollback()
            raise InvalidState('Not currently joined to this match')
        if match.status == MatchStatus.ACTIVE:
            # Holes that were only waiting on the departed player settle now
            resettle_holes(self.store, match, self.settings.skins_resolution)
        self.store.commit()
        current_app.logger.info(f"[leave] match={match.id} user={user_id}")
        return self.projector.match_view(match.id)
