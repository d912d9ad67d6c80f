"""Match domain services: lifecycle, roster, score ledger and skins.

Blueprints call into ``MatchService``; nothing here knows about HTTP. The
service is built once per app from an explicit ``MatchSettings`` and a course
client, and reads all state from the database on every call.
"""
from .ledger import ScoreLedger
from .lifecycle import MatchLifecycle
from .projector import MatchProjector
from .roster import Roster
from .settings import MatchSettings
from .store import MatchStore
from .validation import parse_listing


class MatchService:

    def __init__(self, settings: MatchSettings, course_client, store: MatchStore = None):
        self.settings = settings
        self.course_client = course_client
        self.store = store or MatchStore()
        self.projector = MatchProjector(self.store, settings)
        self.lifecycle = MatchLifecycle(self.store, self.projector, settings, course_client)
        self.roster = Roster(self.store, self.projector, settings)
        self.ledger = ScoreLedger(self.store, self.projector, settings)

    # lifecycle
    def create_match(self, user_id, data):
        return self.lifecycle.create_match(user_id, data)

    def create_match_with_course(self, user_id, data):
        return self.lifecycle.create_match_with_course(user_id, data)

    def update_match(self, match_id, user_id, data):
        return self.lifecycle.update_match(match_id, user_id, data)

    def delete_match(self, match_id, user_id):
        return self.lifecycle.delete_match(match_id, user_id)

    def start(self, match_id, user_id):
        return self.lifecycle.start(match_id, user_id)

    def complete(self, match_id, user_id):
        return self.lifecycle.complete(match_id, user_id)

    def cancel(self, match_id, user_id):
        return self.lifecycle.cancel(match_id, user_id)

    # roster
    def join(self, match_id, user_id):
        return self.roster.join(match_id, user_id)

    def join_by_code(self, join_code, user_id):
        return self.roster.join_by_code(join_code, user_id)

    def leave(self, match_id, user_id):
        return self.roster.leave(match_id, user_id)

    # scores
    def record_score(self, match_id, user_id, data):
        return self.ledger.record_score(match_id, user_id, data)

    # read views
    def list_matches(self, page=None, limit=None, status=None, date=None):
        page, limit, status, date = parse_listing(
            page, limit, status, date,
            self.settings.list_default_limit,
            self.settings.list_max_limit,
        )
        return self.projector.list_view(page, limit, status=status, date=date)

    def get_match(self, match_id):
        return self.projector.match_view(match_id)

    def get_scores(self, match_id):
        return self.projector.scores_view(match_id)

    def get_scorecard(self, match_id):
        return self.projector.scorecard_view(match_id)


__all__ = ['MatchService', 'MatchSettings', 'MatchStore']
