"""Match lifecycle: creation, host edits and status transitions.

    created --start--> active --complete--> completed
    created/active --cancel--> cancelled

Every status-dependent write is a conditional update on the match row; the
row count decides a race between two host requests, and the loser gets
``InvalidState``.
"""
import json

from flask import current_app

from golfskins.errors import Forbidden, Invalid, InvalidState, NotFound
from golfskins.models import MatchStatus
from golfskins.services.courses import course_summary, hole_layout, require_tee
from .join_codes import allocate_join_code
from .rules import carryover_enabled, parse_rules
from .skins import refresh_stakes
from .validation import parse_match_fields


class MatchLifecycle:

    def __init__(self, store, projector, settings, course_client):
        self.store = store
        self.projector = projector
        self.settings = settings
        self.course_client = course_client

    # ---- creation ----
    def create_match(self, host_id, data):
        values = parse_match_fields(data)
        match = self._insert_match(host_id, values)
        self._add_host(match.id, host_id)
        return self.projector.match_view(match.id)

    def create_match_with_course(self, host_id, data):
        if not isinstance(data, dict):
            raise Invalid('Request body must be a JSON object')
        data = dict(data)
        course_id = data.pop('course_id', None)
        tee_id = data.pop('tee_id', None)
        if not course_id or not tee_id:
            raise Invalid('course_id and tee_id are required')
        values = parse_match_fields(data, require_course_name=False)

        # Course lookup happens before anything is written
        course = self.course_client.get_course(course_id)
        tee = require_tee(course, tee_id)
        summary = course_summary(course, tee)
        values['course_name'] = f"{summary['course_name']} - {summary['tee_name']}" if summary['tee_name'] else summary['course_name']
        if summary['location'] and not values.get('location'):
            values['location'] = summary['location']
        values['course_id'] = str(course_id)
        values['tee_id'] = str(tee_id)

        match = self._insert_match(host_id, values)
        self._add_host(match.id, host_id)
        self._seed_holes(match.id, values['entry_fee'], hole_layout(course, tee))
        return self.projector.match_view(match.id)

    def _insert_match(self, host_id, values):
        def try_code(code):
            if self.store.join_code_in_use(code):
                return None
            return self.store.insert_match(
                host_id=host_id,
                join_code=code,
                status=MatchStatus.CREATED,
                **values,
            )

        match = allocate_join_code(try_code, self.settings.join_code_attempts)
        self.store.commit()
        current_app.logger.info(f"[match-create] match={match.id} host={host_id} code={match.join_code}")
        return match

    def _add_host(self, match_id, host_id):
        if self.store.insert_membership(match_id, host_id) is None:
            current_app.logger.warning(f"[match-create] match={match_id} host membership not recorded for user={host_id}")
            return
        self.store.commit()

    def _seed_holes(self, match_id, entry_fee, layout):
        rows = [dict(row, skin_value=entry_fee) for row in layout]
        if not self.store.insert_holes(match_id, rows):
            current_app.logger.warning(f"[match-create] match={match_id} hole seeding failed; holes will be created on first score")
            return
        self.store.commit()

    # ---- host-only edits ----
    def _require_hosted_match(self, match_id, user_id, action):
        match = self.store.get_match(match_id)
        if match is None:
            raise NotFound('Match not found')
        if match.host_id != user_id:
            raise Forbidden(f"Only the host can {action} the match")
        return match

    def _lost_race(self, match_id, message):
        self.store.rollback()
        if self.store.get_match(match_id) is None:
            raise NotFound('Match not found')
        raise InvalidState(message)

    def update_match(self, match_id, user_id, data):
        match = self._require_hosted_match(match_id, user_id, 'update')
        if match.status != MatchStatus.CREATED:
            raise InvalidState('Cannot update match that is not in created status')

        values = parse_match_fields(
            data,
            partial=True,
            current_game_type=match.game_type,
            current_rules=match.rules_dict,
        )
        if not values:
            return self.projector.match_view(match.id)
        if 'max_players' in values and values['max_players'] < self.store.count_joined(match.id):
            raise Invalid('max_players cannot be below the number of joined players')

        if not self.store.update_match_if_status(match.id, [MatchStatus.CREATED], values):
            self._lost_race(match.id, 'Cannot update match that is not in created status')

        if 'entry_fee' in values or 'rules' in values:
            rules_json = values.get('rules') or match.rules
            rules = parse_rules(values.get('game_type', match.game_type), json.loads(rules_json) if rules_json else {})
            refresh_stakes(
                self.store.list_holes(match.id),
                values.get('entry_fee', match.entry_fee),
                carryover=carryover_enabled(rules),
            )
        self.store.commit()
        current_app.logger.info(f"[match-update] match={match.id} fields={','.join(sorted(values))}")
        return self.projector.match_view(match.id)

    def delete_match(self, match_id, user_id):
        match = self._require_hosted_match(match_id, user_id, 'delete')
        if match.status != MatchStatus.CREATED:
            raise InvalidState('Cannot delete match that is not in created status')
        if not self.store.delete_match_if_status(match.id, MatchStatus.CREATED):
            self._lost_race(match_id, 'Cannot delete match that is not in created status')
        self.store.commit()
        current_app.logger.info(f"[match-delete] match={match_id} host={user_id}")
        return {'message': 'Match deleted successfully'}

    # ---- transitions ----
    def _transition(self, match_id, user_id, action, expected, new_status, message):
        match = self._require_hosted_match(match_id, user_id, action)
        if match.status not in expected:
            raise InvalidState(message)
        if not self.store.transition(match.id, expected, new_status):
            self._lost_race(match.id, message)
        self.store.commit()
        current_app.logger.info(f"[match-{action}] match={match_id} host={user_id} status={new_status}")
        return self.projector.match_view(match_id)

    def start(self, match_id, user_id):
        return self._transition(
            match_id, user_id, 'start',
            (MatchStatus.CREATED,), MatchStatus.ACTIVE,
            'Match must be in created status to start',
        )

    def complete(self, match_id, user_id):
        return self._transition(
            match_id, user_id, 'complete',
            (MatchStatus.ACTIVE,), MatchStatus.COMPLETED,
            'Match must be active to complete',
        )

    def cancel(self, match_id, user_id):
        return self._transition(
            match_id, user_id, 'cancel',
            MatchStatus.LIVE, MatchStatus.CANCELLED,
            'Match can only be cancelled if created or active',
        )
