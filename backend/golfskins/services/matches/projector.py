from collections import defaultdict
from decimal import Decimal

from golfskins.errors import NotFound
from golfskins.models import PlayerStatus


class MatchProjector:
    """Read views over a match, its roster and its holes. Never writes."""

    def __init__(self, store, settings):
        self.store = store
        self.settings = settings

    def _require_match(self, match_id):
        match = self.store.get_match(match_id)
        if match is None:
            raise NotFound('Match not found')
        return match

    def build_match_view(self, match, memberships=None):
        if memberships is None:
            memberships = self.store.list_memberships(match.id)
        payload = match.to_dict()
        payload['players'] = [m.to_dict() for m in memberships]
        payload['current_players'] = sum(1 for m in memberships if m.status == PlayerStatus.JOINED)
        return payload

    def match_view(self, match_id):
        return self.build_match_view(self._require_match(match_id))

    def list_view(self, page, limit, status=None, date=None):
        matches, total = self.store.list_matches(page, limit, status=status, date=date)
        return {
            'matches': [self.build_match_view(m) for m in matches],
            'total': total,
            'page': page,
            'limit': limit,
        }

    def scores_view(self, match_id):
        match = self._require_match(match_id)
        holes = self.store.list_holes(match.id)
        by_hole = defaultdict(list)
        for entry in self.store.list_scores_for_match(match.id):
            by_hole[entry.hole_id].append(entry)

        holes_payload = []
        total_skins = 0
        for hole in holes:
            entries = by_hole.get(hole.id, [])
            total_skins += sum(1 for e in entries if e.is_skin_winner)
            hole_payload = hole.to_dict()
            hole_payload['scores'] = [e.to_dict() for e in entries]
            holes_payload.append(hole_payload)

        return {
            'match_id': match.id,
            'match_status': match.status,
            'holes': holes_payload,
            'total_skins': total_skins,
            'completed_holes': sum(1 for h in holes if h.completed),
        }

    def scorecard_view(self, match_id):
        match = self._require_match(match_id)
        holes = self.store.list_holes(match.id)
        memberships = self.store.list_memberships(match.id)
        entries = {(e.hole_id, e.user_id): e for e in self.store.list_scores_for_match(match.id)}

        skins_won = defaultdict(int)
        value_won = defaultdict(Decimal)
        scorecard = []
        for hole in holes:
            row_scores = []
            for member in memberships:
                entry = entries.get((hole.id, member.user_id))
                won = bool(entry and entry.is_skin_winner)
                if won:
                    skins_won[member.user_id] += 1
                    value_won[member.user_id] += Decimal(str(hole.skin_value or 0))
                row_scores.append({
                    'user_id': member.user_id,
                    'name': member.user.display_name if member.user else 'Unknown Player',
                    'strokes': entry.score if entry else None,
                    'is_skin_winner': won,
                })
            scorecard.append({
                'hole_number': hole.hole_number,
                'par': hole.par,
                'stroke_index': hole.stroke_index,
                'distance': hole.distance,
                'skin_value': float(hole.skin_value or 0),
                'carryover_from_previous': hole.carryover_from_previous,
                'completed': hole.completed,
                'scores': row_scores,
            })

        players = [
            {
                'user_id': m.user_id,
                'name': m.user.display_name if m.user else 'Unknown Player',
                'status': m.status,
                'skins_won': skins_won.get(m.user_id, 0),
                'skin_value_won': float(value_won.get(m.user_id, Decimal('0'))),
            }
            for m in memberships
        ]
        return {
            'match_id': match.id,
            'course_name': match.course_name,
            'match_status': match.status,
            'scorecard': scorecard,
            'players': players,
            'total_skins': sum(skins_won.values()),
            'completed_holes': sum(1 for h in holes if h.completed),
        }
