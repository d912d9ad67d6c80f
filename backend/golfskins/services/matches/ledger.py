from flask import current_app

from golfskins.errors import Conflict, Forbidden, InvalidState, NotFound
from golfskins.models import MatchStatus, PlayerStatus
from .rules import carryover_enabled, parse_rules
from .skins import apply_resolution, refresh_stakes, resolve_hole, stake_for_hole
from .validation import parse_score_input


class ScoreLedger:
    """Write-once strokes per (hole, player), with skins re-resolved on every entry."""

    def __init__(self, store, projector, settings):
        self.store = store
        self.projector = projector
        self.settings = settings

    def _require_active(self, match_id):
        match = self.store.get_match(match_id)
        if match is None:
            raise NotFound('Match not found')
        if match.status != MatchStatus.ACTIVE:
            raise InvalidState('Can only record scores for active matches')
        return match

    def record_score(self, match_id, user_id, data):
        hole_number, strokes, par = parse_score_input(data)

        match = self._require_active(match_id)
        membership = self.store.get_membership(match.id, user_id)
        if membership is None or membership.status != PlayerStatus.JOINED:
            raise Forbidden('You must be a player in this match to record scores')

        rules = parse_rules(match.game_type, match.rules_dict)
        carryover = carryover_enabled(rules)
        hole = self._get_or_create_hole(match, hole_number, par, carryover)

        if self.store.get_score(hole.id, user_id) is not None:
            raise Conflict('Score already recorded for this hole')

        # Status is re-checked with the row locked, in the same unit as the insert
        match = self.store.get_match(match.id, lock=True)
        if match is None or match.status != MatchStatus.ACTIVE:
            self.store.rollback()
            raise InvalidState('Can only record scores for active matches')
        entry = self.store.insert_score_if_absent(hole.id, user_id, strokes)
        if entry is None:
            raise Conflict('Score already recorded for this hole')

        outcome = self._resolve(match, hole, carryover)
        self.store.commit()
        current_app.logger.info(
            f"[score] match={match_id} hole={hole_number} user={user_id} strokes={strokes} skins={outcome}"
        )
        return self.projector.scores_view(match_id)

    def _get_or_create_hole(self, match, hole_number, par, carryover):
        hole = self.store.get_hole(match.id, hole_number)
        if hole is not None:
            return hole
        carried = {h.hole_number: bool(h.carryover_from_previous) for h in self.store.list_holes(match.id)}
        hole, created = self.store.create_hole_if_absent(
            match.id,
            hole_number,
            par=par,
            skin_value=stake_for_hole(match.entry_fee, hole_number, carried, carryover),
            carryover_from_previous=False,
            completed=False,
        )
        if created:
            self.store.commit()
            current_app.logger.info(f"[hole-create] match={match.id} hole={hole_number} par={par}")
        return hole

    def _resolve(self, match, hole, carryover):
        scores = self.store.list_scores_for_hole(hole.id)
        resolution = resolve_hole(scores, self.store.joined_user_ids(match.id), self.settings.skins_resolution)
        apply_resolution(hole, scores, resolution)
        current_app.logger.debug(f"[skins] match={match.id} hole={hole.hole_number} outcome={resolution.outcome}")
        # Later holes' stakes depend on this hole's carryover flag
        refresh_stakes(self.store.list_holes(match.id), match.entry_fee, from_hole=hole.hole_number, carryover=carryover)
        return resolution.outcome


def resettle_holes(store, match, policy):
    """Re-resolve every hole of ``match`` against its current roster."""
    rules = parse_rules(match.game_type, match.rules_dict)
    holes = store.list_holes(match.id)
    joined = store.joined_user_ids(match.id)
    for hole in holes:
        scores = store.list_scores_for_hole(hole.id)
        apply_resolution(hole, scores, resolve_hole(scores, joined, policy))
    refresh_stakes(holes, match.entry_fee, carryover=carryover_enabled(rules))
    return holes
