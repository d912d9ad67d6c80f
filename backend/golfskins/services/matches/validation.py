"""Input parsing for match operations. Everything malformed raises ``Invalid``."""
from datetime import date as date_cls, datetime, time as time_cls
from decimal import Decimal, InvalidOperation
import json
import re

from golfskins.errors import Invalid
from golfskins.models import GameType, MatchStatus
from .rules import parse_rules, rules_to_dict


MIN_PLAYERS = 2
MAX_PLAYERS = 8
FIRST_HOLE = 1
LAST_HOLE = 18
MIN_PAR = 1
MAX_PAR = 6

_JOIN_CODE_RE = re.compile(r'^\d{6}$')

# Fields a host may set on create and change while the match is still forming
EDITABLE_FIELDS = ('course_name', 'location', 'date', 'time', 'max_players', 'entry_fee', 'game_type', 'rules')


def _int(value, name):
    if isinstance(value, bool):
        raise Invalid(f"{name} must be an integer")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, str) and value.strip().lstrip('-').isdigit():
        value = int(value)
    if not isinstance(value, int):
        raise Invalid(f"{name} must be an integer")
    return value


def _text(value, name, required=True):
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise Invalid(f"{name} is required")
        return None
    if not isinstance(value, str):
        raise Invalid(f"{name} must be a string")
    return value.strip()


def parse_date(value, name='date'):
    if isinstance(value, date_cls):
        return value
    try:
        return date_cls.fromisoformat(_text(value, name))
    except ValueError:
        raise Invalid(f"{name} must be an ISO date (YYYY-MM-DD)")


def parse_time(value, name='time'):
    if isinstance(value, time_cls):
        return value
    raw = _text(value, name)
    for fmt in ('%H:%M', '%H:%M:%S'):
        try:
            return datetime.strptime(raw, fmt).time()
        except ValueError:
            continue
    raise Invalid(f"{name} must be a time (HH:MM)")


def parse_max_players(value):
    players = _int(value, 'max_players')
    if not MIN_PLAYERS <= players <= MAX_PLAYERS:
        raise Invalid(f"max_players must be between {MIN_PLAYERS} and {MAX_PLAYERS}")
    return players


def parse_entry_fee(value):
    if isinstance(value, bool) or value is None:
        raise Invalid('entry_fee must be a number')
    try:
        fee = Decimal(str(value))
    except InvalidOperation:
        raise Invalid('entry_fee must be a number')
    if not fee.is_finite() or fee < 0:
        raise Invalid('entry_fee must be zero or more')
    return fee.quantize(Decimal('0.01'))


def parse_game_type(value):
    if value not in GameType.ALL:
        raise Invalid(f"game_type must be one of {', '.join(GameType.ALL)}")
    return value


def parse_match_fields(data, partial=False, current_game_type=None, current_rules=None, require_course_name=True):
    """Validate create/update input and return column values.

    ``partial`` is used for updates: only supplied fields are returned, and
    rules are re-validated whenever either rules or game_type change.
    """
    if not isinstance(data, dict):
        raise Invalid('Request body must be a JSON object')
    if 'status' in data:
        raise Invalid('status cannot be set directly; use start, complete or cancel')
    unknown = set(data) - set(EDITABLE_FIELDS)
    if unknown:
        raise Invalid(f"Unknown fields: {', '.join(sorted(unknown))}")

    values = {}
    if not partial or 'course_name' in data:
        if require_course_name or 'course_name' in data:
            values['course_name'] = _text(data.get('course_name'), 'course_name')
    if 'location' in data:
        values['location'] = _text(data.get('location'), 'location', required=False)
    if not partial or 'date' in data:
        values['date'] = parse_date(data.get('date'))
    if not partial or 'time' in data:
        values['time'] = parse_time(data.get('time'))
    if not partial or 'max_players' in data:
        values['max_players'] = parse_max_players(data.get('max_players'))
    if not partial or 'entry_fee' in data:
        values['entry_fee'] = parse_entry_fee(data.get('entry_fee'))

    game_type = current_game_type
    if not partial or 'game_type' in data:
        game_type = values['game_type'] = parse_game_type(data.get('game_type', GameType.STANDARD))
    if not partial or 'rules' in data or 'game_type' in data:
        raw_rules = data.get('rules') if 'rules' in data else current_rules
        values['rules'] = json.dumps(rules_to_dict(parse_rules(game_type, raw_rules)))
    return values


def parse_score_input(data):
    if not isinstance(data, dict):
        raise Invalid('Request body must be a JSON object')
    for key in ('hole_number', 'score', 'par'):
        if data.get(key) is None:
            raise Invalid(f"{key} is required")
    hole_number = _int(data['hole_number'], 'hole_number')
    score = _int(data['score'], 'score')
    par = _int(data['par'], 'par')
    if not FIRST_HOLE <= hole_number <= LAST_HOLE:
        raise Invalid(f"hole_number must be between {FIRST_HOLE} and {LAST_HOLE}")
    if score < 1:
        raise Invalid('score must be at least 1')
    if not MIN_PAR <= par <= MAX_PAR:
        raise Invalid(f"par must be between {MIN_PAR} and {MAX_PAR}")
    return hole_number, score, par


def parse_join_code(value):
    code = _text(value, 'join_code')
    if not _JOIN_CODE_RE.match(code):
        raise Invalid('join_code must be 6 digits')
    return code


def parse_listing(page, limit, status, date, default_limit, max_limit):
    page = 1 if page in (None, '') else _int(page, 'page')
    limit = default_limit if limit in (None, '') else _int(limit, 'limit')
    if page < 1:
        raise Invalid('page must be 1 or more')
    if not 1 <= limit <= max_limit:
        raise Invalid(f"limit must be between 1 and {max_limit}")
    if status in (None, ''):
        status = None
    elif status not in MatchStatus.ALL:
        raise Invalid(f"status must be one of {', '.join(MatchStatus.ALL)}")
    date = None if date in (None, '') else parse_date(date)
    return page, limit, status, date
