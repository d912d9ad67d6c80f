from datetime import date, time
from decimal import Decimal
import json

import pytest

from golfskins.errors import Invalid
from golfskins.services.matches.rules import (
    NassauRules,
    StandardRules,
    VegasRules,
    carryover_enabled,
    parse_rules,
    rules_to_dict,
)
from golfskins.services.matches.validation import (
    parse_join_code,
    parse_listing,
    parse_match_fields,
    parse_score_input,
)


def test_parse_rules_defaults_per_game_type():
    assert parse_rules('standard', None) == StandardRules()
    assert carryover_enabled(parse_rules('standard', {}))
    assert not carryover_enabled(parse_rules('vegas', {}))
    assert isinstance(parse_rules('nassau', {'presses': True}), NassauRules)


def test_parse_rules_keeps_unknown_keys():
    rules = parse_rules('vegas', {'flip_the_bird': True, 'house_rule': 'no mulligans'})
    assert isinstance(rules, VegasRules)
    assert rules.flip_the_bird is True
    assert rules.extra == {'house_rule': 'no mulligans'}
    assert rules_to_dict(rules) == {'house_rule': 'no mulligans', 'carryover': False, 'flip_the_bird': True}


@pytest.mark.parametrize('game_type,raw', [
    ('standard', {'carryover': 1}),
    ('wolf', {'lone_wolf_multiplier': 0}),
    ('wolf', {'lone_wolf_multiplier': True}),
    ('standard', 'skins'),
    ('bingo', {}),
])
def test_parse_rules_rejects_bad_values(game_type, raw):
    with pytest.raises(Invalid):
        parse_rules(game_type, raw)


def test_parse_match_fields_full():
    values = parse_match_fields({
        'course_name': ' Torrey Pines ',
        'date': '2026-08-01',
        'time': '07:45',
        'max_players': '4',
        'entry_fee': 12.5,
        'game_type': 'nassau',
    })
    assert values['course_name'] == 'Torrey Pines'
    assert values['date'] == date(2026, 8, 1)
    assert values['time'] == time(7, 45)
    assert values['max_players'] == 4
    assert values['entry_fee'] == Decimal('12.50')
    assert json.loads(values['rules']) == {'carryover': True, 'presses': False}


def test_parse_match_fields_partial_only_returns_supplied():
    values = parse_match_fields({'entry_fee': 0}, partial=True, current_game_type='standard', current_rules={})
    assert values == {'entry_fee': Decimal('0.00')}


def test_parse_match_fields_rejects_unknown_fields():
    with pytest.raises(Invalid):
        parse_match_fields({'host_id': 3}, partial=True, current_game_type='standard')


def test_parse_score_input():
    assert parse_score_input({'hole_number': 18, 'score': 9, 'par': 5}) == (18, 9, 5)
    with pytest.raises(Invalid):
        parse_score_input({'hole_number': 18, 'score': True, 'par': 5})
    with pytest.raises(Invalid):
        parse_score_input(None)


def test_parse_join_code():
    assert parse_join_code('012345') == '012345'
    for bad in ('12345', '1234567', 'abcdef', None, 123456):
        with pytest.raises(Invalid):
            parse_join_code(bad)


def test_parse_listing_defaults():
    assert parse_listing(None, None, None, None, 10, 100) == (1, 10, None, None)
    assert parse_listing('2', '5', 'active', '2026-07-20', 10, 100) == (2, 5, 'active', date(2026, 7, 20))
