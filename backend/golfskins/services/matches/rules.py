"""Typed match rules.

Rules arrive as a free-form JSON object. Known keys for the match's game type
are validated and lifted into a typed value; anything else is kept verbatim
in ``extra`` so newer clients can round-trip settings this server does not
understand yet. The skins engine only ever reads the typed attributes.
"""
from dataclasses import dataclass, field, fields
from typing import Any, Dict

from golfskins.errors import Invalid
from golfskins.models import GameType


@dataclass(frozen=True)
class StandardRules:
    game_type = GameType.STANDARD
    skins: bool = True
    carryover: bool = True
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class NassauRules:
    game_type = GameType.NASSAU
    carryover: bool = True
    presses: bool = False
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class WolfRules:
    game_type = GameType.WOLF
    carryover: bool = True
    lone_wolf_multiplier: int = 2
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class VegasRules:
    game_type = GameType.VEGAS
    carryover: bool = False
    flip_the_bird: bool = False
    extra: Dict[str, Any] = field(default_factory=dict)


RULES_BY_GAME_TYPE = {
    GameType.STANDARD: StandardRules,
    GameType.NASSAU: NassauRules,
    GameType.WOLF: WolfRules,
    GameType.VEGAS: VegasRules,
}


def parse_rules(game_type: str, raw) -> Any:
    rules_cls = RULES_BY_GAME_TYPE.get(game_type)
    if rules_cls is None:
        raise Invalid(f"Unknown game_type '{game_type}'")
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise Invalid('rules must be an object')

    typed = {}
    extra = {}
    known = {f.name for f in fields(rules_cls) if f.name != 'extra'}
    for key, value in raw.items():
        if key not in known:
            extra[key] = value
            continue
        default = getattr(rules_cls, key)
        # bool is a subclass of int, so check it first and strictly
        if isinstance(default, bool):
            if not isinstance(value, bool):
                raise Invalid(f"rules.{key} must be true or false")
        elif isinstance(default, int):
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise Invalid(f"rules.{key} must be a positive integer")
        typed[key] = value
    return rules_cls(extra=extra, **typed)


def rules_to_dict(rules) -> Dict[str, Any]:
    data = dict(rules.extra)
    for f in fields(rules):
        if f.name != 'extra':
            data[f.name] = getattr(rules, f.name)
    return data


def carryover_enabled(rules) -> bool:
    return bool(getattr(rules, 'carryover', False))
