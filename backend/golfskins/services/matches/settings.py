from dataclasses import dataclass


RESOLVE_ALL_PLAYERS = 'all_players'
RESOLVE_PROVISIONAL = 'provisional'


@dataclass(frozen=True)
class MatchSettings:
    """Explicit configuration handed to the match services at construction."""

    join_code_attempts: int = 5
    skins_resolution: str = RESOLVE_ALL_PLAYERS
    list_default_limit: int = 10
    list_max_limit: int = 100

    def __post_init__(self):
        if self.skins_resolution not in (RESOLVE_ALL_PLAYERS, RESOLVE_PROVISIONAL):
            raise ValueError(f"Unknown SKINS_RESOLUTION {self.skins_resolution!r}")
        if self.join_code_attempts < 1:
            raise ValueError('JOIN_CODE_ATTEMPTS must be at least 1')

    @classmethod
    def from_config(cls, config) -> 'MatchSettings':
        return cls(
            join_code_attempts=int(config.get('JOIN_CODE_ATTEMPTS', 5)),
            skins_resolution=config.get('SKINS_RESOLUTION', RESOLVE_ALL_PLAYERS),
            list_default_limit=int(config.get('MATCH_LIST_DEFAULT_LIMIT', 10)),
            list_max_limit=int(config.get('MATCH_LIST_MAX_LIMIT', 100)),
        )
