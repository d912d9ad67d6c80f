import random
from typing import Callable, Optional, TypeVar

from golfskins.errors import Conflict


JOIN_CODE_LENGTH = 6

_system_random = random.SystemRandom()

T = TypeVar('T')


def generate_join_code(rng: Optional[random.Random] = None) -> str:
    """Return a uniformly drawn 6-digit code, zero padded ("000000"-"999999")."""
    rng = rng or _system_random
    return f"{rng.randrange(10 ** JOIN_CODE_LENGTH):0{JOIN_CODE_LENGTH}d}"


def allocate_join_code(
    try_code: Callable[[str], Optional[T]],
    attempts: int,
    generate: Callable[[], str] = generate_join_code,
) -> T:
    """Generate codes until ``try_code`` accepts one.

    ``try_code`` returns None when the code collided with a live match (either
    seen up front or rejected by the unique index at insert time) and the
    persisted result otherwise.
    """
    for _ in range(attempts):
        result = try_code(generate())
        if result is not None:
            return result
    raise Conflict(f'Could not allocate a unique join code after {attempts} attempts')
