import random

import pytest

from golfskins.errors import Conflict
from golfskins.services.matches.join_codes import allocate_join_code, generate_join_code


def test_codes_are_six_digits():
    rng = random.Random(7)
    for _ in range(500):
        code = generate_join_code(rng)
        assert len(code) == 6
        assert code.isdigit()


def test_codes_keep_leading_zeros():
    class Low(random.Random):
        def randrange(self, *args, **kwargs):
            return 42

    assert generate_join_code(Low()) == '000042'


def test_allocate_retries_until_accepted():
    codes = iter(['111111', '222222', '333333'])
    taken = {'111111', '222222'}
    tried = []

    def try_code(code):
        tried.append(code)
        return None if code in taken else f'match-{code}'

    assert allocate_join_code(try_code, attempts=5, generate=lambda: next(codes)) == 'match-333333'
    assert tried == ['111111', '222222', '333333']


def test_allocate_gives_up_with_conflict():
    calls = []

    def try_code(code):
        calls.append(code)
        return None

    with pytest.raises(Conflict):
        allocate_join_code(try_code, attempts=3, generate=lambda: '123456')
    assert len(calls) == 3
