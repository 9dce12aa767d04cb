import array_api_strict
import numpy as np
import pytest
from hypothesis import settings

settings.register_profile('bigint', deadline=None, max_examples=60)
settings.load_profile('bigint')


# session scoped so hypothesis tests can take it
@pytest.fixture(scope='session', params=[np, array_api_strict], ids=['numpy', 'array_api_strict'])
def xp(request):
    return request.param


@pytest.fixture(scope='session')
def random_values():
    '''Signed python ints one to four limbs wide, drawn from random uint64 limbs.'''
    np.random.seed(0)
    values = []
    for size in [1, 2, 3, 4]:
        limbs = np.random.randint(0, 1<<64, [16, size], dtype=np.uint64)
        for row in limbs.tolist():
            accum = 0
            for limb in reversed(row):
                accum = (accum << 64) | limb
            values.append(accum - (1 << (64 * size - 1)))
    return values
