import pytest

from bigint import BigInt, DivisionByZero


def truncating_divmod(a, b):
    q = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        q = -q
    return q, a - q * b


def test_multiply_by_negative(xp):
    assert BigInt(7, xp=xp) * BigInt(-2, xp=xp) == BigInt(-14, xp=xp)


@pytest.mark.parametrize('a,b', [
    (0, 5),
    (5, 0),
    (-1, -1),
    (-7, 3),
    (-7, -3),
    (2**64 - 1, 2**64 - 1),
    (-2**63, -2**63),
    (-2**63, 2**63),
    (2**130 + 17, -(2**70) + 3),
])
def test_multiply_edge_cases(xp, a, b):
    assert int(BigInt(a, xp=xp) * BigInt(b, xp=xp)) == a * b


def test_multiply_matches_python(xp, random_values):
    for a, b in zip(random_values[::4], random_values[1::4]):
        assert int(BigInt(a, xp=xp) * BigInt(b, xp=xp)) == a * b


def test_multiply_normalizes(xp):
    x = BigInt(3, xp=xp) * BigInt(-1, xp=xp)
    assert x.limbs == 1


def test_multiply_in_place_by_self(xp):
    x = BigInt(-2**40 - 1, xp=xp)
    x *= x
    assert int(x) == (2**40 + 1) ** 2
    y = BigInt(6, xp=xp)
    assert int(3 * y) == 18


@pytest.mark.parametrize('a,b,q,r', [
    (-7, 2, -3, -1),
    (7, -2, -3, 1),
    (-7, -2, 3, -1),
    (7, 2, 3, 1),
    (0, 5, 0, 0),
    (3, 5, 0, 3),
    (-3, 5, 0, -3),
    (5, 5, 1, 0),
    (-2**63, -1, 2**63, 0),
])
def test_truncating_division(xp, a, b, q, r):
    quotient, remainder = BigInt(a, xp=xp).quot_rem(BigInt(b, xp=xp))
    assert int(quotient) == q
    assert int(remainder) == r
    assert int(BigInt(a, xp=xp) / b) == q
    assert int(BigInt(a, xp=xp) % b) == r


def test_division_matches_python(xp, random_values):
    for a, b in zip(random_values[::3], random_values[2::5]):
        q, r = truncating_divmod(a, b)
        quotient, remainder = BigInt(a, xp=xp).quot_rem(b)
        assert int(quotient) == q
        assert int(remainder) == r
        assert quotient * b + remainder == a


def test_division_of_wide_by_narrow(xp):
    a = -(2**200) - 12345
    b = 2**70 + 3
    x = BigInt(a, xp=xp)
    x /= b
    assert int(x) == truncating_divmod(a, b)[0]
    y = BigInt(a, xp=xp)
    y %= b
    assert int(y) == truncating_divmod(a, b)[1]


def test_quot_rem_leaves_operands(xp):
    x = BigInt(100, xp=xp)
    y = BigInt(-7, xp=xp)
    x.quot_rem(y)
    assert int(x) == 100
    assert int(y) == -7
    assert int(x.div(y)) == -14
    assert int(x.mod(y)) == 2
    assert int(100 / y) == -14
    assert int(100 % y) == 2


def test_division_by_zero(xp):
    zero = 0
    x = BigInt(2**100, xp=xp)
    with pytest.raises(DivisionByZero):
        x.quot_rem(zero)
    with pytest.raises(DivisionByZero):
        x /= BigInt(zero, xp=xp)
    with pytest.raises(ZeroDivisionError):
        x %= zero
    assert int(x) == 2**100


def test_division_by_redundant_zero(xp):
    zero = BigInt.from_limbs([0, 0, 0], xp=xp)
    with pytest.raises(DivisionByZero):
        BigInt(1, xp=xp) / zero
