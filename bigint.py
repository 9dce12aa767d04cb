# representation:
#  2s complement over the limb arrays of mpn.py, one BigInt per scalar value.
#  widths are not kept minimal: a redundant high limb is fine as long as the
#    current top limb carries the true sign bit.
#  every operation rebinds self._data to a fresh array, so a BigInt never
#    shares storage with another one and copies are deep by construction.

import logging
import numbers
import operator

import numpy as np

import mpn
from mpn import DivisionByZero, PreconditionViolation, LIMB_BITS, LIMB_MASK

logger = logging.getLogger(__name__)

__all__ = ['BigInt', 'DivisionByZero', 'PreconditionViolation', 'to_hex']


class BigInt:
    def __init__(self, data=0, *, xp=None):
        if type(data) is BigInt:
            if xp is None or xp is data.xp:
                xp = self.xp = data.xp
                self._data = xp.asarray(data._data, copy=True)
            else:
                self.xp = xp
                self._data = mpn.from_limbs(xp, data.to_limbs())
        elif isinstance(data, numbers.Integral):
            xp = self.xp = np if xp is None else xp
            self._data = mpn.from_int(xp, int(data))
        elif hasattr(data, '__array_namespace__'):
            # a native integer of a specific width, as a 0-d array
            if xp is None:
                xp = data.__array_namespace__()
            self.xp = xp
            if not _is_native(data):
                raise TypeError(data.dtype)
            if len(data.shape) != 0:
                raise ValueError(f'expected a 0-d array, got shape {data.shape}')
            # unsigned sources come through int() non-negative, so from_int
            # adds the zero limb when their top bit would read as a sign
            self._data = mpn.from_int(xp, int(data))
        else:
            raise TypeError(f'cannot make a BigInt from {type(data).__name__}')

    @classmethod
    def from_native(cls, value, dtype, *, xp=None):
        if xp is None:
            xp = np
        return cls(xp.asarray(value, dtype=dtype), xp=xp)

    @classmethod
    def from_limbs(cls, limbs, *, xp=None):
        '''Least significant limb first. Redundant high limbs are kept as given.'''
        x = cls(xp=xp)
        x._data = mpn.from_limbs(x.xp, limbs)
        return x

    def _coerce(x, y):
        if type(y) is BigInt and y.xp is x.xp:
            return y
        return BigInt(y, xp=x.xp)

    # representation

    @property
    def limbs(self):
        mpn.ASSERT_LIMBS(self._data)
        return self._data.shape[0]
    def to_limbs(self):
        return tuple(mpn.limbs_of(self._data))
    def bit_width(self):
        return self.limbs * LIMB_BITS
    def is_negative(self):
        return mpn.top_bit(self._data)
    def fill_word(self):
        return mpn.fill(self.is_negative())
    def bit_at(self, idx):
        '''Bit idx of the infinite 2s complement expansion; past the width this is the sign.'''
        idx = operator.index(idx)
        if idx < 0:
            raise IndexError(f'negative bit index {idx}')
        mpn.ASSERT_LIMBS(self._data)
        limb, bit = divmod(idx, LIMB_BITS)
        if limb >= self.limbs:
            return self.is_negative()
        return bool((int(self._data[limb]) >> bit) & 1)
    __getitem__ = bit_at
    # bit_at never runs out of indices
    __iter__ = None

    def copy(self):
        return BigInt(self)
    def assign(x, y):
        x._data = BigInt(x._coerce(y))._data
        return x
    def set_zero(self):
        self._data = mpn.from_int(self.xp, 0)
        return self
    def normalize(self):
        self._data = mpn.normalize(self._data)
        return self

    def _alloc(self, limbs):
        self._data = mpn.sign_extend(self._data, limbs)
    def _append(self, word):
        xp = self.xp
        self._data = xp.concat([self._data, xp.full(1, word, dtype=xp.uint64)])

    # arithmetic

    def add_assign(x, y):
        y = x._coerce(y)
        x_negative = x.is_negative()
        y_negative = y.is_negative()
        limbs = max(x.limbs, y.limbs)
        x._alloc(limbs)
        x._data = mpn.add_n(x._data, mpn.sign_extend(y._data, limbs))
        # only like signs can overflow; the wrapped result then shows the other sign
        if x_negative == y_negative and x.is_negative() != x_negative:
            logger.debug('add overflowed %d limbs, growing', limbs)
            x._append(mpn.fill(x_negative))
        return x
    def sub_assign(x, y):
        return x.add_assign(BigInt(x._coerce(y)).negate())
    def negate(self):
        self.flip()
        return self.add_assign(1)
    def increment(self):
        return self.add_assign(1)
    def decrement(self):
        return self.add_assign(-1)
    def post_increment(self):
        prior = BigInt(self)
        self.increment()
        return prior
    def post_decrement(self):
        prior = BigInt(self)
        self.decrement()
        return prior

    # bitwise

    def _bitwise_assign(x, y, operation):
        y = x._coerce(y)
        # both sides extend virtually with their own fill; and never truncates
        limbs = max(x.limbs, y.limbs)
        x._data = mpn.logops_n(
            mpn.sign_extend(x._data, limbs),
            mpn.sign_extend(y._data, limbs),
            operation
        )
        return x
    def and_assign(x, y):
        return x._bitwise_assign(y, operator.and_)
    def or_assign(x, y):
        return x._bitwise_assign(y, operator.or_)
    def xor_assign(x, y):
        return x._bitwise_assign(y, operator.xor)
    def flip(self):
        mpn.ASSERT_LIMBS(self._data)
        self._data = mpn.com(self._data)
        return self

    # shifts

    def lshift_assign(self, count):
        count = _shift_count(count)
        limbs, bits = divmod(count, LIMB_BITS)
        negative = self.is_negative()
        xp = self.xp
        if bits:
            shifted, spill = mpn.lshift(self._data, bits)
            top = spill | ((mpn.fill(negative) << bits) & LIMB_MASK)
            # the shifted limbs alone already mean top when top is just their sign fill
            if top != mpn.fill(mpn.top_bit(shifted)):
                logger.debug('lshift by %d spilled into a new limb', count)
                shifted = xp.concat([shifted, xp.full(1, top, dtype=xp.uint64)])
            self._data = shifted
        if limbs:
            self._data = xp.concat([xp.zeros(limbs, dtype=xp.uint64), self._data])
        return self
    def rshift_assign(self, count):
        count = _shift_count(count)
        limbs, bits = divmod(count, LIMB_BITS)
        fill_word = self.fill_word()
        if limbs >= self.limbs:
            self._data = mpn.from_int(self.xp, -1 if fill_word else 0)
            return self
        if limbs:
            self._data = self._data[limbs:]
        if bits:
            self._data = mpn.rshift(self._data, bits, fill_word)
        return self

    # multiplication

    def mul_assign(x, y):
        y = x._coerce(y)
        # only the multiplier's sign is normalized; a negative multiplicand adds in fine
        if y.is_negative():
            accumulator = -x
            multiplier = -y
        else:
            accumulator = BigInt(x)
            multiplier = y
        positions = list(mpn.scan1(multiplier._data))
        product = BigInt(xp=x.xp)
        shifted = 0
        for position in positions:
            accumulator.lshift_assign(position - shifted)
            shifted = position
            product.add_assign(accumulator)
        x._data = mpn.normalize(product._data)
        return x

    # division

    def quot_rem(x, y):
        '''Truncating division. The remainder has the dividend's sign.'''
        y = x._coerce(y)
        if not y:
            raise DivisionByZero('BigInt division by zero')
        x_negative = x.is_negative()
        y_negative = y.is_negative()
        remainder = abs(x)
        divisor = abs(y)
        quotient = BigInt(xp=x.xp)
        marker = BigInt(1, xp=x.xp)
        while divisor.compare(remainder) <= 0:
            divisor.lshift_assign(1)
            marker.lshift_assign(1)
        while marker:
            while marker and divisor.compare(remainder) > 0:
                divisor.rshift_assign(1)
                marker.rshift_assign(1)
            if not marker:
                break
            remainder.sub_assign(divisor)
            quotient.add_assign(marker)
        if x_negative:
            remainder.negate()
        if x_negative != y_negative:
            quotient.negate()
        return quotient.normalize(), remainder.normalize()
    def div_assign(x, y):
        x._data = x.quot_rem(y)[0]._data
        return x
    def mod_assign(x, y):
        x._data = x.quot_rem(y)[1]._data
        return x

    # comparison

    def equals(x, y):
        y = x._coerce(y)
        if x.is_negative() != y.is_negative():
            return False
        limbs = max(x.limbs, y.limbs)
        return bool(x.xp.all(
            mpn.sign_extend(x._data, limbs) == mpn.sign_extend(y._data, limbs)
        ))
    def compare(x, y):
        y = x._coerce(y)
        x_negative = x.is_negative()
        if x_negative != y.is_negative():
            return -1 if x_negative else 1
        # same sign, so unsigned limb order is signed order
        limbs = max(x.limbs, y.limbs)
        return mpn.cmp_n(mpn.sign_extend(x._data, limbs), mpn.sign_extend(y._data, limbs))

    def __eq__(x, y):
        if not _is_operand(y):
            return NotImplemented
        return x.equals(y)
    def __ne__(x, y):
        if not _is_operand(y):
            return NotImplemented
        return not x.equals(y)
    def __lt__(x, y):
        if not _is_operand(y):
            return NotImplemented
        return x.compare(y) < 0
    def __le__(x, y):
        if not _is_operand(y):
            return NotImplemented
        return x.compare(y) <= 0
    def __gt__(x, y):
        if not _is_operand(y):
            return NotImplemented
        return x.compare(y) > 0
    def __ge__(x, y):
        if not _is_operand(y):
            return NotImplemented
        return x.compare(y) >= 0
    def __hash__(self):
        return hash(int(self))

    # unary

    def __neg__(self):
        return BigInt(self).negate()
    def __pos__(self):
        return BigInt(self)
    def __invert__(self):
        return BigInt(self).flip()
    def __abs__(self):
        x = BigInt(self)
        return x.negate() if x.is_negative() else x
    def __bool__(self):
        mpn.ASSERT_LIMBS(self._data)
        return bool(self.xp.any(self._data != 0))

    def __int__(self):
        return mpn.to_int(self._data)
    __index__ = __int__
    def __copy__(self):
        return BigInt(self)
    def __deepcopy__(self, memo):
        return BigInt(self)

    def __str__(self):
        return to_hex(self)
    def __repr__(self):
        return f'BigInt({to_hex(self)})'


def to_hex(value):
    '''Fixed width hex dump, most significant limb first, every limb zero padded.'''
    return '0x' + ''.join(
        f'{limb:0{mpn.HEX_DIGITS}x}'
        for limb in reversed(value.to_limbs())
    )

def _shift_count(count):
    count = operator.index(count)
    if count < 0:
        raise ValueError('negative shift count')
    return count

def _is_native(data):
    return data.__array_namespace__().isdtype(data.dtype, ('bool', 'integral'))

def _is_operand(y):
    if type(y) is BigInt or isinstance(y, numbers.Integral):
        return True
    # the 0-d native arrays BigInt() accepts
    return hasattr(y, '__array_namespace__') and len(y.shape) == 0 and _is_native(y)

def __BigIntOpBinaryInplace(name):
    def op(a, b):
        if not _is_operand(b):
            return NotImplemented
        return getattr(a, name)(b)
    return op
def __BigIntOpBinaryAllocating(name):
    def op(a, b):
        if not _is_operand(b):
            return NotImplemented
        return getattr(BigInt(a), name)(b)
    return op
def __BigIntOpNamed(name):
    # unlike the operators, a bad operand raises TypeError from _coerce
    def op(a, b):
        return getattr(BigInt(a), name)(b)
    return op
def __BigIntOpBinaryReflected(name):
    def op(a, b):
        if not _is_operand(b):
            return NotImplemented
        return getattr(BigInt(b, xp=a.xp), name)(a)
    return op
for opname, named, method in [
        ['add', 'add', 'add_assign'],
        ['sub', 'sub', 'sub_assign'],
        ['mul', 'mul', 'mul_assign'],
        # truncating, like quot_rem; // would promise floor division
        ['truediv', 'div', 'div_assign'],
        ['mod', 'mod', 'mod_assign'],
        ['lshift', 'lshift', 'lshift_assign'],
        ['rshift', 'rshift', 'rshift_assign'],
        ['and', 'and_', 'and_assign'],
        ['or', 'or_', 'or_assign'],
        ['xor', 'xor', 'xor_assign'],
]:
    named_op = __BigIntOpNamed(method)
    named_op.__name__ = named
    setattr(BigInt, named, named_op)
    for prefix, factory in [
            ['', __BigIntOpBinaryAllocating],
            ['r', __BigIntOpBinaryReflected],
            ['i', __BigIntOpBinaryInplace],
    ]:
        op = factory(method)
        op.__name__ = f'__{prefix}{opname}__'
        setattr(BigInt, op.__name__, op)


if __name__ == '__main__':
    import array_api_strict as xp
    np.random.seed(0)
    values = [
        int(v) - (1 << 63)
        for v in np.random.randint(0, 1<<64, [64], dtype=np.uint64)
    ]
    for a, b in zip(values, values[1:]):
        a_big = BigInt(a, xp=xp) << 70
        b_big = BigInt(b, xp=xp)
        assert int(a_big + b_big) == (a << 70) + b
        assert int(a_big * b_big) == (a << 70) * b
        q, r = a_big.quot_rem(b_big)
        assert int(q) * b + int(r) == a << 70
    assert to_hex(BigInt(-1)) == '0x' + 'f' * mpn.HEX_DIGITS
