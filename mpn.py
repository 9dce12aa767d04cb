# NOTE: LIMBS are the mp term for WORDS. They mean basically the same thing.

# representation:
#  2s complement, N uint64s as a 1-d array, index 0 least significant.
#  the 2s complement is considered over size N,
#    so the sign bit of the highest index value is the real sign bit.
#  every routine here returns a fresh array; limb arrays are never written in place.

WANT_ASSERT = True
LIMB_BITS = 64
LIMB_MASK = (1<<LIMB_BITS)-1
LIMB_HIGHBIT = 1<<(LIMB_BITS-1)
HEX_DIGITS = LIMB_BITS // 4

class PreconditionViolation(AssertionError):
    '''A limb array broke a representation invariant, e.g. it is empty.'''

class DivisionByZero(ZeroDivisionError):
    pass

def ASSERT_LIMBS(data):
    # always on, WANT_ASSERT or not
    if len(data.shape) != 1 or data.shape[0] == 0:
        raise PreconditionViolation(f'limb array must be 1-d and non-empty, got shape {data.shape}')

if WANT_ASSERT:
    def ASSERT(expr, *params):
        assert expr, params
    def ASSERT_SAME_SIZE(up, vp):
        assert up.shape == vp.shape, (up.shape, vp.shape)
else:
    def ASSERT(expr, *params):
        pass
    def ASSERT_SAME_SIZE(up, vp):
        pass

def fill(negative):
    return LIMB_MASK if negative else 0

def top_bit(data):
    ASSERT_LIMBS(data)
    return bool(int(data[-1]) & LIMB_HIGHBIT)

def limbs_of(data):
    ASSERT_LIMBS(data)
    xp = data.__array_namespace__()
    return [int(item) for item in xp.unstack(data)]

def from_int(xp, value):
    '''Minimal 2s complement limbs of a python int.'''
    magnitude = value if value >= 0 else ~value
    size = magnitude.bit_length() // LIMB_BITS + 1
    return xp.asarray(
        [(value >> (LIMB_BITS*idx)) & LIMB_MASK for idx in range(size)],
        dtype=xp.uint64
    )

def from_limbs(xp, limbs):
    limbs = [int(limb) for limb in limbs]
    for limb in limbs:
        if not 0 <= limb <= LIMB_MASK:
            raise ValueError(f'limb out of range: {limb:#x}')
    data = xp.asarray(limbs, dtype=xp.uint64)
    ASSERT_LIMBS(data)
    return data

def to_int(data):
    ASSERT_LIMBS(data)
    accum = 0
    for item in reversed(limbs_of(data)):
        accum <<= LIMB_BITS
        accum += item
    if top_bit(data):
        accum -= 1 << (LIMB_BITS * data.shape[0])
    return accum

def sign_extend(data, size):
    '''Widen to size limbs, padding with the fill word of data's own sign.'''
    ASSERT_LIMBS(data)
    old_size = data.shape[0]
    if old_size >= size:
        return data
    xp = data.__array_namespace__()
    return xp.concat([
        data,
        xp.full(size - old_size, fill(top_bit(data)), dtype=xp.uint64)
    ])

def normalize(data):
    '''Strip high limbs that only repeat the sign of the limb below them.'''
    ASSERT_LIMBS(data)
    limbs = limbs_of(data)
    size = len(limbs)
    while size > 1 and limbs[size-1] == fill(limbs[size-2] & LIMB_HIGHBIT):
        size -= 1
    return data[:size]

def add_n(up, vp):
    '''Wordwise sum modulo 2**(LIMB_BITS*n); the carry out of the top limb is dropped.'''
    ASSERT_SAME_SIZE(up, vp)
    xp = up.__array_namespace__()
    total = up + vp
    # majority of (top of u, top of v, not top of wrapped sum)
    carry = ((up & vp) | ((up | vp) & ~total)) >> (LIMB_BITS-1)
    # if a limb is all 0xf, as for negative numbers, there will be multiple chained carries
    while xp.any(carry[:-1] != 0):
        carry_in = xp.concat([xp.zeros(1, dtype=xp.uint64), carry[:-1]])
        total = total + carry_in
        carry = xp.astype(total < carry_in, xp.uint64)
    return total

def com(up):
    return ~up

def logops_n(up, vp, operation):
    ASSERT_SAME_SIZE(up, vp)
    return operation(up, vp)

def lshift(up, bits):
    '''Shift left by 0 < bits < LIMB_BITS. Returns the shifted limbs and the bits spilled out of the top.'''
    ASSERT(0 < bits < LIMB_BITS, bits)
    xp = up.__array_namespace__()
    spill = up >> (LIMB_BITS - bits)
    shifted = (up << bits) | xp.concat([xp.zeros(1, dtype=xp.uint64), spill[:-1]])
    return shifted, int(spill[-1])

def rshift(up, bits, fill_word):
    '''Shift right by 0 < bits < LIMB_BITS, shifting fill_word in at the top.'''
    ASSERT(0 < bits < LIMB_BITS, bits)
    xp = up.__array_namespace__()
    ext = xp.concat([up, xp.full(1, fill_word, dtype=xp.uint64)])
    return (ext[:-1] >> bits) | (ext[1:] << (LIMB_BITS - bits))

def cmp_n(up, vp):
    '''Unsigned three-way compare of equal-length limb arrays, most significant limb deciding.'''
    ASSERT_SAME_SIZE(up, vp)
    xp = up.__array_namespace__()
    mismatches = xp.nonzero(up != vp)[0]
    if mismatches.shape[0] == 0:
        return 0
    top = int(mismatches[-1])
    return -1 if int(up[top]) < int(vp[top]) else 1

def scan1(data):
    '''Positions of set bits within the current width, lowest first.'''
    for idx, limb in enumerate(limbs_of(data)):
        while limb:
            low = limb & -limb
            yield idx * LIMB_BITS + low.bit_length() - 1
            limb ^= low
