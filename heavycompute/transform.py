"""The per-element update rule, in scalar, vectorized and OpenCL C form."""


__copyright__ = "Copyright (C) 2026 The heavycompute authors"

__license__ = """
Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in
all copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN
THE SOFTWARE.
"""

import numpy as np


INT32_MIN = -2**31
INT32_MAX = 2**31 - 1


# {{{ 32-bit integer helpers

def wrap_int32(value):
    """Reduce the Python integer *value* to the two's complement range of
    a 32-bit signed integer, as C arithmetic on ``int`` would.
    """
    return (value - INT32_MIN) % 2**32 + INT32_MIN


def c_remainder(a, b):
    """Remainder with the sign of the dividend (C's ``%``), unlike
    Python's ``%``, which takes the sign of the divisor.
    """
    r = abs(a) % abs(b)
    return -r if a < 0 else r

# }}}


# {{{ kernel source

KERNEL_TEMPLATE = """//CL//
__kernel void %(name)s(
    __global const int *in,
    __global int *out,
    const int iterations,
    const unsigned long n)
{
    size_t gid = get_global_id(0);

    if (gid < n)
    {
        int value = in[gid];

        for (int i = 0; i < iterations; ++i)
        {
            // multiply-add in uint so that overflow wraps
            value = ((int) ((uint) value * %(factor)du + (uint) i))
                %% %(modulus)d;
        }

        out[gid] = value;
    }
}
"""

# }}}


class Transform:
    """Repeatedly applies ``value = (value * factor + i) % modulus`` for
    ``i`` in ``range(iterations)``, with 32-bit signed wraparound and
    C remainder semantics.

    .. attribute:: factor
    .. attribute:: modulus

    .. automethod:: __call__
    .. automethod:: apply
    .. automethod:: get_kernel_source
    """

    def __init__(self, factor=2, modulus=1_000_000):
        if not 0 < modulus <= INT32_MAX:
            raise ValueError(f"modulus must be in (0, {INT32_MAX}], "
                    f"got {modulus}")
        if not 0 <= factor <= INT32_MAX:
            raise ValueError(f"factor must be in [0, {INT32_MAX}], "
                    f"got {factor}")

        self.factor = factor
        self.modulus = modulus

    def __call__(self, value, iterations):
        """Apply the transform to a single integer *value*."""
        value = wrap_int32(int(value))
        for i in range(iterations):
            value = c_remainder(
                    wrap_int32(value * self.factor + i), self.modulus)

        return value

    def apply(self, values, iterations, out=None):
        """Apply the transform to every entry of *values* using
        :mod:`numpy` on a single thread.

        :arg out: if given, an :class:`numpy.int32` array of the same shape
            as *values* that receives the result. May alias *values*.
        :returns: *out*, or a newly allocated array.
        """
        if out is None:
            out = np.array(values, dtype=np.int32)
        else:
            if out.dtype != np.int32:
                raise TypeError(f"'out' must have dtype int32, got {out.dtype}")
            out[...] = values

        factor = np.int32(self.factor)
        modulus = np.int32(self.modulus)

        for i in range(iterations):
            # in-place int32 array arithmetic wraps silently
            out *= factor
            out += np.int32(i)
            # np.fmod truncates like C, np.remainder would not
            np.fmod(out, modulus, out=out)

        return out

    def get_kernel_source(self, name="heavy_kernel"):
        """Return OpenCL C source for a kernel *name* taking
        ``(const int *in, int *out, int iterations, unsigned long n)``.
        """
        return KERNEL_TEMPLATE % {
                "name": name,
                "factor": self.factor,
                "modulus": self.modulus,
                }

    def __eq__(self, other):
        return (type(self) is type(other)
                and self.factor == other.factor
                and self.modulus == other.modulus)

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash((type(self), self.factor, self.modulus))

    def __repr__(self):
        return (f"{type(self).__name__}(factor={self.factor}, "
                f"modulus={self.modulus})")


DEFAULT_TRANSFORM = Transform()


def transform(value, iterations):
    """Apply :data:`DEFAULT_TRANSFORM` to a single *value*."""
    return DEFAULT_TRANSFORM(value, iterations)

# vim: foldmethod=marker
