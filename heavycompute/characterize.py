"""Queries about devices and compiled kernels."""

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

import pyopencl as cl


def describe_device(dev):
    return "'{}' on '{}' ({} compute units, max work group size {})".format(
            dev.name.strip(), dev.platform.name.strip(),
            dev.max_compute_units, dev.max_work_group_size)


def max_group_size(knl, dev):
    """Return the largest work group size *knl* can be launched with
    on *dev*.
    """
    return knl.get_work_group_info(
            cl.kernel_work_group_info.WORK_GROUP_SIZE, dev)


def preferred_group_size_multiple(knl, dev):
    try:
        return dev.warp_size_nv
    except Exception:
        pass

    return knl.get_work_group_info(
            cl.kernel_work_group_info.PREFERRED_WORK_GROUP_SIZE_MULTIPLE,
            dev)
