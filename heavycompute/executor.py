"""Parallel backends that run a :class:`~heavycompute.transform.Transform`
over every element of an array.

.. autoclass:: ParallelExecutor
.. autoclass:: OpenCLExecutor
.. autoclass:: HostExecutor
.. autofunction:: create_context
.. autofunction:: get_group_count
"""


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

import logging
import os
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from warnings import warn

import numpy as np
import pyopencl as cl
from pytools import div_ceil, memoize_method

from heavycompute import (
        DeviceError, DeviceUnavailableError, GroupSizeWarning)
from heavycompute.characterize import (
        describe_device, max_group_size, preferred_group_size_multiple)
from heavycompute.timing import EventTimer, WallTimer


logger = logging.getLogger(__name__)

KERNEL_NAME = "heavy_kernel"


# {{{ helpers

def get_group_count(n, group_size):
    """Return the number of groups of *group_size* needed to cover *n*
    elements. The last group may be partial.
    """
    if group_size < 1:
        raise ValueError(f"group size must be positive, got {group_size}")
    return div_ceil(n, group_size)


@contextmanager
def device_operation(operation):
    """Re-raise any :class:`pyopencl.Error` occurring in the block as a
    :class:`~heavycompute.DeviceError` naming *operation*.
    """
    try:
        yield
    except cl.Error as e:
        raise DeviceError(operation, str(e)) from e


def create_context(interactive=False):
    """Create a :class:`pyopencl.Context` on some device, honoring
    :envvar:`PYOPENCL_CTX`.

    :raises DeviceUnavailableError: if no OpenCL platform or device
        can be found.
    """
    try:
        platforms = cl.get_platforms()
    except cl.Error as e:
        raise DeviceUnavailableError("platform discovery", str(e)) from e

    if not platforms:
        raise DeviceUnavailableError("platform discovery",
                "no OpenCL platforms found")

    try:
        return cl.create_some_context(interactive=interactive)
    except cl.Error as e:
        raise DeviceUnavailableError("context creation", str(e)) from e


def _check_arrays(inputs, output):
    if inputs.ndim != 1 or output.shape != inputs.shape:
        raise ValueError("input and output must be one-dimensional "
                f"and of equal shape, got {inputs.shape} and {output.shape}")
    if inputs.dtype != np.int32 or output.dtype != np.int32:
        raise TypeError("input and output must have dtype int32, "
                f"got {inputs.dtype} and {output.dtype}")
    if not len(inputs):
        raise ValueError("at least one element is required")

# }}}


class ParallelExecutor(ABC):
    """Runs a transform on every element of an array, partitioned into
    groups of equal size.

    .. automethod:: dispatch
    .. automethod:: describe
    """

    @abstractmethod
    def dispatch(self, transform, inputs, output, iterations, group_size=256):
        """Set ``output[i] = transform(inputs[i], iterations)`` for every *i*.

        :arg inputs: a one-dimensional :class:`numpy.int32` array.
        :arg output: a writable array of the same shape and dtype.
        :returns: the elapsed execution time in milliseconds.
        """

    def describe(self):
        return type(self).__name__


# {{{ OpenCL

class OpenCLExecutor(ParallelExecutor):
    """Runs the transform as an OpenCL kernel, one work item per element.

    Execution time is taken from the device-side profiling timestamps of
    the kernel event, so host-side dispatch overhead is not included.

    :arg context: a :class:`pyopencl.Context`. If not given, one is
        obtained from :func:`create_context`.
    """

    def __init__(self, context=None):
        if context is None:
            context = create_context()

        self.context = context

        with device_operation("command queue creation"):
            self.queue = cl.CommandQueue(context,
                    properties=cl.command_queue_properties.PROFILING_ENABLE)

        self.device = self.queue.device
        logger.debug("using device %s", describe_device(self.device))

    def describe(self):
        return f"OpenCL device {describe_device(self.device)}"

    @memoize_method
    def get_kernel(self, transform):
        logger.debug("building kernel for %r", transform)
        with device_operation("program build"):
            prg = cl.Program(self.context,
                    transform.get_kernel_source(KERNEL_NAME)).build()
            return cl.Kernel(prg, KERNEL_NAME)

    def _check_group_size(self, knl, group_size):
        with device_operation("kernel query"):
            max_size = max_group_size(knl, self.device)
            preferred_multiple = preferred_group_size_multiple(
                    knl, self.device)

        if group_size > max_size:
            raise DeviceError("kernel launch",
                    f"group size {group_size} exceeds the maximum of "
                    f"{max_size} on {describe_device(self.device)}")

        if group_size % preferred_multiple:
            warn(f"group size {group_size} is not a multiple of the "
                    f"preferred multiple ({preferred_multiple}) of "
                    f"{describe_device(self.device)}, performance may be "
                    "reduced", GroupSizeWarning, stacklevel=3)

    def dispatch(self, transform, inputs, output, iterations, group_size=256):
        _check_arrays(inputs, output)

        n = len(inputs)
        group_count = get_group_count(n, group_size)
        knl = self.get_kernel(transform)
        self._check_group_size(knl, group_size)

        mf = cl.mem_flags
        in_buf = None
        out_buf = None

        try:
            with device_operation("buffer allocation"):
                in_buf = cl.Buffer(self.context, mf.READ_ONLY, inputs.nbytes)
                out_buf = cl.Buffer(self.context, mf.WRITE_ONLY, output.nbytes)

            logger.debug("copying %d bytes to device", inputs.nbytes)
            with device_operation("host-to-device transfer"):
                cl.enqueue_copy(self.queue, in_buf, inputs, is_blocking=True)

            logger.debug("launching %d groups of %d work items",
                    group_count, group_size)
            timer = EventTimer()
            timer.start()
            with device_operation("kernel launch"):
                timer.add_event(knl(self.queue,
                        (group_count*group_size,), (group_size,),
                        in_buf, out_buf, np.int32(iterations), np.uint64(n)))

            with device_operation("synchronization"):
                timer.stop()
                elapsed = timer.get_elapsed()

            logger.debug("copying %d bytes from device", output.nbytes)
            with device_operation("device-to-host transfer"):
                cl.enqueue_copy(self.queue, output, out_buf, is_blocking=True)
        finally:
            for buf in [in_buf, out_buf]:
                if buf is not None:
                    buf.release()

        return 1e3*elapsed

# }}}


# {{{ host emulation

class HostExecutor(ParallelExecutor):
    """Emulates the group partition on host threads. Each task handles a
    contiguous run of groups; the final group is clipped to the array.
    Execution time is host wall-clock time.

    :arg max_workers: number of threads, defaults to the CPU count.
    """

    def __init__(self, max_workers=None):
        if max_workers is None:
            max_workers = os.cpu_count() or 1
        if max_workers < 1:
            raise ValueError(f"max_workers must be positive, got {max_workers}")

        self.max_workers = max_workers

    def describe(self):
        return f"host emulation with {self.max_workers} threads"

    def dispatch(self, transform, inputs, output, iterations, group_size=256):
        _check_arrays(inputs, output)

        n = len(inputs)
        group_count = get_group_count(n, group_size)
        groups_per_task = div_ceil(group_count, 4*self.max_workers)

        def run_groups(first_group):
            start = first_group*group_size
            stop = min((first_group + groups_per_task)*group_size, n)
            transform.apply(inputs[start:stop], iterations,
                    out=output[start:stop])

        logger.debug("running %d groups of %d items in tasks of %d groups",
                group_count, group_size, groups_per_task)

        timer = WallTimer()
        timer.start()
        with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = [
                    pool.submit(run_groups, first_group)
                    for first_group in range(0, group_count, groups_per_task)]
            for future in futures:
                future.result()
        timer.stop()

        return 1e3*timer.get_elapsed()

# }}}

# vim: foldmethod=marker
