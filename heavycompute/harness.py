"""Input generation, the host compute path, verification, and the
benchmark driver tying them to a :class:`~heavycompute.executor.ParallelExecutor`.
"""

from __future__ import annotations


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
from dataclasses import dataclass

import numpy as np

from heavycompute.timing import WallTimer
from heavycompute.transform import DEFAULT_TRANSFORM, INT32_MAX


logger = logging.getLogger(__name__)

DEFAULT_ELEMENT_COUNT = 10_000_000
DEFAULT_ITERATIONS = 100
DEFAULT_GROUP_SIZE = 256

INPUT_PERIOD = 100


# {{{ configuration

@dataclass(frozen=True)
class BenchmarkConfig:
    """
    .. attribute:: element_count

        Number of elements in the workload.

    .. attribute:: iterations

        Number of transform steps applied to each element.

    .. attribute:: group_size

        Number of elements per execution group on the parallel backend.
    """

    element_count: int = DEFAULT_ELEMENT_COUNT
    iterations: int = DEFAULT_ITERATIONS
    group_size: int = DEFAULT_GROUP_SIZE

    def __post_init__(self):
        if self.element_count < 1:
            raise ValueError("element count must be at least 1, "
                    f"got {self.element_count}")
        if not 0 <= self.iterations <= INT32_MAX:
            raise ValueError(f"iterations must be in [0, {INT32_MAX}], "
                    f"got {self.iterations}")
        if self.group_size < 1:
            raise ValueError("group size must be at least 1, "
                    f"got {self.group_size}")

    @classmethod
    def from_env(cls, environ=None):
        """Build a configuration from :envvar:`HEAVYCOMPUTE_ELEMENT_COUNT`,
        :envvar:`HEAVYCOMPUTE_ITERATIONS` and :envvar:`HEAVYCOMPUTE_GROUP_SIZE`,
        falling back to the defaults for unset variables.
        """
        if environ is None:
            environ = os.environ

        kwargs = {}
        for field_name, var_name in [
                ("element_count", "HEAVYCOMPUTE_ELEMENT_COUNT"),
                ("iterations", "HEAVYCOMPUTE_ITERATIONS"),
                ("group_size", "HEAVYCOMPUTE_GROUP_SIZE"),
                ]:
            value = environ.get(var_name)
            if value is None or not value.strip():
                continue

            try:
                kwargs[field_name] = int(value)
            except ValueError:
                raise ValueError(
                        f"{var_name} must be an integer, got '{value}'"
                        ) from None

        return cls(**kwargs)

# }}}


# {{{ results

@dataclass(frozen=True)
class Verification:
    passed: bool
    mismatch_count: int
    first_mismatch: int | None = None

    def __bool__(self):
        return self.passed


@dataclass(frozen=True)
class BenchmarkResult:
    config: BenchmarkConfig
    device_ms: float
    host_ms: float
    verification: Verification
    device_output: np.ndarray
    host_output: np.ndarray

    @property
    def passed(self):
        return self.verification.passed

    @property
    def speedup(self):
        if self.device_ms <= 0:
            return float("inf")
        return self.host_ms / self.device_ms

    def format_report(self):
        return [
                f"Device kernel execution time: {self.device_ms:.3f} ms",
                f"Host execution time: {self.host_ms:.3f} ms",
                "Output comparison: "
                + ("PASSED" if self.passed else "FAILED"),
                ]

# }}}


# {{{ pipeline stages

def generate_input(element_count):
    """Return a read-only :class:`numpy.int32` array with
    ``a[i] == i % 100``.
    """
    if element_count < 1:
        raise ValueError(f"element count must be at least 1, got {element_count}")

    result = np.arange(element_count, dtype=np.int64) % INPUT_PERIOD
    result = result.astype(np.int32)
    result.flags.writeable = False
    return result


def run_host(inputs, iterations, transform=DEFAULT_TRANSFORM, elementwise=False):
    """Apply *transform* to *inputs* on a single host thread.

    :arg elementwise: if *True*, visit one element at a time in a Python
        loop. Otherwise each transform step is a single vectorized pass
        over all elements.
    :returns: a tuple ``(output, elapsed_ms)``.
    """
    output = np.empty(len(inputs), dtype=np.int32)

    timer = WallTimer()
    timer.start()
    if elementwise:
        for i, value in enumerate(inputs.tolist()):
            output[i] = transform(value, iterations)
    else:
        transform.apply(inputs, iterations, out=output)
    timer.stop()

    return output, 1e3*timer.get_elapsed()


def run_device(executor, inputs, iterations, group_size=DEFAULT_GROUP_SIZE,
        transform=DEFAULT_TRANSFORM):
    """Run *transform* on *executor*.

    :returns: a tuple ``(output, elapsed_ms)``.
    """
    output = np.empty(len(inputs), dtype=np.int32)
    elapsed_ms = executor.dispatch(transform, inputs, output, iterations,
            group_size=group_size)
    return output, elapsed_ms


def verify(device_output, host_output):
    device_output = np.asarray(device_output)
    host_output = np.asarray(host_output)

    if device_output.shape != host_output.shape:
        return Verification(passed=False,
                mismatch_count=max(device_output.size, host_output.size))

    mismatches, = np.nonzero(device_output != host_output)
    if not len(mismatches):
        return Verification(passed=True, mismatch_count=0)

    return Verification(passed=False,
            mismatch_count=len(mismatches),
            first_mismatch=int(mismatches[0]))

# }}}


def run_benchmark(config, executor, transform=DEFAULT_TRANSFORM,
        host_elementwise=False):
    """Run *transform* over a generated input on *executor* and on the host,
    and compare the results.

    :arg config: a :class:`BenchmarkConfig`.
    :arg executor: a :class:`~heavycompute.executor.ParallelExecutor`.
    :returns: a :class:`BenchmarkResult`.
    :raises heavycompute.DeviceError: if a device operation fails.
    """
    logger.info("benchmarking %d elements, %d iterations, group size %d on %s",
            config.element_count, config.iterations, config.group_size,
            executor.describe())

    inputs = generate_input(config.element_count)

    device_output, device_ms = run_device(executor, inputs, config.iterations,
            group_size=config.group_size, transform=transform)
    host_output, host_ms = run_host(inputs, config.iterations,
            transform=transform, elementwise=host_elementwise)

    verification = verify(device_output, host_output)
    if not verification:
        logger.warning("%d mismatches, first at index %s",
                verification.mismatch_count, verification.first_mismatch)

    result = BenchmarkResult(
            config=config,
            device_ms=device_ms,
            host_ms=host_ms,
            verification=verification,
            device_output=device_output,
            host_output=host_output)

    logger.info("speedup of device over host: %.2fx", result.speedup)
    return result

# vim: foldmethod=marker
