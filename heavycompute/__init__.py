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

from heavycompute.version import VERSION, VERSION_STATUS, VERSION_TEXT


__version__ = VERSION_TEXT

logger = logging.getLogger(__name__)


# {{{ diagnostics

class HeavyComputeError(Exception):
    pass


class DeviceError(HeavyComputeError):
    """Raised when an operation on the compute device fails.

    .. attribute:: operation

        A short description of the failing step, e.g. ``"kernel launch"``.

    The underlying :class:`pyopencl.Error`, if any, is available as
    ``__cause__``.
    """

    def __init__(self, operation, message=None):
        self.operation = operation
        self.message = message

        if message:
            super().__init__(f"{operation} failed: {message}")
        else:
            super().__init__(f"{operation} failed")


class DeviceUnavailableError(DeviceError):
    pass


class GroupSizeWarning(UserWarning):
    pass

# }}}


from heavycompute.transform import (  # noqa: E402
        Transform, DEFAULT_TRANSFORM, transform)
from heavycompute.executor import (  # noqa: E402
        ParallelExecutor, OpenCLExecutor, HostExecutor, create_context,
        get_group_count)
from heavycompute.harness import (  # noqa: E402
        BenchmarkConfig, BenchmarkResult, Verification,
        generate_input, run_host, run_device, verify, run_benchmark)


__all__ = [
        "VERSION", "VERSION_STATUS", "VERSION_TEXT",

        "HeavyComputeError", "DeviceError", "DeviceUnavailableError",
        "GroupSizeWarning",

        "Transform", "DEFAULT_TRANSFORM", "transform",

        "ParallelExecutor", "OpenCLExecutor", "HostExecutor",
        "create_context", "get_group_count",

        "BenchmarkConfig", "BenchmarkResult", "Verification",
        "generate_input", "run_host", "run_device", "verify",
        "run_benchmark",
        ]

# vim: foldmethod=marker
