"""Command line entry point: ``python -m heavycompute``."""

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

import argparse
import logging
import os
import sys

from heavycompute import DeviceError, VERSION_TEXT
from heavycompute.executor import HostExecutor, OpenCLExecutor
from heavycompute.harness import BenchmarkConfig, run_benchmark


logger = logging.getLogger(__name__)

EXIT_PASSED = 0
EXIT_FAILED = 1
EXIT_DEVICE_ERROR = 3

BACKENDS = {
        "opencl": OpenCLExecutor,
        "host": HostExecutor,
        }


def get_parser(defaults, default_backend):
    parser = argparse.ArgumentParser(
            prog="heavycompute",
            description="Compare a compute-bound integer kernel on an OpenCL "
            "device against the same computation on the host.",
            epilog="The device is chosen as by pyopencl.create_some_context, "
            "see PYOPENCL_CTX.")
    parser.add_argument("--version", action="version",
            version=f"%(prog)s {VERSION_TEXT}")
    parser.add_argument("-n", "--element-count", type=int,
            default=defaults.element_count,
            help="number of elements (default: %(default)s)")
    parser.add_argument("-i", "--iterations", type=int,
            default=defaults.iterations,
            help="transform steps per element (default: %(default)s)")
    parser.add_argument("-g", "--group-size", type=int,
            default=defaults.group_size,
            help="work group size on the device (default: %(default)s)")
    parser.add_argument("--backend", choices=sorted(BACKENDS),
            default=default_backend,
            help="parallel backend (default: %(default)s)")
    parser.add_argument("--host-mode", choices=["vectorized", "elementwise"],
            default="vectorized",
            help="how the host path visits elements (default: %(default)s)")
    parser.add_argument("-v", "--verbose", action="count", default=0,
            help="log progress to stderr, repeat for debug output")
    return parser


def _configure_logging(verbosity):
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(stream=sys.stderr, level=level,
            format="%(asctime)s %(name)s %(levelname)s: %(message)s")


def main(argv=None, environ=None):
    if environ is None:
        environ = os.environ

    bootstrap_parser = get_parser(BenchmarkConfig(), "opencl")
    try:
        defaults = BenchmarkConfig.from_env(environ)
    except ValueError as e:
        bootstrap_parser.error(str(e))

    default_backend = environ.get("HEAVYCOMPUTE_BACKEND", "opencl")
    if default_backend not in BACKENDS:
        bootstrap_parser.error(
                f"HEAVYCOMPUTE_BACKEND must be one of {sorted(BACKENDS)}, "
                f"got '{default_backend}'")

    parser = get_parser(defaults, default_backend)
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    try:
        config = BenchmarkConfig(
                element_count=args.element_count,
                iterations=args.iterations,
                group_size=args.group_size)
    except ValueError as e:
        parser.error(str(e))

    try:
        executor = BACKENDS[args.backend]()
        result = run_benchmark(config, executor,
                host_elementwise=args.host_mode == "elementwise")
    except DeviceError as e:
        logger.debug("device failure", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return EXIT_DEVICE_ERROR

    for line in result.format_report():
        print(line)

    return EXIT_PASSED if result.passed else EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
