#! /usr/bin/env python

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

import math

import numpy as np
import pytest

from heavycompute import (
        DEFAULT_TRANSFORM, BenchmarkConfig, HostExecutor, ParallelExecutor,
        generate_input, get_group_count, run_benchmark, run_device, run_host,
        transform, verify)


class OffByOneExecutor(ParallelExecutor):
    """Computes correctly, then corrupts one element."""

    def __init__(self, bad_index):
        self.bad_index = bad_index

    def dispatch(self, transform, inputs, output, iterations, group_size=256):
        transform.apply(inputs, iterations, out=output)
        output[self.bad_index] += 1
        return 0.5


# {{{ input generation

def test_generate_input():
    inputs = generate_input(1234)

    assert inputs.dtype == np.int32
    assert inputs.shape == (1234,)
    assert (inputs == np.arange(1234) % 100).all()
    assert inputs[0] == 0
    assert inputs[99] == 99
    assert inputs[100] == 0


def test_generate_input_is_read_only():
    inputs = generate_input(10)
    with pytest.raises(ValueError):
        inputs[0] = 5


def test_generate_input_deterministic():
    assert np.array_equal(generate_input(500), generate_input(500))


def test_generate_input_rejects_empty():
    with pytest.raises(ValueError):
        generate_input(0)

# }}}


# {{{ configuration

def test_config_defaults():
    config = BenchmarkConfig()
    assert config.element_count == 10_000_000
    assert config.iterations == 100
    assert config.group_size == 256


@pytest.mark.parametrize("kwargs", [
    {"element_count": 0},
    {"element_count": -3},
    {"iterations": -1},
    {"iterations": 2**31},
    {"group_size": 0},
    ])
def test_config_validation(kwargs):
    with pytest.raises(ValueError):
        BenchmarkConfig(**kwargs)


def test_config_iteration_bounds_allowed():
    assert BenchmarkConfig(iterations=0).iterations == 0
    assert BenchmarkConfig(iterations=2**31 - 1).iterations == 2**31 - 1


def test_config_from_env():
    config = BenchmarkConfig.from_env({
        "HEAVYCOMPUTE_ELEMENT_COUNT": "5000",
        "HEAVYCOMPUTE_ITERATIONS": " 7 ",
        "HEAVYCOMPUTE_GROUP_SIZE": "",
        "UNRELATED": "x",
        })

    assert config == BenchmarkConfig(element_count=5000, iterations=7)


def test_config_from_env_rejects_garbage():
    with pytest.raises(ValueError, match="HEAVYCOMPUTE_ITERATIONS"):
        BenchmarkConfig.from_env({"HEAVYCOMPUTE_ITERATIONS": "lots"})

    with pytest.raises(ValueError):
        BenchmarkConfig.from_env({"HEAVYCOMPUTE_GROUP_SIZE": "0"})

# }}}


# {{{ host path

@pytest.mark.parametrize("elementwise", [False, True])
def test_run_host(elementwise):
    inputs = generate_input(300)
    output, elapsed_ms = run_host(inputs, 20, elementwise=elementwise)

    assert output.dtype == np.int32
    assert output.tolist() == [transform(v, 20) for v in inputs.tolist()]
    assert elapsed_ms >= 0
    assert math.isfinite(elapsed_ms)


def test_run_host_modes_agree():
    inputs = generate_input(1000)
    vectorized, _ = run_host(inputs, 100)
    elementwise, _ = run_host(inputs, 100, elementwise=True)
    assert np.array_equal(vectorized, elementwise)

# }}}


# {{{ host executor

def test_group_count():
    assert get_group_count(1, 256) == 1
    assert get_group_count(256, 256) == 1
    assert get_group_count(257, 256) == 2
    assert get_group_count(10_000_001, 256) == 39063

    with pytest.raises(ValueError):
        get_group_count(10, 0)


def test_single_element():
    inputs = generate_input(1)
    output, elapsed_ms = run_device(HostExecutor(), inputs, 100)

    assert output.tolist() == [transform(0, 100)]
    assert elapsed_ms >= 0


@pytest.mark.parametrize(("n", "group_size", "max_workers"), [
    (1001, 256, 4),
    (1001, 1, 3),
    (255, 256, 2),
    (4096, 64, 1),
    ])
def test_partial_group_stays_in_bounds(n, group_size, max_workers):
    inputs = generate_input(n)
    padded = np.full(n + 32, -1, dtype=np.int32)

    HostExecutor(max_workers=max_workers).dispatch(
            DEFAULT_TRANSFORM, inputs, padded[:n], 13, group_size=group_size)

    expected, _ = run_host(inputs, 13)
    assert np.array_equal(padded[:n], expected)
    assert (padded[n:] == -1).all()


def test_large_uneven_element_count():
    n = 10_000_001
    inputs = generate_input(n)
    output, _ = run_device(HostExecutor(), inputs, 2, group_size=256)

    expected, _ = run_host(inputs, 2)
    assert np.array_equal(output, expected)


def test_host_executor_checks_arrays():
    executor = HostExecutor(max_workers=1)
    inputs = generate_input(10)

    with pytest.raises(ValueError):
        executor.dispatch(DEFAULT_TRANSFORM, inputs,
                np.empty(11, dtype=np.int32), 1)

    with pytest.raises(TypeError):
        executor.dispatch(DEFAULT_TRANSFORM, inputs,
                np.empty(10, dtype=np.float32), 1)

    with pytest.raises(ValueError):
        HostExecutor(max_workers=0)

# }}}


# {{{ verification

def test_verify_equal():
    a = np.arange(10, dtype=np.int32)
    result = verify(a, a.copy())

    assert result
    assert result.passed
    assert result.mismatch_count == 0
    assert result.first_mismatch is None


def test_verify_reports_first_mismatch():
    a = np.arange(10, dtype=np.int32)
    b = a.copy()
    b[3] = -1
    b[7] = -1

    result = verify(a, b)

    assert not result
    assert result.mismatch_count == 2
    assert result.first_mismatch == 3


def test_verify_length_mismatch():
    result = verify(np.zeros(3, np.int32), np.zeros(4, np.int32))
    assert not result.passed

# }}}


# {{{ end to end

def test_benchmark_passes():
    config = BenchmarkConfig(element_count=1000, iterations=100)
    result = run_benchmark(config, HostExecutor())

    assert result.passed
    assert result.device_output.shape == (1000,)
    assert np.array_equal(result.device_output, result.host_output)
    for elapsed in [result.device_ms, result.host_ms]:
        assert elapsed >= 0
        assert math.isfinite(elapsed)

    lines = result.format_report()
    assert len(lines) == 3
    assert lines[0].startswith("Device kernel execution time:")
    assert lines[1].startswith("Host execution time:")
    assert lines[2] == "Output comparison: PASSED"


def test_benchmark_reports_failure():
    config = BenchmarkConfig(element_count=100, iterations=5)
    result = run_benchmark(config, OffByOneExecutor(42))

    assert not result.passed
    assert result.verification.first_mismatch == 42
    assert result.format_report()[2] == "Output comparison: FAILED"
    assert result.speedup == pytest.approx(result.host_ms / 0.5)

# }}}


if __name__ == "__main__":
    import sys
    if len(sys.argv) > 1:
        exec(sys.argv[1])
    else:
        from pytest import main
        main([__file__])

# vim: foldmethod=marker
