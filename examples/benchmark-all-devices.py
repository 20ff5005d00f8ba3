#!/usr/bin/env python

# Runs the heavycompute benchmark once on every OpenCL device found.

import argparse
import logging

import pyopencl as cl

from heavycompute import BenchmarkConfig, DeviceError, OpenCLExecutor, run_benchmark


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("-n", "--element-count", type=int, default=2**22)
    parser.add_argument("-i", "--iterations", type=int, default=100)
    parser.add_argument("-g", "--group-size", type=int, default=256)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)

    config = BenchmarkConfig(
            element_count=args.element_count,
            iterations=args.iterations,
            group_size=args.group_size)

    for platform in cl.get_platforms():
        for device in platform.get_devices():
            print("===============================================================")
            print("Platform name:", platform.name)
            print("Platform vendor:", platform.vendor)
            print("Platform version:", platform.version)
            print("---------------------------------------------------------------")
            print("Device name:", device.name)
            print("Device type:", cl.device_type.to_string(device.type))
            print("Device memory: ", device.global_mem_size//1024//1024, "MB")
            print("Device max clock speed:", device.max_clock_frequency, "MHz")
            print("Device compute units:", device.max_compute_units)
            print("Device max work group size:", device.max_work_group_size)

            try:
                result = run_benchmark(config,
                        OpenCLExecutor(cl.Context([device])))
            except DeviceError as e:
                print("Benchmark failed:", e)
                continue

            for line in result.format_report():
                print(line)
            print(f"Speedup: {result.speedup:.1f}x")


if __name__ == "__main__":
    main()
