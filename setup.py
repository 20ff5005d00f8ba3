#!/usr/bin/env python


__copyright__ = """
Copyright (C) 2026 The heavycompute authors
"""

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


def main():
    from setuptools import find_packages, setup

    ver_dic = {}
    version_file = open("heavycompute/version.py")
    try:
        version_file_contents = version_file.read()
    finally:
        version_file.close()

    exec(compile(version_file_contents, "heavycompute/version.py", "exec"),
            ver_dic)

    setup(name="heavycompute",
            # metadata
            version=ver_dic["VERSION_TEXT"],
            description="Compute-bound OpenCL kernel versus host benchmark",
            long_description=open("README.rst").read(),
            long_description_content_type="text/x-rst",
            license="MIT",
            classifiers=[
                "Environment :: Console",
                "Development Status :: 4 - Beta",
                "Intended Audience :: Developers",
                "Intended Audience :: Science/Research",
                "License :: OSI Approved :: MIT License",
                "Natural Language :: English",
                "Programming Language :: Python",
                "Programming Language :: Python :: 3",
                "Topic :: Scientific/Engineering",
                "Topic :: System :: Benchmark",
                ],

            packages=find_packages(include=["heavycompute", "heavycompute.*"]),

            python_requires="~=3.10",
            install_requires=[
                "numpy",
                "pytools>=2022.1.13",
                "pyopencl>=2022.1",
                ],
            extras_require={
                "pocl":  ["pocl_binary_distribution>=1.2"],
                "test": ["pytest>=7.0.0"],
            },
            entry_points={
                "console_scripts": [
                    "heavycompute = heavycompute.__main__:main",
                    ],
                },
            zip_safe=False)


if __name__ == "__main__":
    main()

# vim: foldmethod=marker
