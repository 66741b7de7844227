#!/usr/bin/env python

"""
A setuptools based setup module.
See:
https://packaging.python.org/en/latest/distributing.html
https://github.com/pypa/sampleproject
"""

from codecs import open  # To use a consistent encoding
from os import path

# Always prefer setuptools over distutils
from setuptools import find_namespace_packages, setup

here = path.abspath(path.dirname(__file__))

# Get the long description from the README file
with open(path.join(here, "README.md"), encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="relocperf",
    version="0.1.0",
    description="Evaluation of camera relocalization accuracy under the 7-Scenes metric.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="",
    author="",
    author_email="",
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: Developers",
        "Operating System :: POSIX",
        "Operating System :: MacOS",
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Image Recognition",
    ],
    keywords="computer-vision relocalization",
    # packages are implicit namespace packages (no __init__.py files).
    packages=find_namespace_packages(include=["relocperf", "relocperf.*"]),
    package_data={"relocperf.configs": ["*.yaml"]},
    python_requires=">= 3.8",
    install_requires=[
        "click>=8.0",
        "hydra-core>=1.2",
        "matplotlib",
        "numpy",
        "scipy>=1.4",
    ],
    extras_require={"test": ["pytest"]},
)
