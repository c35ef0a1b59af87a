#!/usr/bin/env python3
from setuptools import setup


setup(
    name='hashstrings',
    version='0.1.0',
    description='Generate static keyword lookup tables for C',
    packages=['hashstrings'],
    package_dir={'hashstrings': 'python/hashstrings'},
    package_data={'hashstrings': ['include/libhashstrings.h']},
    python_requires='>=3.10',
    install_requires=['cffi>=1.0.1', 'libconf>=2.0', 'setuptools'],
    extras_require={'test': ['pytest']},
    entry_points={'console_scripts': ['hashstrings = hashstrings.__main__:main']},
)
