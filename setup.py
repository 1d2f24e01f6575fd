#!/usr/bin/env python3
"""
trackgeom Setup Script
Packaging for the measurement geometry and conversion library
"""

import os
from setuptools import setup, find_packages


def get_long_description():
    """Read the README if one is shipped"""
    readme_file = os.path.join(os.path.dirname(__file__), 'README.md')
    if os.path.exists(readme_file):
        with open(readme_file, 'r', encoding='utf-8') as f:
            return f.read()
    return ''


setup(
    name='trackgeom',
    version='1.0.0',
    description='Measurement geometry routines for tracking sensors: cubature '
                'conversion into refraction-corrupted bistatic r-u-v coordinates',
    long_description=get_long_description(),
    long_description_content_type='text/markdown',
    packages=find_packages(include=['trackgeom', 'trackgeom.*']),
    python_requires='>=3.8',
    install_requires=[
        'numpy>=1.20.0',
        'scipy>=1.7.0',
        'matplotlib>=3.3.0',
        'PyYAML>=5.4.0',
    ],
    extras_require={
        'test': ['pytest>=7.0.0'],
    },
    classifiers=[
        'Programming Language :: Python :: 3',
        'Topic :: Scientific/Engineering',
    ],
)
