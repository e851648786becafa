# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
# SPDX-License-Identifier: MPL-2.0
"""
A setuptools based setup module.
See:
https://packaging.python.org/guides/distributing-packages-using-setuptools/
https://github.com/pypa/sampleproject
"""

# Always prefer setuptools over distutils
from setuptools import setup, find_packages
import os

here = os.path.abspath(os.path.dirname(__file__))

# read the version without importing the package (it needs the dependencies)
version_info = dict()
with open(os.path.join(here, 'src', 'VectorCalcEngine', '__version__.py'), encoding='utf-8') as f:
    exec(f.read(), version_info)

long_description = """# VectorCalcEngine

Symbolic differentiation, simplification and vector calculus (gradient, divergence, curl)
on immutable expression trees, with numba compilation of the resulting expressions.

## Installation

pip install VectorCalcEngine
"""

description = 'Symbolic differentiation and vector calculus on expression trees'

pkgs_to_exclude = ['docs', 'research', 'tests', 'tests.*', 'tutorials']

packages = find_packages(where='src', exclude=pkgs_to_exclude)

dependencies = ['setuptools>=41.0.1',
                "numpy>=1.19.0",
                "scipy>=1.0.0",
                "pandas>=2.2.3",
                "numba>=0.60",  # to compile routines natively
                ]

extras_require = {
    'test': ["pytest>=7.2"]
}

setup(
    name='VectorCalcEngine',  # Required
    version=version_info['__VectorCalcEngine_VERSION__'],  # Required
    license='MPL2',
    description=description,  # Optional
    long_description=long_description,  # Optional
    long_description_content_type='text/markdown',  # Optional (see note above)
    classifiers=[
        'License :: OSI Approved :: Mozilla Public License 2.0 (MPL 2.0)',
        'Programming Language :: Python :: 3.9',
    ],
    keywords='symbolic differentiation vector calculus',  # Optional
    packages=packages,  # Required
    package_dir={'': 'src'},
    include_package_data=True,
    python_requires='>=3.9',
    install_requires=dependencies,
    extras_require=extras_require,
)
