#!/usr/bin/env python

# SPDX-FileCopyrightText: 2024 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later

# -*- encoding: utf-8 -*-

from setuptools import find_packages
from setuptools import setup

setup(
    name="typr",
    version="0.0.0",
    license="GPL-3.0-or-later",
    description="Keystroke capture and typing analytics",
    long_description="Captures keydown/keyup timing from typing tests and derives dwell, flight, digraph, error and rhythm statistics.",
    author="Rose Davidson",
    author_email="rose@metaclassical.com",
    packages=find_packages("src"),
    package_dir={"": "src"},
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        # complete classifier list: http://pypi.python.org/pypi?%3Aaction=list_classifiers
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)",
        "Operating System :: OS Independent",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: Implementation :: CPython",
    ],
    keywords=[
        "typing",
        "keystroke dynamics",
    ],
    python_requires=">=3.11",
    install_requires=[
        "cattrs>=23.1",
        "msgspec>=0.18",
        "outcome>=1.2",
        "python-dateutil>=2.8.1",
        "sqlalchemy>=2.0",
        "timeflake>=0.4.0",
        "trio>=0.22.0",
        "trio-util>=0.7.0",
    ],
    tests_require=["pytest>=7.0", "pytest-trio>=0.8.0"],
    extras_require={
        "test": ["pytest>=7.0", "pytest-trio>=0.8.0"],
    },
    entry_points={
        "console_scripts": [
            "typr-analyze = typr.scripts:analyze_cli",
            "typr-sessions = typr.scripts:list_sessions_cli",
            "typr-replay = typr.scripts:replay_cli",
        ],
    },
)
