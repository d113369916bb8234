#!/usr/bin/env python3
"""
Setup script for the SWSC console chat client
"""

from setuptools import setup, find_packages

setup(
    name="swsc",
    version="0.0.1",
    description="Console client for the SWSC chat service",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "websockets==15.0",
        "httpx==0.27.2",
        "click==8.1.7",
        "typer==0.12.3",
        "rich==13.9.2",
        "aioconsole==0.8.1",
        "PyYAML==6.0.2",
    ],
    extras_require={
        "test": [
            "pytest==8.4.2",
            "pytest-asyncio==1.2.0",
        ],
    },
    python_requires=">=3.9",
    entry_points={
        'console_scripts': [
            'swsc=client.swsc_cli:main',
        ],
    },
)
