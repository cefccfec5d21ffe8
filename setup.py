#!/usr/bin/env python3
"""cubectl - Setup"""

from setuptools import setup, find_packages

with open("requirements.txt") as f:
    requirements = f.read().splitlines()

setup(
    name="cubectl",
    version="0.1.0",
    description="Run shell script cubes and commands on a fleet of hosts over SSH",
    author="cubectl Team",
    packages=find_packages(include=["cubectl", "cubectl.*"]),
    package_data={"cubectl": ["data/*.sh"]},
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "cubectl=cubectl.main:main",
        ],
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: System Administrators",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
