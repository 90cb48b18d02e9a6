#!/usr/bin/env python3
"""
Setup script for message-resolver

Installs the message_resolver package (from src/) and the
`message-resolver` command for structuring log messages.
"""

import os
import re
import sys

from setuptools import setup, find_packages

if sys.version_info < (3, 10):
    raise RuntimeError("message-resolver requires Python 3.10 or higher")

HERE = os.path.dirname(os.path.abspath(__file__))


def read(*parts, default=""):
    """Read a file relative to this script, or return default if missing"""
    path = os.path.join(HERE, *parts)
    if not os.path.exists(path):
        return default
    with open(path, encoding='utf-8') as f:
        return f.read()


def get_version():
    """Take __version__ from the package without importing it"""
    match = re.search(
        r'^__version__\s*=\s*[\'"]([^\'"]+)[\'"]',
        read('src', 'message_resolver', '__init__.py'),
        re.MULTILINE
    )
    return match.group(1) if match else "0.0.0"


# Runtime dependencies: CLI, .env configuration, progress bars
INSTALL_REQUIRES = [
    "click>=8.0.0",
    "python-dotenv>=0.19.0",
    "tqdm>=4.65.0",
]

TEST_REQUIRES = [
    "pytest>=7.0.0",
    "pytest-cov>=4.0.0",
]

EXTRAS_REQUIRE = {
    'test': TEST_REQUIRES,
    'dev': TEST_REQUIRES + [
        "black>=23.0.0",
        "flake8>=6.0.0",
        "mypy>=1.0.0",
    ],
}

setup(
    name="message-resolver",
    version=get_version(),
    description="Best-effort structuring of free-form log messages into JSON documents",
    long_description=read('README.md', default="Structure free-form log messages into JSON documents"),
    long_description_content_type="text/markdown",

    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.10",

    install_requires=INSTALL_REQUIRES,
    extras_require=EXTRAS_REQUIRE,

    entry_points={
        'console_scripts': [
            'message-resolver=message_resolver.cli.main:main',
        ],
    },

    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: System :: Logging",
        "Topic :: Text Processing",
    ],
    keywords=["logging", "json", "log-parsing", "structured-logging"],

    zip_safe=False,
)
