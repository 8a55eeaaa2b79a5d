"""
Nestore - Nested Interactive Tabular Store

A toy multi-tenant record store reachable through a nested interactive shell.
Databases hold schema-less stores, stores hold records keyed by an
auto-incrementing id. JSON persistence and SQL script export included.
"""

from setuptools import setup, find_packages
import os

# Read README for long description
def read_long_description():
    readme_path = os.path.join(os.path.dirname(__file__), 'README.md')
    if os.path.exists(readme_path):
        with open(readme_path, 'r', encoding='utf-8') as f:
            return f.read()
    return ""

# Define optional dependencies
extras_require = {
    # Alternative JSON implementations for save/load
    'orjson': [
        'orjson>=3.6.0',
    ],
    'ujson': [
        'ujson>=5.0.0',
    ],

    # Test dependencies
    'test': [
        'pytest>=7.0.0',
    ],

    # Development dependencies
    'dev': [
        'mypy>=0.950',
        'build>=0.7.0',
        'twine>=4.0.0',
    ],
}

# All JSON engines
extras_require['all'] = (
    extras_require['orjson'] +
    extras_require['ujson']
)

# Full development environment
extras_require['full'] = (
    extras_require['all'] +
    extras_require['test'] +
    extras_require['dev']
)

setup(
    name="nestore",
    version="0.1.0",
    author="",
    author_email="",
    description="Nested interactive tabular store - schema-less stores, JSON persistence, SQL export",
    long_description=read_long_description(),
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=['tests', 'tests.*']),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Database",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Typing :: Typed",
    ],
    python_requires=">=3.10",

    # Core engine is pure Python; the shell uses click and rich
    install_requires=[
        'click>=8.0.0',
        'rich>=12.0.0',
    ],

    # Optional dependencies
    extras_require=extras_require,

    entry_points={
        'console_scripts': [
            'nestore=nestore.cli.main:main',
        ],
    },

    keywords="database nosql record-store json sql-export shell repl",
)
