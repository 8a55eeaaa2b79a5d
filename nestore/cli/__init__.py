"""
Nestore 命令行

包含交互式 Shell 和 click 入口
"""

from .shell import BaseShell, RootShell, DatabaseShell, StoreShell
from .main import cli, main

__all__ = [
    'BaseShell',
    'RootShell',
    'DatabaseShell',
    'StoreShell',
    'cli',
    'main',
]
