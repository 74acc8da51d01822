"""
pwrtest command-line interface.

Entry points:
- pwrtest: installed console script
- python -m pwrtest
- main(argv) for programmatic use
"""

from pwrtest.cli.dispatch import main

__all__ = ["main"]
