"""
Watchrun.

Re-runs a shell command whenever a watched directory changes.
Requires Python 3.11+.
"""

__version__ = "0.1.0"
