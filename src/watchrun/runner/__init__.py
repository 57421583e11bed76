"""
Watchrun Runner Package.

Command supervision and the watch loop.
Requires Python 3.11+.
"""

from watchrun.runner.supervisor import CLEAR, CommandSupervisor, RunResult
from watchrun.runner.loop import LoopState, WatchLoop

__all__ = ["CLEAR", "CommandSupervisor", "RunResult", "LoopState", "WatchLoop"]
