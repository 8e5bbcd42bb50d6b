"""Native functions registered in every Lango global environment."""

import time
from typing import Any, List

from lango.builtin_function import BuiltinFunction
from lango.environment import Environment


def std_clock(args: List[Any]) -> float:
    """Seconds since the epoch as a fractional number."""
    return time.time()


def populate_std_environment(env: Environment) -> Environment:
    env.define('clock', BuiltinFunction('clock', 0, std_clock))
    return env
