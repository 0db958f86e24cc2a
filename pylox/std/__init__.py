"""Standard globals available to every Lox program."""

import time
from typing import Any, List

from pylox.builtin_function import BuiltinFunction
from pylox.environment import Environment


def populate_globals(env: Environment) -> Environment:
    def std_clock(args: List[Any]) -> Any:
        # milliseconds since the epoch, expressed in seconds
        return (time.time_ns() // 1_000_000) / 1000.0

    env.define('clock', BuiltinFunction('clock', 0, std_clock))
    return env
