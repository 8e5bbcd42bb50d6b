# Lango language package
# This package provides a scanner, parser, resolver and tree-walking interpreter for Lango.
from .interpreter import run_program, run_source, parse_program, Interpreter
from .errors import LangoError
from .reporter import ErrorReporter

__all__ = [
    'run_program',
    'run_source',
    'parse_program',
    'Interpreter',
    'LangoError',
    'ErrorReporter',
]
