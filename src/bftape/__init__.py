
from .api import RunOptions, RunResult, load_program, run_file, run_string, run_sync
from .errors import BFTapeError, InvalidMemorySizeError, ProgramFileError, ReentrantStepError
from .interpreter import DEFAULT_MEMORY_SIZE, BrainfuckInterpreter
from .memory_view import MemoryWindow, memory_window, render_window
from .session import ExecutionState, Session
from .source import DEFAULT_PROGRAM, HELLO_WORLD, SourcePosition, check_brackets, find_unmatched_brackets, locate
from .state import InterpreterState
from .streams import CollectOutput, QueueInput, StaticInput, StreamInput, StreamOutput

__all__ = [
    'BrainfuckInterpreter',
    'DEFAULT_MEMORY_SIZE',
    'InterpreterState',
    'Session',
    'ExecutionState',
    'RunOptions',
    'RunResult',
    'run_string',
    'run_file',
    'run_sync',
    'load_program',
    'locate',
    'SourcePosition',
    'find_unmatched_brackets',
    'check_brackets',
    'DEFAULT_PROGRAM',
    'HELLO_WORLD',
    'MemoryWindow',
    'memory_window',
    'render_window',
    'StreamOutput',
    'StreamInput',
    'StaticInput',
    'QueueInput',
    'CollectOutput',
    'BFTapeError',
    'InvalidMemorySizeError',
    'ProgramFileError',
    'ReentrantStepError',
]
