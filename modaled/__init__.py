"""modaled - the editing core of a modal terminal text editor."""

from .buffer import Buffer, FileError, Location
from .line import Line
from .selection import Selection
from .view import Mode, View

__all__ = [
    'Buffer',
    'FileError',
    'Line',
    'Location',
    'Mode',
    'Selection',
    'View',
]
