"""Formatting module for logkeeper.

Contains the record formatter and the buffer pool it renders into.
"""

from logkeeper.formatting.buffer import BufferPool, RecordBuffer
from logkeeper.formatting.formatter import RecordFormatter, find_caller, shorten_path

__all__ = ["BufferPool", "RecordBuffer", "RecordFormatter", "find_caller", "shorten_path"]
