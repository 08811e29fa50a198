"""
Result output - JSONL frame log and console reporting.
"""

from .json_writer import ResultWriter

__all__ = ["ResultWriter"]
