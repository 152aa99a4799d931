"""Classroom Hub: honor board, badges and class reports over the school's spreadsheet data."""

__version__ = "0.3.0"
