"""
Data models for the File Searcher.

This module contains all the core data structures used throughout the system.
"""

from .entries import END_OF_STREAM, EndOfStream, PathEntry
from .search_query import SearchQuery

__all__ = ['END_OF_STREAM', 'EndOfStream', 'PathEntry', 'SearchQuery']
