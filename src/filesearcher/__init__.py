"""
File Searcher - Core Package

Concurrent filesystem search that walks one or more directory trees in
parallel and collects every file whose name matches a target exactly.
"""

__version__ = "0.1.0"
__author__ = "File Searcher Team"

from .searcher import FileSearcher, SearchError, find

__all__ = ['FileSearcher', 'SearchError', 'find']
