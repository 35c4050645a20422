"""
Pipeline components for the File Searcher.

This package contains the pending-work counter, the filesystem access
helpers, and the directory producer and file consumer workers.
"""
