"""
Search results data models for the File Searcher.

This module defines the result of a completed search: the matching paths in
the order the consumer collected them, plus counters gathered from every
worker while the tree was walked.
"""

from typing import Dict, List, Any
from datetime import datetime
from pydantic import BaseModel, Field

from .search_query import SearchQuery


class SearchStats(BaseModel):
    """
    Counters collected by the pipeline workers.

    Each worker fills its own instance; the coordinator merges them once all
    workers have stopped.

    Attributes:
        directories_expanded: Directories whose children were listed
        files_examined: Entries the consumer compared against the target name
        entries_skipped: Entries dropped by the skip rules
        listing_errors: Directories that could not be listed
        directory_sentinels_broadcast: End-of-stream markers put on the directory queue at shutdown
        file_sentinels_sent: End-of-stream markers put on the file queue
    """

    directories_expanded: int = Field(0, ge=0)
    files_examined: int = Field(0, ge=0)
    entries_skipped: int = Field(0, ge=0)
    listing_errors: int = Field(0, ge=0)
    directory_sentinels_broadcast: int = Field(0, ge=0)
    file_sentinels_sent: int = Field(0, ge=0)

    def merge(self, other: 'SearchStats') -> 'SearchStats':
        """Add another worker's counters into this one and return self."""
        for name in SearchStats.model_fields:
            setattr(self, name, getattr(self, name) + getattr(other, name))
        return self

    def to_dict(self) -> Dict[str, int]:
        """Convert stats to dictionary representation."""
        return self.model_dump()


class SearchResults(BaseModel):
    """
    Complete results from a search operation.

    Attributes:
        query: The search query that produced these results
        matches: Absolute paths of matching files in consumer drain order
        stats: Counters merged from all workers
        execution_time: Time taken to walk the tree in seconds
        timestamp: When the search was started
        errors: Listing failures encountered during the walk (capped)
    """

    query: SearchQuery = Field(..., description="The search query")
    matches: List[str] = Field(default_factory=list, description="Matching absolute paths")
    stats: SearchStats = Field(default_factory=SearchStats, description="Pipeline counters")
    execution_time: float = Field(0.0, ge=0.0, description="Time taken to execute the search")
    timestamp: datetime = Field(default_factory=datetime.now, description="When the search was executed")
    errors: List[str] = Field(default_factory=list, description="Listing failures encountered")

    def get_match_count(self) -> int:
        """Get the total number of matches."""
        return len(self.matches)

    def has_matches(self) -> bool:
        """Check if at least one file matched."""
        return bool(self.matches)

    def has_errors(self) -> bool:
        """Check if any directory could not be listed."""
        return self.stats.listing_errors > 0 or len(self.errors) > 0

    def sorted_matches(self) -> List[str]:
        """Get matches sorted by path, for reproducible output."""
        return sorted(self.matches)

    def to_dict(self) -> Dict[str, Any]:
        """Convert search results to dictionary representation."""
        data = self.model_dump()
        data['query'] = self.query.to_dict()
        data['stats'] = self.stats.to_dict()
        data['match_count'] = self.get_match_count()
        data['timestamp'] = self.timestamp.isoformat()
        data['has_errors'] = self.has_errors()
        return data

    def __str__(self) -> str:
        """String representation of search results."""
        parts = [f"Found {self.get_match_count()} matches"]
        parts.append(f"Expanded {self.stats.directories_expanded} directories")
        parts.append(f"Examined {self.stats.files_examined} files")
        parts.append(f"Took {self.execution_time:.2f}s")

        if self.has_errors():
            parts.append(f"Errors: {self.stats.listing_errors}")

        return " | ".join(parts)
