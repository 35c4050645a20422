"""
Search query data model for the File Searcher.

This module defines the validated input of one search invocation: the exact
file name to look for and the root directories the walk starts from.
"""

import os
from typing import Dict, List, Any
from pydantic import BaseModel, Field, field_validator


class SearchQuery(BaseModel):
    """
    Represents one search invocation.

    The query is immutable once validated; a second search with a different
    target name is a new SearchQuery and runs as an independent pipeline.

    Attributes:
        target_name: Exact base name a file must have to match
        roots: Root directories the walk is seeded with
    """

    model_config = {'frozen': True}

    target_name: str = Field(..., min_length=1, description="Exact file name to search for")
    roots: List[str] = Field(..., min_length=1, description="Root directories to search")

    @field_validator('target_name')
    @classmethod
    def validate_target_name(cls, v: str) -> str:
        """Reject names that could never equal a real base name."""
        if not v.strip():
            raise ValueError("Target name cannot be blank")
        if '/' in v or (os.sep != '/' and os.sep in v):
            raise ValueError(f"Target name must be a base name, not a path: {v!r}")
        # No stripping: matching is exact, so surrounding spaces are significant
        return v

    @field_validator('roots')
    @classmethod
    def validate_roots(cls, v: List[str]) -> List[str]:
        """Validate and normalize root directory paths."""
        normalized_roots = []
        for root in v:
            if not root or not root.strip():
                continue

            root_path = os.path.abspath(os.path.expanduser(root.strip()))
            if root_path not in normalized_roots:
                normalized_roots.append(root_path)

        if not normalized_roots:
            raise ValueError("No valid root directories provided")

        return normalized_roots

    def to_dict(self) -> Dict[str, Any]:
        """Convert the search query to a dictionary representation."""
        return self.model_dump()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SearchQuery':
        """Create a SearchQuery instance from a dictionary."""
        return cls.model_validate(data)

    def __str__(self) -> str:
        """String representation of the search query."""
        return f"Name: '{self.target_name}' | Roots: {len(self.roots)} directories"
