"""
Configuration data models for the File Searcher.

This module defines the data structures for the search coordinator's tunables:
worker counts, queue capacity, and the rules deciding which directory entries
are skipped during traversal.
"""

import os
import platform
from pathlib import Path
from typing import Dict, List, Optional, Any
from pydantic import BaseModel, Field, PrivateAttr, ValidationError, field_validator


DEFAULT_PRODUCER_COUNT = 6
DEFAULT_FILE_QUEUE_CAPACITY = 10000


def default_skip_paths() -> List[str]:
    """
    Get the pseudo and system paths that should never be expanded on this host.

    Returns:
        List of absolute directory paths
    """
    system = platform.system().lower()

    if system == "windows":
        return []

    return [
        "/proc",  # Process information
        "/sys",  # Kernel objects
        "/dev",  # Device files
        "/cdrom",  # Removable media mount point
    ]


class ConcurrencyConfig(BaseModel):
    """
    Configuration for the worker pool and queues.

    Attributes:
        producer_count: Number of parallel directory producers
        file_queue_capacity: Maximum number of entries waiting in the file queue
        put_poll_interval: Seconds between teardown checks while blocked on a full file queue
    """

    producer_count: int = Field(DEFAULT_PRODUCER_COUNT, gt=0, le=256, description="Number of directory producers")
    file_queue_capacity: int = Field(DEFAULT_FILE_QUEUE_CAPACITY, gt=0, description="File queue capacity")
    put_poll_interval: float = Field(0.1, gt=0.0, le=10.0, description="Teardown check interval for blocked puts")

    @property
    def worker_count(self) -> int:
        """Total number of workers: all producers plus the single consumer."""
        return self.producer_count + 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()


class SkipConfig(BaseModel):
    """
    Rules for entries that are neither expanded nor matched.

    Attributes:
        skip_hidden: Skip entries whose name starts with a dot
        skip_paths: Directories that are skipped together with everything below them
        follow_symlinks: Expand symbolic links that point to directories
    """

    skip_hidden: bool = Field(True, description="Skip entries whose name starts with '.'")
    skip_paths: List[str] = Field(default_factory=default_skip_paths, description="Paths never expanded")
    follow_symlinks: bool = Field(False, description="Expand symlinked directories")

    _skip_parts: List[tuple] = PrivateAttr(default_factory=list)

    @field_validator('skip_paths')
    @classmethod
    def validate_skip_paths(cls, v: List[str]) -> List[str]:
        """Normalize skip paths to absolute paths, dropping blanks and duplicates."""
        normalized = []
        for path in v:
            if not path or not path.strip():
                continue
            abs_path = os.path.abspath(os.path.expanduser(path.strip()))
            if abs_path not in normalized:
                normalized.append(abs_path)
        return normalized

    def model_post_init(self, __context) -> None:
        """Precompute the path components of each skip path."""
        self._skip_parts = [Path(p).parts for p in self.skip_paths]

    def is_skipped(self, path: str) -> bool:
        """
        Check if an entry should be dropped from the traversal.

        Args:
            path: Absolute path of the entry

        Returns:
            True if any path component starts with a dot, or the entry
            equals/descends from a skip path
        """
        parts = Path(path).parts

        if self.skip_hidden and any(part.startswith('.') for part in parts):
            return True

        for skip_parts in self._skip_parts:
            # Component-wise so that /proc skips /proc/1 but not /process
            if parts[:len(skip_parts)] == skip_parts:
                return True

        return False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()


class SearcherConfig(BaseModel):
    """
    Main configuration class for the File Searcher.

    Attributes:
        roots: Root directories to search; None means the host's filesystem roots
        concurrency: Worker pool and queue settings
        skip: Skip rules applied to every listed entry
        max_recorded_errors: Maximum number of listing failures kept in a result
    """

    roots: Optional[List[str]] = Field(None, description="Root directories to search")
    concurrency: ConcurrencyConfig = Field(default_factory=ConcurrencyConfig, description="Worker pool settings")
    skip: SkipConfig = Field(default_factory=SkipConfig, description="Skip rules")
    max_recorded_errors: int = Field(100, ge=0, description="Maximum listing errors recorded per search")

    @field_validator('roots')
    @classmethod
    def validate_roots(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        """Normalize root directories; an empty list means host roots."""
        if v is None:
            return None

        normalized_roots = []
        for root in v:
            if not root or not root.strip():
                continue
            root_path = os.path.abspath(os.path.expanduser(root.strip()))
            if root_path not in normalized_roots:
                normalized_roots.append(root_path)

        return normalized_roots or None

    def get_inaccessible_roots(self) -> List[str]:
        """Get configured roots that are missing or are not directories."""
        if not self.roots:
            return []
        return [root for root in self.roots if not os.path.isdir(root)]

    def validate_configuration(self) -> List[str]:
        """Validate the complete configuration and return any warnings."""
        warnings = []

        inaccessible = self.get_inaccessible_roots()
        if inaccessible:
            warnings.append(f"Inaccessible root directories: {', '.join(inaccessible)}")

        if self.roots is None:
            warnings.append("No roots configured, searches will walk the whole filesystem")

        cpu_count = os.cpu_count() or 1
        if self.concurrency.producer_count > cpu_count * 8:
            warnings.append(
                f"producer_count ({self.concurrency.producer_count}) is much larger than "
                f"the number of CPUs ({cpu_count})"
            )

        if self.skip.follow_symlinks:
            warnings.append("Following symlinks can visit the same directory more than once")

        return warnings

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary representation."""
        data = self.model_dump()
        data['concurrency'] = self.concurrency.to_dict()
        data['skip'] = self.skip.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SearcherConfig':
        """Create configuration from dictionary representation."""
        return cls.model_validate(data)

    def __str__(self) -> str:
        """String representation of the configuration."""
        roots = f"{len(self.roots)} directories" if self.roots else "host roots"
        parts = [f"Roots: {roots}"]
        parts.append(f"Producers: {self.concurrency.producer_count}")
        parts.append(f"File queue: {self.concurrency.file_queue_capacity}")
        parts.append(f"Skip paths: {len(self.skip.skip_paths)}")
        parts.append(f"Skip hidden: {self.skip.skip_hidden}")

        return " | ".join(parts)


def validate_config_dict(config_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate a configuration dictionary using Pydantic.

    Args:
        config_data: Dictionary containing configuration data

    Returns:
        Validated and normalized configuration dictionary

    Raises:
        ValueError: If configuration is invalid
    """
    known_keys = set(SearcherConfig.model_fields)
    unknown = sorted(key for key in config_data if key not in known_keys)
    if unknown:
        raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")

    try:
        return SearcherConfig.model_validate(config_data).to_dict()
    except ValidationError as e:
        messages = []
        for error in e.errors():
            location = ".".join(str(part) for part in error['loc'])
            messages.append(f"{location}: {error['msg']}")
        raise ValueError("; ".join(messages)) from e
