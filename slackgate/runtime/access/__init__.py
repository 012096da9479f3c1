"""Directory snapshot and access policy."""

from .directory import DirectorySnapshot, sync_directory
from .policy import check_authorized, is_approved, matches_allow_list, matches_team_title

__all__ = [
    "DirectorySnapshot",
    "check_authorized",
    "is_approved",
    "matches_allow_list",
    "matches_team_title",
    "sync_directory",
]
