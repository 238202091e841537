"""
expecttree exception classes.

This package provides all exception types used throughout expecttree for
consistent error handling and reporting.
"""

from expecttree.exceptions.core import (
    BuildError,
    CallSite,
    DiscoveryError,
    ExpectTreeError,
    capture_call_sites,
)

__all__ = [
    "ExpectTreeError",
    "BuildError",
    "DiscoveryError",
    "CallSite",
    "capture_call_sites",
]
