"""
Shared utilities for RESPLICE.

Common functionality used across contexts:
- Logger setup with provenance
- Text matching and rounding helpers
- Report tables for the command line
- Timestamps for session directories
"""

from resplice.utils.timestamp import now

__all__ = ["now"]
