"""
Test fixtures package.

Provides multipart body builders and URL helpers for testing.
"""

from .multipart_helpers import (
    TEST_BOUNDARY,
    build_multipart,
    chunked,
    multipart_content_type,
    url_path_and_query,
)

__all__ = [
    "TEST_BOUNDARY",
    "build_multipart",
    "chunked",
    "multipart_content_type",
    "url_path_and_query",
]
