"""Test utilities for docsite applications.

    from docsite.testing import TestClient, assert_redirect
"""

from docsite.testing.assertions import (
    assert_cookie,
    assert_no_cookie,
    assert_redirect,
    set_cookies,
)
from docsite.testing.client import TestClient

__all__ = [
    "TestClient",
    "assert_cookie",
    "assert_no_cookie",
    "assert_redirect",
    "set_cookies",
]
