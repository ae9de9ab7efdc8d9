"""Assertion helpers for docsite responses.

Each assertion produces a clear error message on failure.
"""

from docsite.http.cookies import parse_cookies
from docsite.http.response import Response


def set_cookies(response: Response) -> dict[str, str]:
    """``name -> raw Set-Cookie value`` for every cookie the response sets."""
    found: dict[str, str] = {}
    for name, value in response.headers:
        if name.lower() == "set-cookie":
            cookie_name = value.split("=", 1)[0].strip()
            found[cookie_name] = value
    return found


def assert_redirect(response: Response, location: str, *, status: int = 302) -> None:
    """Assert a redirect with the given status and ``Location``."""
    assert response.status == status, (
        f"Expected status {status}, got {response.status}.\n"
        f"Response body: {response.text[:500]}"
    )
    actual = response.header("location")
    assert actual == location, f"Expected Location {location!r}, got {actual!r}"


def assert_cookie(response: Response, name: str, value: str | None = None) -> str:
    """Assert the response sets cookie *name* (optionally to *value*).

    Returns the full ``Set-Cookie`` header value for attribute checks.
    """
    cookies = set_cookies(response)
    assert name in cookies, f"No Set-Cookie for {name!r}; got {sorted(cookies)}"
    header = cookies[name]
    if value is not None:
        first_pair = header.split(";", 1)[0]
        actual = parse_cookies(first_pair).get(name)
        assert actual == value, f"Cookie {name!r} is {actual!r}, expected {value!r}"
    return header


def assert_no_cookie(response: Response, name: str) -> None:
    cookies = set_cookies(response)
    assert name not in cookies, f"Unexpected Set-Cookie for {name!r}: {cookies[name]}"
