"""``Cookie`` request parsing and ``Set-Cookie`` serialization."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from email.utils import format_datetime
from urllib.parse import quote, unquote


def parse_cookies(header: str) -> dict[str, str]:
    """Name to percent-decoded value; pairs without ``=`` are skipped."""
    cookies: dict[str, str] = {}
    for name, sep, value in (pair.strip().partition("=") for pair in header.split(";")):
        if not sep:
            continue
        value = value.strip()
        if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
            value = value[1:-1]
        cookies[name.strip()] = unquote(value)
    return cookies


@dataclass(frozen=True, slots=True)
class SetCookie:
    """One ``Set-Cookie`` directive, scoped to the whole site.

    A ``max_age`` is mirrored into ``Expires`` for clients that only
    understand the older attribute.
    """

    name: str
    value: str
    max_age: int | None = None
    httponly: bool = True
    samesite: str | None = "lax"

    def to_header_value(self, *, now: datetime | None = None) -> str:
        attributes = [f"{self.name}={quote(self.value, safe='')}"]
        if self.max_age is not None:
            expires = (now or datetime.now(UTC)) + timedelta(seconds=self.max_age)
            attributes += [
                f"Max-Age={self.max_age}",
                f"Expires={format_datetime(expires, usegmt=True)}",
            ]
        attributes.append("Path=/")
        if self.httponly:
            attributes.append("HttpOnly")
        if self.samesite:
            attributes.append(f"SameSite={self.samesite}")
        return "; ".join(attributes)
