"""Accept-Language negotiation.

Ranks the languages a site can serve against the client's
``Accept-Language`` header. Matching is case-insensitive and works in
both directions between a tag and its primary subtag: ``en-US`` in the
header accepts an available ``en``, and ``en`` accepts ``en-US``.
Ties on quality prefer the more specific match, then header order,
then the order of the available list.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass

_LANGUAGE_RANGE = re.compile(r"^\s*([^\s\-;]+)(?:-([^\s;]+))?\s*(?:;(.*))?$")


@dataclass(frozen=True, slots=True)
class LanguageRange:
    """One entry of an Accept-Language header."""

    prefix: str
    full: str
    quality: float
    index: int


@dataclass(frozen=True, slots=True)
class _Priority:
    quality: float
    specificity: int
    order: int
    index: int


def parse_accept_language(header: str) -> list[LanguageRange]:
    """Parse an Accept-Language value into ranges, dropping malformed entries."""
    ranges: list[LanguageRange] = []
    for i, part in enumerate(header.split(",")):
        match = _LANGUAGE_RANGE.match(part)
        if match is None:
            continue
        prefix, suffix, params = match.groups()
        full = f"{prefix}-{suffix}" if suffix else prefix
        quality = 1.0
        if params:
            for param in params.split(";"):
                name, _, value = param.strip().partition("=")
                if name == "q":
                    try:
                        quality = float(value)
                    except ValueError:
                        quality = 0.0
                    break
        ranges.append(LanguageRange(prefix=prefix, full=full, quality=quality, index=i))
    return ranges


def _specify(language: str, entry: LanguageRange, index: int) -> _Priority | None:
    prefix, _, _ = language.partition("-")
    full = language.lower()
    specificity = 0
    if entry.full.lower() == full:
        specificity |= 4
    elif entry.prefix.lower() == full:
        specificity |= 2
    elif entry.full.lower() == prefix.lower():
        specificity |= 1
    elif entry.full != "*":
        return None
    return _Priority(quality=entry.quality, specificity=specificity, order=entry.index, index=index)


def _priority(language: str, accepted: list[LanguageRange], index: int) -> _Priority:
    best = _Priority(quality=0.0, specificity=0, order=-1, index=index)
    for entry in accepted:
        candidate = _specify(language, entry, index)
        if candidate is None:
            continue
        if (
            best.specificity - candidate.specificity
            or best.quality - candidate.quality
            or best.order - candidate.order
        ) < 0:
            best = candidate
    return best


def preferred_languages(header: str | None, available: Sequence[str]) -> list[str]:
    """Return *available* filtered to acceptable entries, best first.

    A missing header accepts everything (``*``); an empty header accepts
    nothing.
    """
    accepted = parse_accept_language("*" if header is None else header)
    ranked = [
        (language, _priority(language, accepted, i)) for i, language in enumerate(available)
    ]
    acceptable = [item for item in ranked if item[1].quality > 0]
    acceptable.sort(
        key=lambda item: (-item[1].quality, -item[1].specificity, item[1].order, item[1].index)
    )
    return [language for language, _ in acceptable]


def negotiate_language(header: str | None, available: Sequence[str]) -> str | None:
    """Return the single best language from *available*, or ``None``."""
    preferred = preferred_languages(header, available)
    return preferred[0] if preferred else None
