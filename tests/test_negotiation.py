"""Tests for Accept-Language parsing and negotiation."""

from docsite.http.accept import negotiate_language, parse_accept_language, preferred_languages

AVAILABLE = ("en", "fr", "zh-Hans", "pt-BR")


class TestParseAcceptLanguage:
    def test_qualities_and_subtags(self) -> None:
        ranges = parse_accept_language("fr-CA, fr;q=0.8, en;q=0.5")
        assert [(r.prefix, r.full, r.quality) for r in ranges] == [
            ("fr", "fr-CA", 1.0),
            ("fr", "fr", 0.8),
            ("en", "en", 0.5),
        ]

    def test_malformed_quality_is_zero(self) -> None:
        (entry,) = parse_accept_language("de;q=abc")
        assert entry.quality == 0.0


class TestNegotiateLanguage:
    def test_missing_header_takes_first_available(self) -> None:
        assert negotiate_language(None, AVAILABLE) == "en"

    def test_empty_header_accepts_nothing(self) -> None:
        assert negotiate_language("", AVAILABLE) is None

    def test_exact_match(self) -> None:
        assert negotiate_language("fr", AVAILABLE) == "fr"

    def test_region_falls_back_to_primary(self) -> None:
        assert negotiate_language("fr-CA", AVAILABLE) == "fr"

    def test_primary_accepts_regional_variant(self) -> None:
        assert negotiate_language("pt", AVAILABLE) == "pt-BR"

    def test_case_insensitive(self) -> None:
        assert negotiate_language("ZH-hans", AVAILABLE) == "zh-Hans"

    def test_quality_ordering(self) -> None:
        assert negotiate_language("en;q=0.4, fr;q=0.9", AVAILABLE) == "fr"

    def test_zero_quality_excludes(self) -> None:
        assert negotiate_language("fr;q=0, de", AVAILABLE) is None

    def test_no_overlap(self) -> None:
        assert negotiate_language("de, ja", AVAILABLE) is None

    def test_wildcard(self) -> None:
        assert negotiate_language("de, *;q=0.1", AVAILABLE) == "en"


class TestPreferredLanguages:
    def test_ranked_best_first(self) -> None:
        assert preferred_languages("fr, en;q=0.5", AVAILABLE) == ["fr", "en"]

    def test_ties_keep_header_order(self) -> None:
        assert preferred_languages("zh-Hans, en", AVAILABLE) == ["zh-Hans", "en"]
