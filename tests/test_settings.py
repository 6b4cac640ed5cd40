"""Settings parsing tests."""

from decimal import Decimal

import pytest

from claimcalc.settings import Settings


class TestInnerLimitOverrides:
    def test_empty_by_default(self):
        assert Settings(inner_limits="").inner_limit_overrides == {}

    def test_json_object_parsed_to_decimals(self):
        s = Settings(inner_limits='{"Medical": 800, "Dental": "250.50"}')
        assert s.inner_limit_overrides == {
            "Medical": Decimal("800"),
            "Dental": Decimal("250.50"),
        }

    def test_non_object_rejected(self):
        with pytest.raises(ValueError):
            Settings(inner_limits="[800]").inner_limit_overrides


class TestAllowedOrigins:
    @pytest.mark.parametrize("raw,expected", [
        ("", []),
        ("https://a.example", ["https://a.example"]),
        ("https://a.example, https://b.example", ["https://a.example", "https://b.example"]),
        ('["https://a.example"]', ["https://a.example"]),
    ])
    def test_parsing(self, raw, expected):
        assert Settings(allowed_origins=raw).allowed_origins == expected


class TestDefaults:
    def test_recent_claims_limit(self):
        assert Settings().recent_claims_limit == 100

    def test_environment_flags(self):
        s = Settings(environment="production")
        assert s.is_production
        assert not s.is_development
