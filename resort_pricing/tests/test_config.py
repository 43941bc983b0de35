"""
Tests unitaires pour config.py et utils/timezone_handler.py
"""

from datetime import date, datetime

import pytest
import pytz

from resort_pricing.config import (
    DynamicPricingConfig,
    Settings,
    WeekendPricingConfig,
    get_default_dynamic_pricing_config,
)
from resort_pricing.utils.timezone_handler import TimezoneHandler


class TestSettings:
    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
        monkeypatch.delenv("SUPABASE_SERVICE_ROLE_KEY", raising=False)
        monkeypatch.setenv("SUPABASE_KEY", "anon-key")
        monkeypatch.setenv("RESORT_TIMEZONE", "Europe/Paris")
        monkeypatch.setenv("CALENDAR_MAX_WORKERS", "4")

        settings = Settings.from_env()

        assert settings.supabase_url == "https://example.supabase.co"
        assert settings.supabase_key == "anon-key"
        assert settings.resort_timezone == "Europe/Paris"
        assert settings.calendar_max_workers == 4


class TestDynamicPricingConfig:
    def test_defaults(self):
        config = get_default_dynamic_pricing_config()

        assert config.enabled is False
        assert config.min_occupancy_threshold == 30
        assert config.max_occupancy_threshold == 80
        assert config.min_price_multiplier == 0.85
        assert config.max_price_multiplier == 1.25
        assert config.advance_booking_days == 30
        assert config.early_bird_discount == 0.1
        assert config.last_minute_days == 3
        assert config.last_minute_premium == 0.0

    def test_partial_dict_keeps_defaults(self):
        config = DynamicPricingConfig.from_dict({"enabled": True, "lastMinutePremium": -0.05})

        assert config.enabled is True
        assert config.last_minute_premium == -0.05
        assert config.advance_booking_days == 30

    def test_dict_round_trip_keys(self):
        data = DynamicPricingConfig(enabled=True).to_dict()
        assert DynamicPricingConfig.from_dict(data) == DynamicPricingConfig(enabled=True)


class TestWeekendPricingConfig:
    def test_missing_multiplier(self):
        assert WeekendPricingConfig.from_dict({"enabled": True}).multiplier == 1.2

    def test_stored_multiplier(self):
        config = WeekendPricingConfig.from_dict({"enabled": True, "multiplier": 1.35})
        assert config == WeekendPricingConfig(enabled=True, multiplier=1.35)


class TestTimezoneHandler:
    """Tests pour TimezoneHandler."""

    @pytest.fixture
    def handler(self):
        return TimezoneHandler("Asia/Beirut")

    def test_invalid_timezone(self):
        with pytest.raises(ValueError):
            TimezoneHandler("Mars/Olympus")

    def test_naive_datetime_is_local(self, handler):
        local = handler.to_local(datetime(2024, 7, 12, 23, 30))

        assert local.hour == 23
        assert local.utcoffset().total_seconds() == 3 * 3600

    def test_aware_datetime_is_converted(self, handler):
        utc_value = pytz.utc.localize(datetime(2024, 1, 10, 23, 0))

        assert handler.local_date(utc_value) == date(2024, 1, 11)

    def test_date_is_kept(self, handler):
        assert handler.local_date(date(2024, 2, 29)) == date(2024, 2, 29)

    def test_parse_strings(self, handler):
        assert handler.local_date("2024-07-15") == date(2024, 7, 15)
        assert handler.local_date("2024-07-15T22:00:00Z") == date(2024, 7, 16)

        with pytest.raises(ValueError):
            handler.parse("next friday")

    def test_days_until(self, handler):
        now = handler.to_local(datetime(2024, 1, 1, 12, 0))

        assert handler.days_until(datetime(2024, 1, 3, 0, 0), now=now) == pytest.approx(1.5)
