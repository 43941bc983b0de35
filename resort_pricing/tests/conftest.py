"""
Fixtures partagées pour les tests.
"""

import sys
from datetime import datetime
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import pytz

# Ajouter la racine du projet au path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from resort_pricing.config import DynamicPricingConfig, Settings
from resort_pricing.seasonal_pricing import SeasonalPricingEngine

RESORT_TZ = pytz.timezone("Asia/Beirut")


@pytest.fixture
def settings():
    """Settings de test (pas de vraie base)."""
    return Settings(
        supabase_url="https://mock.supabase.co",
        supabase_key="mock_key",
        resort_timezone="Asia/Beirut",
    )


@pytest.fixture
def fixed_now():
    """Heure courante figée : 1er janvier 2024, midi heure du resort."""
    return RESORT_TZ.localize(datetime(2024, 1, 1, 12, 0, 0))


@pytest.fixture
def rule_store():
    """Mock du store de règles : aucune règle, aucune configuration."""
    store = MagicMock()
    store.list_active_seasonal_rules.return_value = []
    store.get_dynamic_pricing_config.return_value = None
    store.get_weekend_pricing_config.return_value = None
    return store


@pytest.fixture
def occupancy_source():
    """Mock de la source d'occupation : occupation indisponible."""
    source = MagicMock()
    source.get_occupancy_percentage.return_value = None
    return source


@pytest.fixture
def engine(rule_store, occupancy_source, settings, fixed_now):
    """Moteur avec dépendances mockées et horloge figée."""
    return SeasonalPricingEngine(
        rule_store=rule_store,
        occupancy_source=occupancy_source,
        settings=settings,
        clock=lambda: fixed_now,
    )


@pytest.fixture
def dynamic_config():
    """Configuration dynamique activée (valeurs par défaut du resort)."""
    return DynamicPricingConfig(
        enabled=True,
        min_occupancy_threshold=30,
        max_occupancy_threshold=80,
        min_price_multiplier=0.85,
        max_price_multiplier=1.25,
        advance_booking_days=30,
        early_bird_discount=0.1,
        last_minute_days=3,
        last_minute_premium=0.15,
    )


@pytest.fixture
def mock_supabase_client():
    """Mock du client Supabase."""
    return MagicMock()
