"""
Configuration centrale pour le moteur de pricing saisonnier du resort.

Ce module définit :
- les paramètres d'environnement (Supabase, fuseau horaire du resort, logs),
- la configuration du pricing dynamique (occupation, early bird, last minute),
- la configuration de la majoration week-end.

Les configurations de pricing sont stockées dans la table `system_settings`
(une ligne par clé). Lorsqu'une ligne est absente, on utilise les valeurs
par défaut définies ici.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

from dotenv import load_dotenv

# Charger .env depuis la racine du projet
project_root = Path(__file__).parent.parent
load_dotenv(dotenv_path=project_root / ".env")


# Clés de la table `system_settings`
DYNAMIC_PRICING_KEY = "dynamic_pricing"
WEEKEND_PRICING_KEY = "weekend_pricing"

# Types d'unités pouvant être concernées par une règle
ITEM_TYPES = ("chalets", "pool", "restaurant")

DEFAULT_WEEKEND_MULTIPLIER = 1.2


@dataclass
class Settings:
    """Configuration globale du moteur."""

    # Base de données
    supabase_url: str
    supabase_key: str

    # Fuseau horaire du resort : toutes les dates y sont décomposées
    resort_timezone: str = "Asia/Beirut"

    # Nombre de workers pour le calendrier (1 = séquentiel)
    calendar_max_workers: int = 1

    # Logging
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Crée une instance Settings depuis les variables d'environnement."""
        return cls(
            supabase_url=os.getenv("SUPABASE_URL", ""),
            supabase_key=os.getenv("SUPABASE_SERVICE_ROLE_KEY", os.getenv("SUPABASE_KEY", "")),
            resort_timezone=os.getenv("RESORT_TIMEZONE", "Asia/Beirut"),
            calendar_max_workers=int(os.getenv("CALENDAR_MAX_WORKERS", "1")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )


@dataclass
class DynamicPricingConfig:
    """
    Paramètres du pricing dynamique (uniquement appliqué aux chalets).

    Les seuils d'occupation sont des pourcentages (0-100), les remises et
    primes sont des fractions (ex: 0.1 = 10 %).
    """

    enabled: bool = False

    # Interpolation linéaire entre ces deux seuils d'occupation
    min_occupancy_threshold: float = 30.0
    max_occupancy_threshold: float = 80.0
    min_price_multiplier: float = 0.85
    max_price_multiplier: float = 1.25

    # Early bird : réservation au moins N jours avant l'arrivée
    advance_booking_days: int = 30
    early_bird_discount: float = 0.1

    # Last minute : réservation au plus N jours avant l'arrivée (inclus)
    last_minute_days: int = 3
    last_minute_premium: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DynamicPricingConfig":
        """
        Construit la config depuis la valeur JSON stockée (clés camelCase).

        Les clés absentes prennent la valeur par défaut.
        """
        defaults = cls()
        return cls(
            enabled=bool(data.get("enabled", defaults.enabled)),
            min_occupancy_threshold=float(data.get("minOccupancyThreshold", defaults.min_occupancy_threshold)),
            max_occupancy_threshold=float(data.get("maxOccupancyThreshold", defaults.max_occupancy_threshold)),
            min_price_multiplier=float(data.get("minPriceMultiplier", defaults.min_price_multiplier)),
            max_price_multiplier=float(data.get("maxPriceMultiplier", defaults.max_price_multiplier)),
            advance_booking_days=int(data.get("advanceBookingDays", defaults.advance_booking_days)),
            early_bird_discount=float(data.get("earlyBirdDiscount", defaults.early_bird_discount)),
            last_minute_days=int(data.get("lastMinuteDays", defaults.last_minute_days)),
            last_minute_premium=float(data.get("lastMinutePremium", defaults.last_minute_premium)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "enabled": self.enabled,
            "minOccupancyThreshold": self.min_occupancy_threshold,
            "maxOccupancyThreshold": self.max_occupancy_threshold,
            "minPriceMultiplier": self.min_price_multiplier,
            "maxPriceMultiplier": self.max_price_multiplier,
            "advanceBookingDays": self.advance_booking_days,
            "earlyBirdDiscount": self.early_bird_discount,
            "lastMinuteDays": self.last_minute_days,
            "lastMinutePremium": self.last_minute_premium,
        }


@dataclass
class WeekendPricingConfig:
    """Majoration appliquée aux arrivées du vendredi, samedi et dimanche."""

    enabled: bool = False
    multiplier: float = DEFAULT_WEEKEND_MULTIPLIER

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WeekendPricingConfig":
        # Un multiplicateur absent (ou 0) retombe sur la valeur par défaut
        multiplier = data.get("multiplier") or DEFAULT_WEEKEND_MULTIPLIER
        return cls(enabled=bool(data.get("enabled", False)), multiplier=float(multiplier))


def get_default_dynamic_pricing_config() -> DynamicPricingConfig:
    """
    Retourne la configuration dynamique par défaut (désactivée).

    Utilisée lorsque la clé `dynamic_pricing` n'existe pas dans `system_settings`.
    """
    return DynamicPricingConfig()
