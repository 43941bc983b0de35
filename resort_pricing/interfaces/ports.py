"""
Ports consommés par le moteur de pricing.

Le moteur ne connaît que ces deux interfaces étroites ; les implémentations
Supabase sont dans `data_access.py`, les tests utilisent des mocks.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional, Protocol

from ..config import DynamicPricingConfig, WeekendPricingConfig
from ..models import SeasonalPricingRule


class RuleStore(Protocol):
    """Stockage des règles saisonnières et des configurations de pricing."""

    def list_active_seasonal_rules(self) -> List[SeasonalPricingRule]:
        """Règles actives, triées par priorité décroissante."""
        ...

    def get_dynamic_pricing_config(self) -> Optional[DynamicPricingConfig]:
        """None si la configuration n'a jamais été enregistrée."""
        ...

    def get_weekend_pricing_config(self) -> Optional[WeekendPricingConfig]:
        """None si la majoration week-end n'est pas configurée."""
        ...


class OccupancySource(Protocol):
    """Taux d'occupation courant d'un type d'unité pour une date."""

    def get_occupancy_percentage(self, item_type: str, day: date) -> Optional[float]:
        """Pourcentage (0-100), ou None si l'occupation n'est pas disponible."""
        ...
