"""
Sous-package `interfaces` du moteur de pricing.

Responsabilités :
- définir les ports consommés par le moteur (`RuleStore`, `OccupancySource`),
- centraliser les appels à Supabase/PostgreSQL,
- faciliter le test (le moteur reçoit ses dépendances, on les mocke).
"""

from .data_access import (
    PricingDataAccessError,
    SupabaseOccupancySource,
    SupabaseRuleStore,
    get_supabase_client,
)
from .ports import OccupancySource, RuleStore

__all__ = [
    "OccupancySource",
    "PricingDataAccessError",
    "RuleStore",
    "SupabaseOccupancySource",
    "SupabaseRuleStore",
    "get_supabase_client",
]
