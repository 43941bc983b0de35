"""
Moteur de pricing saisonnier et dynamique du resort.

Ce package contient :
- la configuration du moteur (environnement, pricing dynamique, week-end),
- le modèle de données (règles saisonnières, résultat de calcul),
- le moteur de calcul de prix et le calendrier tarifaire,
- les interfaces vers la base de données (règles, occupation),
- les analyses de l'historique des prix.
"""

from .config import DynamicPricingConfig, Settings, WeekendPricingConfig
from .models import PriceCalculationResult, SeasonalPricingRule
from .seasonal_pricing import SeasonalPricingEngine, is_date_in_range

__all__ = [
    "DynamicPricingConfig",
    "PriceCalculationResult",
    "SeasonalPricingEngine",
    "SeasonalPricingRule",
    "Settings",
    "WeekendPricingConfig",
    "is_date_in_range",
]
