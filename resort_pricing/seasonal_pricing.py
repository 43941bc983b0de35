"""
Moteur de calcul de prix saisonnier et dynamique du resort.

Ce module est responsable de :
- trouver les règles saisonnières qui s'appliquent à un item et une date,
- appliquer la majoration week-end,
- appliquer le pricing dynamique des chalets (early bird, last minute,
  interpolation selon l'occupation),
- assembler le prix final, le détail des ajustements et les règles appliquées,
- générer un calendrier tarifaire jour par jour.

Ordre de calcul :
1. Règles saisonnières : prix_base * (multiplicateur - 1), cumulées
2. Week-end (vendredi, samedi, dimanche) : prix_base * (multiplicateur - 1)
3. Dynamique (chalets) : early bird OU last minute, puis occupation
4. Prix final = max(0, prix_base + somme des ajustements), arrondi à 2 décimales

Toutes les règles qui matchent s'additionnent : la priorité ne sert qu'à
l'ordre d'évaluation et d'affichage.
"""

from __future__ import annotations

import logging
import math
import re
from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime, timedelta
from typing import Callable, Dict, List, Optional

from .config import (
    DynamicPricingConfig,
    Settings,
    get_default_dynamic_pricing_config,
)
from .interfaces.ports import OccupancySource, RuleStore
from .models import (
    RULE_TYPE_DYNAMIC,
    RULE_TYPE_EARLY_BIRD,
    RULE_TYPE_LAST_MINUTE,
    RULE_TYPE_SEASONAL,
    RULE_TYPE_WEEKEND,
    AppliedRule,
    PriceBreakdown,
    PriceCalculationResult,
)
from .utils.timezone_handler import DateLike, TimezoneHandler

logger = logging.getLogger(__name__)

# datetime.weekday() : lundi = 0 ... dimanche = 6
WEEKEND_DAYS = (4, 5, 6)

_MM_DD_PATTERN = re.compile(r"^(\d{1,2})-(\d{1,2})$")


def _round_half_up(value: float, places: int = 2) -> float:
    """
    Arrondi demi vers +infini sur la valeur binaire : `floor(x * 10^n + 0.5) / 10^n`.

    Ex: 1.005 -> 1.0 (1.005 * 100 vaut 100.4999...), -0.125 -> -0.12.
    """
    factor = 10 ** places
    return math.floor(value * factor + 0.5) / factor


def round_price(value: float) -> float:
    """Arrondi monétaire à 2 décimales."""
    return _round_half_up(value, 2)


def _mm_dd_value(value: str) -> Optional[int]:
    """Encode `MM-DD` en entier `mois * 100 + jour`, None si le format est invalide."""
    match = _MM_DD_PATTERN.match(str(value or "").strip())
    if not match:
        return None
    return int(match.group(1)) * 100 + int(match.group(2))


def is_date_in_range(date_str: str, start: str, end: str) -> bool:
    """
    Vérifie si une date `MM-DD` est dans une plage `MM-DD` (bornes incluses).

    Si start > end, la plage chevauche le nouvel an (ex: 12-15 -> 01-05).
    Une chaîne mal formée ne matche jamais (pas d'exception) : la validation
    se fait à l'écriture des règles.
    """
    date_value = _mm_dd_value(date_str)
    start_value = _mm_dd_value(start)
    end_value = _mm_dd_value(end)

    if date_value is None or start_value is None or end_value is None:
        logger.debug(f"Malformed date range ignored: {date_str!r} in [{start!r}, {end!r}]")
        return False

    if start_value <= end_value:
        return start_value <= date_value <= end_value

    return date_value >= start_value or date_value <= end_value


def compute_occupancy_multiplier(occupancy: float, config: DynamicPricingConfig) -> float:
    """
    Multiplicateur de prix en fonction du taux d'occupation.

    - occupation >= seuil max : multiplicateur max,
    - occupation <= seuil min : multiplicateur min,
    - entre les deux : interpolation linéaire.
    """
    if occupancy >= config.max_occupancy_threshold:
        return config.max_price_multiplier
    if occupancy <= config.min_occupancy_threshold:
        return config.min_price_multiplier

    span = config.max_occupancy_threshold - config.min_occupancy_threshold
    position = (occupancy - config.min_occupancy_threshold) / span
    return config.min_price_multiplier + position * (
        config.max_price_multiplier - config.min_price_multiplier
    )


class SeasonalPricingEngine:
    """
    Calcule le prix d'un item (chalet, piscine, restaurant) pour une date.

    Le moteur est sans état : règles, configurations et occupation sont
    relues à chaque appel.

    Usage:
        engine = SeasonalPricingEngine(
            rule_store=SupabaseRuleStore(client),
            occupancy_source=SupabaseOccupancySource(client),
            settings=Settings.from_env(),
        )
        result = engine.calculate_price("chalets", "chalet-1", 200.0, "2024-07-12")
        print(result.final_price)
    """

    def __init__(
        self,
        rule_store: RuleStore,
        occupancy_source: OccupancySource,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Args:
            rule_store: Règles saisonnières et configurations
            occupancy_source: Taux d'occupation par type d'unité
            settings: Configuration (si None, charge depuis env)
            clock: Heure courante (timezone-aware), pour le early bird / last minute
        """
        self.rule_store = rule_store
        self.occupancy_source = occupancy_source
        self.settings = settings or Settings.from_env()
        self.timezone_handler = TimezoneHandler(self.settings.resort_timezone)
        self.clock = clock or self.timezone_handler.now

    def calculate_price(
        self,
        item_type: str,
        item_id: str,
        base_price: float,
        check_in_date: DateLike,
        check_out_date: Optional[DateLike] = None,
    ) -> PriceCalculationResult:
        """
        Calcule le prix final d'un item pour une date d'arrivée.

        `check_out_date` est accepté mais pas encore utilisé (tarification
        multi-nuits à venir).

        Les erreurs d'accès aux données sont propagées telles quelles.
        """
        check_in = self.timezone_handler.to_local(check_in_date)
        local_day = check_in.date()
        date_string = local_day.strftime("%m-%d")

        applied_rules: List[AppliedRule] = []
        seasonal_adjustment = 0.0
        dynamic_adjustment = 0.0
        weekend_adjustment = 0.0

        # 1. Règles saisonnières
        for rule in self.rule_store.list_active_seasonal_rules():
            if not rule.is_active:
                continue
            if not rule.applies_to_item(item_type, item_id):
                continue
            if not is_date_in_range(date_string, rule.start_date, rule.end_date):
                continue

            seasonal_adjustment += base_price * (rule.price_multiplier - 1)
            applied_rules.append(
                AppliedRule(name=rule.name, multiplier=rule.price_multiplier, type=RULE_TYPE_SEASONAL)
            )
            logger.debug(f"Seasonal rule '{rule.name}' applied to {item_type}/{item_id} on {date_string}")

        # 2. Week-end
        if local_day.weekday() in WEEKEND_DAYS:
            weekend_config = self.rule_store.get_weekend_pricing_config()
            if weekend_config is not None and weekend_config.enabled:
                weekend_adjustment = base_price * (weekend_config.multiplier - 1)
                applied_rules.append(
                    AppliedRule(
                        name="Weekend Pricing",
                        multiplier=weekend_config.multiplier,
                        type=RULE_TYPE_WEEKEND,
                    )
                )

        # 3. Pricing dynamique (chalets uniquement)
        dynamic_config = self.rule_store.get_dynamic_pricing_config() or get_default_dynamic_pricing_config()
        if dynamic_config.enabled and item_type == "chalets":
            dynamic_adjustment = self._apply_dynamic_pricing(
                dynamic_config, item_type, base_price, check_in, local_day, applied_rules
            )

        # 4. Total
        total_adjustments = seasonal_adjustment + dynamic_adjustment + weekend_adjustment
        final_price = round_price(max(0.0, base_price + total_adjustments))

        return PriceCalculationResult(
            base_price=base_price,
            final_price=final_price,
            applied_rules=applied_rules,
            breakdown=PriceBreakdown(
                base_price=base_price,
                seasonal_adjustment=round_price(seasonal_adjustment),
                dynamic_adjustment=round_price(dynamic_adjustment),
                weekend_adjustment=round_price(weekend_adjustment),
                total_adjustments=round_price(total_adjustments),
            ),
        )

    def _apply_dynamic_pricing(
        self,
        config: DynamicPricingConfig,
        item_type: str,
        base_price: float,
        check_in: datetime,
        local_day: date,
        applied_rules: List[AppliedRule],
    ) -> float:
        """Early bird / last minute puis ajustement selon l'occupation."""
        adjustment = 0.0
        days_until_booking = math.ceil(self.timezone_handler.days_until(check_in, now=self.clock()))

        if days_until_booking >= config.advance_booking_days:
            adjustment += base_price * -config.early_bird_discount
            applied_rules.append(
                AppliedRule(
                    name="Early Bird Discount",
                    multiplier=1 - config.early_bird_discount,
                    type=RULE_TYPE_EARLY_BIRD,
                )
            )
        elif days_until_booking <= config.last_minute_days:
            adjustment += base_price * config.last_minute_premium
            if config.last_minute_premium != 0:
                applied_rules.append(
                    AppliedRule(
                        name="Last Minute Rate",
                        multiplier=1 + config.last_minute_premium,
                        type=RULE_TYPE_LAST_MINUTE,
                    )
                )

        occupancy = self.occupancy_source.get_occupancy_percentage(item_type, local_day)
        if occupancy is None:
            logger.debug(f"No occupancy data for {item_type} on {local_day.isoformat()}")
            return adjustment

        multiplier = compute_occupancy_multiplier(occupancy, config)
        adjustment += base_price * (multiplier - 1)
        applied_rules.append(
            AppliedRule(
                name=f"Demand-based ({int(_round_half_up(occupancy, 0))}% occupancy)",
                multiplier=multiplier,
                type=RULE_TYPE_DYNAMIC,
            )
        )
        return adjustment

    def get_pricing_calendar(
        self,
        item_type: str,
        item_id: str,
        base_price: float,
        start_date: DateLike,
        end_date: DateLike,
        max_workers: Optional[int] = None,
    ) -> Dict[str, PriceCalculationResult]:
        """
        Prix jour par jour entre `start_date` et `end_date` (inclus).

        Retourne un dict `date ISO -> résultat`, trié par date croissante.
        Avec `max_workers` > 1, les jours sont calculés en parallèle (chaque
        calcul est indépendant), l'ordre du résultat est conservé.
        """
        current = self.timezone_handler.to_local(start_date)
        last_day = self.timezone_handler.local_date(end_date)

        check_ins: List[datetime] = []
        while current.date() <= last_day:
            check_ins.append(current)
            current = self.timezone_handler.to_local(current.replace(tzinfo=None) + timedelta(days=1))

        if max_workers is None:
            max_workers = self.settings.calendar_max_workers

        def _price_for(check_in: datetime) -> PriceCalculationResult:
            return self.calculate_price(item_type, item_id, base_price, check_in)

        if max_workers and max_workers > 1 and len(check_ins) > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                results = list(executor.map(_price_for, check_ins))
        else:
            results = [_price_for(check_in) for check_in in check_ins]

        logger.info(
            f"Pricing calendar generated for {item_type}/{item_id}: {len(results)} days"
        )
        return {
            check_in.date().isoformat(): result
            for check_in, result in zip(check_ins, results)
        }
