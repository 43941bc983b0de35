"""
Gestionnaire de fuseau horaire du resort.

Toutes les décompositions de dates du moteur (jour `MM-DD`, jour de la
semaine, jours avant l'arrivée) se font dans le fuseau du resort, jamais
dans celui du serveur.

Convention :
- datetime avec tzinfo : convertie vers le fuseau du resort,
- datetime naive ou `date` : considérée comme déjà locale au resort.
"""

import logging
from datetime import date, datetime, time
from typing import Optional, Union

import pytz
from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime, str]


class TimezoneHandler:
    """
    Conversions vers le fuseau horaire du resort.

    Args:
        timezone: Timezone IANA du resort (ex: 'Asia/Beirut')
    """

    def __init__(self, timezone: str = "UTC"):
        try:
            self.tz = pytz.timezone(timezone)
        except pytz.UnknownTimeZoneError:
            logger.error(f"Invalid timezone: {timezone}")
            raise ValueError(f"Invalid timezone: {timezone}")

        self.timezone = timezone
        logger.debug(f"Initialized TimezoneHandler ({timezone})")

    def now(self) -> datetime:
        """Datetime courante dans le fuseau du resort (timezone-aware)."""
        return datetime.now(self.tz)

    def parse(self, value: str) -> datetime:
        """
        Parse une date ou datetime ISO 8601.

        Supporte :
        - '2024-07-15'
        - '2024-07-15T14:00:00'
        - '2024-07-15T14:00:00Z' / '2024-07-15T14:00:00+03:00'
        """
        value = str(value).strip()
        try:
            return date_parser.isoparse(value)
        except ValueError:
            raise ValueError(f"Could not parse date string: {value}")

    def to_local(self, value: DateLike) -> datetime:
        """
        Convertit une date/datetime en datetime locale au resort (timezone-aware).

        Une `date` seule correspond à minuit heure locale.
        """
        if isinstance(value, str):
            value = self.parse(value)

        if not isinstance(value, datetime):
            value = datetime.combine(value, time.min)

        if value.tzinfo is None:
            return self.tz.localize(value)

        return value.astimezone(self.tz)

    def local_date(self, value: DateLike) -> date:
        """Date calendaire locale au resort."""
        if isinstance(value, date) and not isinstance(value, datetime):
            return value
        return self.to_local(value).date()

    def days_until(self, value: DateLike, now: Optional[datetime] = None) -> float:
        """Nombre de jours (fractionnaire) entre `now` et `value`."""
        now = now or self.now()
        if now.tzinfo is None:
            now = self.tz.localize(now)
        delta = self.to_local(value) - now
        return delta.total_seconds() / 86400
