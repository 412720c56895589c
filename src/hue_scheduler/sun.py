"""
Sunrise and sunset as minute-of-day variables.

Solar times are computed with astral for the configured home location and
converted to the home timezone.
"""

import logging
from datetime import date, datetime, tzinfo
from typing import Optional

from astral import LocationInfo
from astral.sun import sun

logger = logging.getLogger(__name__)


def minute_of_day(moment: datetime) -> int:
    """Minutes since local midnight."""
    return moment.hour * 60 + moment.minute


def sunrise_sunset(
    latitude: float,
    longitude: float,
    day: date,
    tz: tzinfo,
) -> Optional[tuple[int, int]]:
    """
    Compute sunrise and sunset for a day.

    Args:
        latitude: Home latitude in degrees
        longitude: Home longitude in degrees
        day: Local date
        tz: Home timezone

    Returns:
        (sunrise, sunset) as minutes of day, or None if the sun does not
        rise or set that day (polar day/night)
    """
    location = LocationInfo(latitude=latitude, longitude=longitude)

    try:
        solar_events = sun(location.observer, date=day, tzinfo=tz)
    except ValueError as e:
        logger.warning(f"No sunrise/sunset on {day} at ({latitude}, {longitude}): {e}")
        return None

    return minute_of_day(solar_events["sunrise"]), minute_of_day(solar_events["sunset"])
