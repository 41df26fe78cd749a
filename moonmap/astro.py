from datetime import datetime
from datetime import timezone

from pymeeus.Epoch import Epoch

# New moon used as the zero point of the lunation count
LUNAR_EPOCH_UTC = datetime(2000, 1, 6, 18, 14, 0, tzinfo=timezone.utc)
SYNODIC_MONTH_DAYS = 29.53058770576
HALF_SYNODIC_MONTH_DAYS = SYNODIC_MONTH_DAYS / 2

def days_since_lunar_epoch(dt: datetime) -> float:
    """
    Days elapsed between the lunar epoch and `dt`.

    Raises
    ------
    ValueError
        If `dt` has no timezone information
    """
    if dt.tzinfo is None:
        raise ValueError("Time without timezone information.")
    dt_utc = dt.astimezone(timezone.utc)
    return Epoch(dt_utc, utc=True) - Epoch(LUNAR_EPOCH_UTC, utc=True)

def calculate_phase(dt: datetime) -> float:
    """
    Calculate the Moon phase for a given time.

    This is a linear approximation: the age of the Moon within a mean synodic
    month is mapped linearly to the phase value. The varying speed of the Moon
    on its elliptical orbit is not modelled, so the result can be off by
    several hours of lunation age.

    Parameters
    ----------
    dt : datetime
        Time with timezone information

    Returns
    -------
    float
        Phase in [-1, 1): -1 at new moon, 0 at full moon, approaching 1 just
        before the next new moon
    """
    age_days = days_since_lunar_epoch(dt) % SYNODIC_MONTH_DAYS
    return (age_days - HALF_SYNODIC_MONTH_DAYS) / HALF_SYNODIC_MONTH_DAYS

def phase_to_percent(phase: float) -> str:
    return f"{phase * 100:+.1f}%"
