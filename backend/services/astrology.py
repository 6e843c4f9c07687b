"""Approximate planetary longitudes from mean orbital motion.

Positions are mean longitudes relative to J2000.0, good enough to label a
sign for prompting. Birth coordinates are accepted for interface parity but
the mean-motion model does not use them.
"""

from dataclasses import dataclass
from datetime import date, time

J2000 = 2451545.0

ZODIAC_SIGNS = [
    "Aries", "Taurus", "Gemini", "Cancer", "Leo", "Virgo",
    "Libra", "Scorpio", "Sagittarius", "Capricorn", "Aquarius", "Pisces",
]

# (mean longitude at J2000 in degrees, mean daily motion in degrees)
MEAN_ELEMENTS: dict[str, tuple[float, float]] = {
    "Sun": (280.47, 0.9856),
    "Moon": (218.32, 13.1764),
    "Mercury": (252.25, 4.0923),
    "Venus": (181.98, 1.6021),
    "Mars": (355.43, 0.5240),
    "Jupiter": (34.35, 0.0831),
    "Saturn": (50.08, 0.0335),
    "Uranus": (314.05, 0.0117),
    "Neptune": (304.35, 0.0060),
    "Pluto": (238.93, 0.0040),
    "North Node": (125.04, -0.0529),  # retrograde
}


@dataclass(frozen=True)
class PlanetPosition:
    name: str
    longitude: float

    @property
    def sign(self) -> str:
        return zodiac_sign(self.longitude)


def julian_day(year: int, month: int, day: int, hour: int = 12, minute: int = 0) -> float:
    """Julian day for a Gregorian calendar date and clock time."""
    a = (14 - month) // 12
    y = year + 4800 - a
    m = month + 12 * a - 3
    jdn = day + (153 * m + 2) // 5 + 365 * y + y // 4 - y // 100 + y // 400 - 32045
    return jdn + (hour - 12) / 24 + minute / 1440


def zodiac_sign(longitude: float) -> str:
    return ZODIAC_SIGNS[int((longitude % 360) // 30)]


def _mean_longitude(name: str, jd: float) -> float:
    base, motion = MEAN_ELEMENTS[name]
    return (base + motion * (jd - J2000)) % 360


def planetary_positions(
    birth_date: date,
    birth_time: time | None = None,
    latitude: float | None = None,
    longitude: float | None = None,
) -> list[PlanetPosition]:
    """Mean longitudes for every body in MEAN_ELEMENTS, in that order.

    Noon is assumed when the birth time is unknown.
    """
    hour, minute = (birth_time.hour, birth_time.minute) if birth_time else (12, 0)
    jd = julian_day(birth_date.year, birth_date.month, birth_date.day, hour, minute)
    return [PlanetPosition(name, _mean_longitude(name, jd)) for name in MEAN_ELEMENTS]


def node_signs(birth_date: date, birth_time: time | None = None) -> tuple[str, str]:
    """Return (north node sign, south node sign). The south node sits opposite."""
    north = next(p for p in planetary_positions(birth_date, birth_time) if p.name == "North Node")
    return north.sign, zodiac_sign(north.longitude + 180)
