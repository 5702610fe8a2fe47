from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

# GTFS Sweden 3 operator abbreviations with realtime feeds, as used in feed URLs.
GTFS_OPERATOR_NAMES: Mapping[str, str] = MappingProxyType(
    {
        "sl": "SL (Stockholm)",
        "ul": "UL (Uppsala)",
        "otraf": "Östgötatrafiken",
        "jlt": "JLT (Jönköping)",
        "krono": "Kronoberg",
        "klt": "KLT (Kalmar)",
        "gotland": "Gotland",
        "blekinge": "Blekingetrafiken",
        "skane": "Skånetrafiken",
        "halland": "Hallandstrafiken",
        "varm": "Värmlandstrafik",
        "orebro": "Örebro",
        "vastmanland": "Västmanland",
        "dt": "Dalatrafik",
        "xt": "X-trafik (Gävleborg)",
        "dintur": "Din Tur (Västernorrland)",
    }
)


def operator_name(operator: str) -> str:
    return GTFS_OPERATOR_NAMES.get(operator, operator)
