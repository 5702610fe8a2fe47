from .site_directory import ISiteDirectory
from .vehicle_position_source import IVehiclePositionSource

__all__ = [
    "ISiteDirectory",
    "IVehiclePositionSource",
]
