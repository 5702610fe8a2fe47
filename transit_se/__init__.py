"""Swedish public transit SDK: SL, GTFS Sweden 3, Trafiklab Realtime and nearby vehicles."""

from transit_se.adapters.realtime.http_gtfs_realtime_vehicle_provider import (
    HttpGtfsRealtimeVehicleProvider,
)
from transit_se.adapters.sl.http_sl_deviations_client import HttpSlDeviationsClient
from transit_se.adapters.sl.http_sl_transport_client import HttpSlTransportClient
from transit_se.adapters.trafiklab.http_trafiklab_realtime_client import (
    HttpTrafiklabRealtimeClient,
)
from transit_se.app.services.nearby_vehicles_service import NearbyVehiclesService
from transit_se.domain.exceptions import (
    ApiKeyMissingError,
    ApiResponseError,
    InvalidArgumentError,
    InvalidLocationError,
    RemoteError,
    ResponseValidationError,
    SiteNotFoundError,
    TransitError,
)
from transit_se.domain.models import NearbyVehiclesQuery, NearbyVehiclesResult

__version__ = "0.1.0"

__all__ = [
    "ApiKeyMissingError",
    "ApiResponseError",
    "HttpGtfsRealtimeVehicleProvider",
    "HttpSlDeviationsClient",
    "HttpSlTransportClient",
    "HttpTrafiklabRealtimeClient",
    "InvalidArgumentError",
    "InvalidLocationError",
    "NearbyVehiclesQuery",
    "NearbyVehiclesResult",
    "NearbyVehiclesService",
    "RemoteError",
    "ResponseValidationError",
    "SiteNotFoundError",
    "TransitError",
]
