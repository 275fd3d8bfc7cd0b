"""Great-circle distance and radius filtering of vendors."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from market_compare.observability.logging import get_logger
from market_compare.services.comparison.constants import EARTH_RADIUS_KM


if TYPE_CHECKING:
    from collections.abc import Iterable

    from market_compare.schemas.comparison import Coordinates, Vendor

logger = get_logger(__name__)


def has_valid_coordinates(latitude: float | None, longitude: float | None) -> bool:
    """Return whether a coordinate pair is usable.

    Missing components and the ``(0, 0)`` placeholder are invalid.
    """
    if latitude is None or longitude is None:
        return False
    return not (latitude == 0 and longitude == 0)


def haversine_km(
    lat1: float | None,
    lon1: float | None,
    lat2: float | None,
    lon2: float | None,
) -> float:
    """Great-circle distance between two points in kilometres.

    Returns 0 when either point has invalid coordinates.
    """
    if not (has_valid_coordinates(lat1, lon1) and has_valid_coordinates(lat2, lon2)):
        return 0.0

    d_lat = math.radians(lat2 - lat1)  # type: ignore[operator]
    d_lon = math.radians(lon2 - lon1)  # type: ignore[operator]
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))  # type: ignore[arg-type]
        * math.cos(math.radians(lat2))  # type: ignore[arg-type]
        * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


@dataclass(frozen=True, slots=True)
class VendorDistance:
    """A vendor annotated with its distance from the requester."""

    vendor: Vendor
    distance_km: float
    has_coordinates: bool


class GeoFilter:
    """Selects the vendors within a radius of the requester.

    Vendors without usable coordinates sit at distance 0 and therefore inside
    any radius, unless ``exclude_missing_coordinates`` is set.
    """

    def __init__(self, *, exclude_missing_coordinates: bool = False) -> None:
        self._exclude_missing = exclude_missing_coordinates

    def measure(self, origin: Coordinates | None, vendor: Vendor) -> VendorDistance:
        """Annotate one vendor with its distance from ``origin``."""
        has_coordinates = has_valid_coordinates(vendor.latitude, vendor.longitude)
        if not has_coordinates:
            logger.debug(
                "Vendor has no usable coordinates",
                vendor_id=vendor.id,
            )

        if origin is None:
            return VendorDistance(vendor, 0.0, has_coordinates)

        distance = haversine_km(
            origin.latitude,
            origin.longitude,
            vendor.latitude,
            vendor.longitude,
        )
        return VendorDistance(vendor, distance, has_coordinates)

    def within_radius(
        self,
        origin: Coordinates,
        vendors: Iterable[Vendor],
        radius_km: float,
    ) -> list[VendorDistance]:
        """Return the vendors whose distance is at most ``radius_km``.

        Input order is preserved.
        """
        selected: list[VendorDistance] = []
        for vendor in vendors:
            measured = self.measure(origin, vendor)
            if self._exclude_missing and not measured.has_coordinates:
                continue
            if measured.distance_km <= radius_km:
                selected.append(measured)

        logger.debug(
            "Radius filter applied",
            radius_km=radius_km,
            selected=len(selected),
        )
        return selected
