"""Address component extraction for the two provider families."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Tuple

from ...domain.models import AddressComponents


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def google_location(
    result: Optional[Mapping[str, Any]],
) -> Tuple[Optional[float], Optional[float]]:
    """Read ``geometry.location.lat/lng`` as numbers, or None."""
    if not isinstance(result, Mapping):
        return None, None
    geometry = result.get("geometry")
    location = geometry.get("location") if isinstance(geometry, Mapping) else None
    if not isinstance(location, Mapping):
        return None, None
    return _as_number(location.get("lat")), _as_number(location.get("lng"))


def google_address_components(components: Any) -> Optional[AddressComponents]:
    """Map Google ``address_components`` to city, region and country.

    ``locality`` or ``postal_town`` give the city,
    ``administrative_area_level_1`` the region and ``country`` the
    country. Later components overwrite earlier ones.
    """
    if not isinstance(components, list):
        return None

    city = region = country = None
    for component in components:
        if not isinstance(component, Mapping):
            continue
        long_name = component.get("long_name")
        if not isinstance(long_name, str) or not long_name:
            continue
        types = component.get("types")
        types = types if isinstance(types, list) else []

        if "locality" in types or "postal_town" in types:
            city = long_name
        if "administrative_area_level_1" in types:
            region = long_name
        if "country" in types:
            country = long_name

    if not (city or region or country):
        return None
    return AddressComponents(city=city, region=region, country=country)


def nominatim_address_components(address: Any) -> Optional[AddressComponents]:
    """Map a Nominatim ``address`` object to city, region and country."""
    if not isinstance(address, Mapping):
        return None

    city = next(
        (
            address[key]
            for key in ("city", "town", "village")
            if isinstance(address.get(key), str)
        ),
        None,
    )
    region = address.get("state") if isinstance(address.get("state"), str) else None
    country = address.get("country") if isinstance(address.get("country"), str) else None

    if not (city or region or country):
        return None
    return AddressComponents(city=city, region=region, country=country)
