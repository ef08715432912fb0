"""
Locations — saved delivery (buyer) and pickup (seller) addresses.

    from marketgate.locations import LocationsApi, LocationScope

    buyer = LocationsApi(gateway)
    seller = LocationsApi(gateway, LocationScope.SELLER)
    await buyer.create("Home", "Main st 1", latitude=41.311081, longitude=69.240562)
"""

from marketgate.locations._types import Location, LocationScope
from marketgate.locations._api import LocationsApi

__all__ = ("Location", "LocationScope", "LocationsApi")
