"""HTTP client module for osmclient.

Provides :class:`OSMClient`, a blocking client backed by :class:`httpx.Client`
that signs requests with the application identity and the user's login,
and caches decoded responses on request.

Example::

    from osmclient.client import OSMClient

    with OSMClient(api_id, token, session=store) as osm:
        terms = osm.get_terms()
"""

from osmclient.client.endpoints import ENDPOINTS, Endpoint
from osmclient.client.sync_client import OSMClient

__all__ = ["ENDPOINTS", "Endpoint", "OSMClient"]
