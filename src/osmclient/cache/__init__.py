"""Two-tier caching of decoded API responses.

This package provides :class:`ResponseCache`, which keeps decoded JSON bodies
keyed by a request fingerprint in up to two tiers: a dict on the client
instance and a map inside the session store. Which tiers a request reads and
writes is chosen per call with a cache mode (see :mod:`osmclient.models`).

The cache is consumed by :class:`~osmclient.client.OSMClient`.
"""

from osmclient.cache.cache import ResponseCache, encode_params, fingerprint

__all__ = ["ResponseCache", "encode_params", "fingerprint"]
