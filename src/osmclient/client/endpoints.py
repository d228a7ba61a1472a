"""Lookup table of the convenience endpoints.

Each :class:`Endpoint` describes one fixed-shape call: the script path, the
query string that always accompanies it, the values the caller must supply
(appended to the query string) and the optional values (sent in the form
body next to the credentials). :meth:`Endpoint.build` turns caller values
into the ``(relative_url, params)`` pair that
:meth:`~osmclient.client.OSMClient.perform_query` expects.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field

from osmclient.exceptions import InvalidUsageError


class Endpoint(BaseModel):
    """A single entry of :data:`ENDPOINTS`."""

    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    query: dict[str, str] = Field(default_factory=dict)
    required: tuple[str, ...] = ()
    optional: tuple[str, ...] = ()

    def build(self, **values: Any) -> tuple[str, dict[str, Any]]:
        """Return the relative URL and body parameters for a call.

        Raises:
            InvalidUsageError: If a required value is missing or ``None``,
                or a value this endpoint does not take is passed.
        """
        unknown = sorted(set(values) - set(self.required) - set(self.optional))
        if unknown:
            raise InvalidUsageError(
                f"Endpoint '{self.name}' does not accept: {', '.join(unknown)}"
            )
        missing = [name for name in self.required if values.get(name) is None]
        if missing:
            raise InvalidUsageError(
                f"Endpoint '{self.name}' requires: {', '.join(missing)}"
            )

        query = dict(self.query)
        query.update((name, str(values[name])) for name in self.required)
        relative_url = f"{self.path}?{urlencode(query)}" if query else self.path

        params = {
            name: _plain(values[name])
            for name in self.optional
            if values.get(name) is not None
        }
        return relative_url, params


def _plain(value: Any) -> Any:
    # Enum members (e.g. BadgeType) are sent as their value
    return getattr(value, "value", value)


ENDPOINTS: dict[str, Endpoint] = {
    endpoint.name: endpoint
    for endpoint in (
        Endpoint(
            name="terms",
            path="api.php",
            query={"action": "getTerms"},
        ),
        Endpoint(
            name="badges",
            path="challenges.php",
            query={"action": "getBadgeDetails", "section": "scouts", "badgeType": "challenge"},
            optional=("badgeType",),
        ),
        Endpoint(
            name="events",
            path="events.php",
            query={"action": "getEvents"},
            required=("sectionid",),
        ),
        Endpoint(
            name="kids",
            path="challenges.php",
            query={"type": "challenge", "section": "scouts", "c": "community"},
            required=("termid", "sectionid"),
        ),
    )
}

AUTHORIZE_PATH = "users.php?action=authorise"
"""Credential exchange endpoint used by :meth:`OSMClient.authorize`."""
