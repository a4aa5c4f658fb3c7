"""Portainer Source - Collects published container ports via the Portainer API.

Endpoint discovery must succeed; after that every endpoint is fetched on
its own and a failing endpoint is logged and left out of the result.
"""

import logging
from typing import Any

import httpx

from portboard.errors import ExternalServiceError
from portboard.model.ports import ContainerPortMapping, ContainerSourceResult

logger = logging.getLogger(__name__)

ENDPOINT_STATUS_UP = 1


class PortainerSource:
    """Container port source backed by the Portainer HTTP API.

    Example:
        >>> source = PortainerSource("http://portainer:9000", token="ptr_xxx")
        >>> result = source.fetch()
        >>> [m.public_port for m in result.mappings]
    """

    def __init__(
        self,
        url: str | None,
        token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.url = (url or "").strip().rstrip("/")
        self.token = token or ""
        self.timeout = timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.url)

    def fetch(self) -> ContainerSourceResult:
        """Return every container port mapping across all reachable endpoints.

        Raises:
            ExternalServiceError: If the endpoint list cannot be fetched.
        """
        if not self.configured:
            return ContainerSourceResult()

        result = ContainerSourceResult()
        with httpx.Client(
            base_url=self.url,
            headers={"X-API-Key": self.token},
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            try:
                endpoints = self._get_json(client, "/api/endpoints")
            except (httpx.HTTPError, ValueError) as e:
                raise ExternalServiceError(f"Portainer API Error: {e}") from e
            if not isinstance(endpoints, list):
                raise ExternalServiceError("Portainer API Error: unexpected endpoint list payload")

            for endpoint in endpoints:
                if not isinstance(endpoint, dict) or endpoint.get("Status") != ENDPOINT_STATUS_UP:
                    continue
                endpoint_id = endpoint.get("Id")
                endpoint_name = endpoint.get("Name") or str(endpoint_id)
                try:
                    containers = self._get_json(
                        client, f"/api/endpoints/{endpoint_id}/docker/containers/json"
                    )
                    if not isinstance(containers, list):
                        raise ValueError("unexpected container list payload")
                    mappings = [
                        mapping
                        for container in containers
                        for mapping in self._parse_container(container, endpoint_id, endpoint_name)
                    ]
                except (httpx.HTTPError, ValueError) as e:
                    logger.warning("Failed to fetch containers for endpoint %s: %s", endpoint_name, e)
                    result.warnings.append(f"Endpoint {endpoint_name} omitted: {e}")
                    continue

                result.mappings.extend(mappings)

        return result

    @staticmethod
    def _get_json(client: httpx.Client, path: str) -> Any:
        response = client.get(path)
        response.raise_for_status()
        return response.json()

    @staticmethod
    def _parse_container(
        container: dict[str, Any], endpoint_id: int, endpoint_name: str
    ) -> list[ContainerPortMapping]:
        """Convert one Docker container summary into port mappings.

        Raises:
            ValueError: If the summary or one of its ports is not an object.
        """
        if not isinstance(container, dict):
            raise ValueError(f"unexpected container entry: {container!r}")
        container_id = str(container.get("Id") or "")
        names = container.get("Names") or []
        name = str(names[0]).lstrip("/") if names else container_id[:12]

        mappings: list[ContainerPortMapping] = []
        for port in container.get("Ports") or []:
            if not isinstance(port, dict):
                raise ValueError(f"unexpected port entry in container {name}: {port!r}")
            mappings.append(
                ContainerPortMapping(
                    container_id=container_id,
                    container_name=name,
                    endpoint_id=endpoint_id,
                    endpoint_name=endpoint_name,
                    private_port=port.get("PrivatePort"),
                    public_port=port.get("PublicPort"),
                    type=(port.get("Type") or "tcp").lower(),
                    ip=port.get("IP"),
                    container_state=container.get("State"),
                )
            )
        return mappings
