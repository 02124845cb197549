"""Cluster management REST client.

Reads node metadata from the cluster's management endpoint
(`GET /pools/default`) so the driver can report the lowest server version
running in the cluster.

Usage:
    from docstore.clients.cluster import ClusterInfoClient, lowest_node_version

    client = ClusterInfoClient("http://127.0.0.1:8091", "admin", "password")
    result = client.get_node_data()
    if result.is_success:
        version = lowest_node_version(result.data)
"""

import json
from typing import Any, Dict, Optional, Tuple
from urllib.parse import urljoin

import requests
import structlog

from docstore.operations import OperationResult, OperationStatus

logger = structlog.get_logger(__name__)

NODE_DATA_PATH = "/pools/default"


def _version_key(version: str) -> Tuple[int, ...]:
    parts = []
    for part in version.split("."):
        digits = "".join(ch for ch in part if ch.isdigit())
        parts.append(int(digits) if digits else 0)
    return tuple(parts)


def lowest_node_version(node_data: Optional[Dict[str, Any]]) -> Optional[str]:
    """Return the lowest version among the cluster's nodes.

    Build suffixes ("6.5.1-6299-enterprise" -> "6.5.1") are stripped before
    comparing.

    Args:
        node_data: Parsed `/pools/default` response

    Returns:
        The lowest version string, or None when there is no node data.
    """
    if not node_data or not isinstance(node_data.get("nodes"), list):
        return None

    versions = []
    for node in node_data["nodes"]:
        raw = node.get("version") if isinstance(node, dict) else None
        if not raw:
            continue
        i = raw.find("-")
        versions.append(raw if i <= 0 else raw[:i])

    if not versions:
        return None
    return min(versions, key=_version_key)


class ClusterInfoClient:
    """HTTP client for the cluster management endpoint.

    Attributes:
        base_url: Management URL of any cluster node
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        base_url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: int = 10,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self._session = requests.Session()
        self._session.headers.update({"Content-Type": "application/json"})
        if username and password:
            self._session.auth = (username, password)
        self._logger = logger.bind(component="cluster_info_client")

    def get_node_data(self) -> OperationResult:
        """Fetch `/pools/default` from the cluster.

        Returns:
            OperationResult with the parsed JSON body as data, or an error
        """
        url = urljoin(self.base_url, NODE_DATA_PATH)
        log = self._logger.bind(url=url)

        try:
            response = self._session.get(url, timeout=self.timeout)
        except requests.Timeout:
            log.error("cluster_info_timeout", timeout=self.timeout)
            return OperationResult.transient_error(
                message=f"Request timeout after {self.timeout}s",
                error_code="TIMEOUT",
            )
        except requests.ConnectionError as e:
            log.error("cluster_info_connection_error", error=str(e))
            return OperationResult.transient_error(
                message=f"Connection error: {e}", error_code="CONNECTION_ERROR"
            )

        if response.status_code != 200:
            log.warning("cluster_info_request_failed", status_code=response.status_code)
            status = (
                OperationStatus.TRANSIENT_ERROR
                if response.status_code >= 500
                else OperationStatus.PERMANENT_ERROR
            )
            return OperationResult.error(
                status,
                f"Node request failed. Status Code: {response.status_code}",
                error_code=f"HTTP_{response.status_code}",
            )

        try:
            data = response.json()
        except json.JSONDecodeError as e:
            log.warning("cluster_info_non_json_response", content=response.text[:200])
            return OperationResult.permanent_error(
                message=f"Invalid node data: {e}", error_code="INVALID_RESPONSE"
            )

        return OperationResult.success(data=data, message="node data retrieved")
