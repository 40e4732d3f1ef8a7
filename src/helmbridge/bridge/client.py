"""
HTTP transport for the Bridge service. Every call carries the configured
timeout; status interpretation is left to the callers.
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

logger = logging.getLogger("helmbridge.http")


class BridgeClient:

    def __init__(self, api_url: str, timeout: float = 30.0,
                 session: Optional[requests.Session] = None):
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def resource_url(self, *parts: str) -> str:
        return "/".join([self.api_url, "resource"] + [quote(p, safe="") for p in parts])

    def post_resource(self, namespace: str, name: str, record: Dict[str, Any]) -> requests.Response:
        url = self.resource_url(namespace, name)
        logger.debug(f"POST {url}")
        return self.session.post(url, json=record, timeout=self.timeout)

    def get_resource(self, resource: str) -> requests.Response:
        url = self.resource_url(resource)
        logger.debug(f"GET {url}")
        return self.session.get(url, timeout=self.timeout)

    def close(self):
        self.session.close()
