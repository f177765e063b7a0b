"""
Shared test fixtures.

FakeSoftLayerApi is an in-memory stand-in for the provider's REST API,
served through httpx.MockTransport so the real client code runs unchanged.
"""

import json
import re
from typing import Any, Optional

import httpx
import pytest


API_PREFIX = "/rest/v3/"

_DOMAIN_PATH = re.compile(r"^SoftLayer_Dns_Secondary/(\d+)\.json$")
_TRANSFER_PATH = re.compile(r"^SoftLayer_Dns_Secondary/(\d+)/transferNow\.json$")
_SERVERS_PATH = re.compile(r"^SoftLayer_Account/get(\w+)\.json$")
_TRACKING_PATH = re.compile(r"^(\w+)/(\d+)/getMetricTrackingObjectId\.json$")
_SUMMARY_PATH = re.compile(r"^SoftLayer_Metric_Tracking_Object/(\d+)/getSummary/(\w+)\.json$")


class FakeSoftLayerApi:
    """
    Stateful fake of the secondary DNS, account and metrics services.

    Every request is recorded in ``calls`` as ``(method, path)`` with the
    ``/rest/v3/`` prefix removed. ``failures`` maps such a pair (or just a
    method) to an HTTP status the fake answers with instead.
    """

    def __init__(
        self,
        zones: Optional[list[str]] = None,
        servers: Optional[dict[str, list[dict]]] = None,
        tracking_ids: Optional[dict[int, Any]] = None,
        summaries: Optional[dict[int, Any]] = None,
    ) -> None:
        self.domains: dict[int, dict] = {}
        self.next_id = 1000
        self.calls: list[tuple[str, str]] = []
        self.bodies: list[Any] = []
        self.failures: dict[Any, int] = {}
        self.servers = servers or {}
        self.tracking_ids = tracking_ids or {}
        self.summaries = summaries or {}
        for zone in zones or []:
            self.add_domain(zone)

    def add_domain(self, zone_name: str, **fields) -> dict:
        record = {
            "id": self.next_id,
            "zoneName": zone_name,
            "statusId": 1,
            "lastUpdate": "2024-01-01T00:00:00-06:00",
            "masterIpAddress": "192.0.2.1",
            "transferFrequency": 10,
        }
        record.update(fields)
        self.domains[self.next_id] = record
        self.next_id += 1
        return record

    @property
    def zone_names(self) -> set[str]:
        return {record["zoneName"].lower() for record in self.domains.values()}

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def count(self, method: str, prefix: str = "") -> int:
        return sum(1 for m, p in self.calls if m == method and p.startswith(prefix))

    @property
    def mutations(self) -> list[tuple[str, str]]:
        return [
            (method, path) for method, path in self.calls
            if method in ("POST", "PUT", "DELETE") or path.endswith("transferNow.json")
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        assert path.startswith(API_PREFIX), path
        assert request.headers["Authorization"].startswith("Basic ")
        path = path[len(API_PREFIX):]
        method = request.method

        self.calls.append((method, path))
        body = json.loads(request.content) if request.content else None
        self.bodies.append(body)

        status = self.failures.get((method, path), self.failures.get(method))
        if status is not None:
            return httpx.Response(
                status,
                json={"error": "Injected failure", "code": "SoftLayer_Exception_Public"},
            )

        return self._route(method, path, body)

    def _route(self, method: str, path: str, body: Any) -> httpx.Response:
        if method == "GET" and path == "SoftLayer_Account/getSecondaryDomains.json":
            return httpx.Response(200, json=list(self.domains.values()))

        if method == "POST" and path == "SoftLayer_Dns_Secondary/createObjects.json":
            created = [
                self.add_domain(t["zoneName"], **self._fields(t))
                for t in body["parameters"][0]
            ]
            return httpx.Response(201, json=created)

        match = _DOMAIN_PATH.match(path)
        if match and int(match.group(1)) in self.domains:
            domain_id = int(match.group(1))
            if method == "PUT":
                template = body["parameters"][0]
                self.domains[domain_id].update(self._fields(template), zoneName=template["zoneName"])
                return httpx.Response(200, json=True)
            if method == "DELETE":
                del self.domains[domain_id]
                return httpx.Response(200, json=True)

        match = _TRANSFER_PATH.match(path)
        if method == "GET" and match and int(match.group(1)) in self.domains:
            self.domains[int(match.group(1))]["statusId"] = 2
            return httpx.Response(200, json=True)

        match = _SERVERS_PATH.match(path)
        if method == "GET" and match and match.group(1) in self.servers:
            return httpx.Response(200, json=self.servers[match.group(1)])

        match = _TRACKING_PATH.match(path)
        if method == "GET" and match and int(match.group(2)) in self.tracking_ids:
            return httpx.Response(200, json=self.tracking_ids[int(match.group(2))])

        match = _SUMMARY_PATH.match(path)
        if method == "GET" and match and int(match.group(1)) in self.summaries:
            return httpx.Response(200, json=self.summaries[int(match.group(1))])

        return httpx.Response(
            404,
            json={
                "error": f"Unable to find object for {path}",
                "code": "SoftLayer_Exception_ObjectNotFound",
            },
        )

    @staticmethod
    def _fields(template: dict) -> dict:
        return {
            key: template[key]
            for key in ("masterIpAddress", "transferFrequency")
            if key in template
        }


@pytest.fixture(scope="session")
def fake_api_class() -> type:
    """The fake API class; session scoped so Hypothesis tests can use it."""
    return FakeSoftLayerApi
