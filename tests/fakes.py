"""Canned Swarfarm responses shared by the test modules."""

import json
from typing import Callable, Dict, List, Optional

import requests

from core import config

API = config.SWARFARM_API_ROOT

LUSHEN = {
    "id": 1234,
    "name": "Lushen",
    "awaken_level": 1,
    "element": "Wind",
    "speed": 103,
    "max_lvl_hp": 9225,
    "max_lvl_attack": 900,
    "max_lvl_defense": 461,
    "leader_skill": None,
}


class FakeResponse:
    """Minimal stand-in for :class:`requests.Response`."""

    def __init__(
        self,
        payload: object = None,
        status_code: int = 200,
        *,
        text: Optional[str] = None,
        content_type: str = "application/json",
    ) -> None:
        self.status_code = status_code
        self.reason = "OK" if status_code < 400 else "Error"
        self.headers = {"content-type": content_type}
        self._text = text if text is not None else json.dumps(payload)

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    @property
    def content(self) -> bytes:
        return self._text.encode("utf-8")

    def json(self) -> object:
        return json.loads(self._text)


class FakeSwarfarm:
    """Routes ``requests.get`` calls to canned responses keyed by URL."""

    def __init__(self) -> None:
        self.routes: Dict[str, Callable[[], FakeResponse]] = {}
        self.calls: List[dict] = []

    def add(self, url: str, response: FakeResponse) -> None:
        self.routes[url] = lambda: response

    def fail(self, url: str, exc: Exception) -> None:
        def raiser() -> FakeResponse:
            raise exc

        self.routes[url] = raiser

    def __call__(self, url: str, headers=None, timeout=None) -> FakeResponse:
        self.calls.append({"url": url, "headers": dict(headers or {}), "timeout": timeout})
        route = self.routes.get(url)
        if route is None:
            raise requests.exceptions.ConnectionError(f"no route for {url}")
        return route()
