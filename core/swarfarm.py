"""
Swarfarm API client.
Public REST API at https://swarfarm.com/api/v2, no authentication required.
"""
from __future__ import annotations

import logging
import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple, TypeVar

import requests

from . import config

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SwarfarmError(Exception):
    """Base error for every failed Swarfarm lookup."""

    code = "swarfarm_error"

    def __init__(self, message: str, status: int = 502):
        self.status = int(status)
        super().__init__(message)


class InvalidMonsterIdError(SwarfarmError):
    code = "invalid_id"

    def __init__(self, raw_id: object):
        self.raw_id = raw_id
        super().__init__("Invalid id", status=400)


class ProxyPathNotAllowedError(SwarfarmError):
    code = "endpoint_not_allowed"

    def __init__(self, path: str):
        self.path = path
        super().__init__("Endpoint não permitido", status=400)


class SwarfarmHTTPError(SwarfarmError):
    """Upstream answered with a non-2xx status."""

    code = "upstream_status"


class SwarfarmUnavailableError(SwarfarmError):
    """Upstream could not be reached (connection error or timeout)."""

    code = "upstream_unavailable"


class SwarfarmPayloadError(SwarfarmError):
    """Upstream answered 2xx with a body that is not the expected JSON."""

    code = "malformed_payload"


# ── Cache ─────────────────────────────────────────────────────────────────────


class TimedCache:
    """Small thread-safe memo whose entries expire after ``ttl`` seconds."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._entries: Dict[str, Tuple[float, object]] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def get_or_set(self, key: str, ttl: float, loader: Callable[[], T]) -> T:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry[0] > now:
                return entry[1]  # type: ignore[return-value]
        # Loading happens outside the lock; concurrent misses may both fetch.
        value = loader()
        with self._lock:
            self._entries[key] = (self._clock() + ttl, value)
        return value

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


_cache = TimedCache()


def clear_cache() -> None:
    _cache.clear()


# ── Raw HTTP ──────────────────────────────────────────────────────────────────


def _get(url: str, *, headers: Optional[Dict[str, str]] = None) -> requests.Response:
    """GET ``url`` and translate transport failures into :class:`SwarfarmError`."""

    request_headers = {"Accept": "application/json", "User-Agent": config.USER_AGENT}
    request_headers.update(headers or {})
    try:
        return requests.get(url, headers=request_headers, timeout=config.REQUEST_TIMEOUT)
    except requests.exceptions.Timeout as exc:
        logger.warning("Swarfarm timeout url=%s", url)
        raise SwarfarmUnavailableError("Swarfarm timeout", status=504) from exc
    except requests.exceptions.RequestException as exc:
        logger.warning("Swarfarm unreachable url=%s error=%s", url, exc)
        raise SwarfarmUnavailableError(f"Swarfarm unreachable: {exc}") from exc


def _get_json(url: str) -> object:
    response = _get(url)
    if not response.ok:
        logger.warning("Swarfarm error url=%s status=%s", url, response.status_code)
        raise SwarfarmHTTPError(
            f"Swarfarm error {response.status_code} {response.reason or ''}".strip(),
            status=response.status_code,
        )
    try:
        return response.json()
    except ValueError as exc:
        raise SwarfarmPayloadError("Swarfarm returned invalid JSON") from exc


def _iterate_pages(url: Optional[str], label: str) -> List[dict]:
    """Follow ``next`` links and collect every ``results`` entry."""

    collected: List[dict] = []
    pages = 0
    while url:
        try:
            data = _get_json(url)
        except SwarfarmHTTPError as exc:
            # List endpoints always surface upstream failures as a bad gateway.
            raise SwarfarmHTTPError(
                f"SWARFARM {label} fetch failed: {exc.status}", status=502
            ) from exc
        if not isinstance(data, dict) or not isinstance(data.get("results"), list):
            raise SwarfarmPayloadError(f"SWARFARM {label} payload has no results")
        collected.extend(entry for entry in data["results"] if isinstance(entry, dict))
        url = data.get("next") or None
        pages += 1
    logger.info("Swarfarm %s fetched pages=%s entries=%s", label, pages, len(collected))
    return collected


# ── Public lookups ────────────────────────────────────────────────────────────


def parse_monster_id(raw_id: object) -> int:
    """Return ``raw_id`` as a positive integer or raise :class:`InvalidMonsterIdError`."""

    if isinstance(raw_id, bool):
        raise InvalidMonsterIdError(raw_id)
    try:
        value = float(str(raw_id).strip())
    except (TypeError, ValueError) as exc:
        raise InvalidMonsterIdError(raw_id) from exc
    if not math.isfinite(value) or value <= 0 or value != int(value):
        raise InvalidMonsterIdError(raw_id)
    return int(value)


def fetch_monster(raw_id: object) -> dict:
    """Monster detail document (max level stats, element, leader skill)."""

    monster_id = parse_monster_id(raw_id)

    def load() -> dict:
        data = _get_json(f"{config.SWARFARM_API_ROOT}/monsters/{monster_id}/")
        if not isinstance(data, dict):
            raise SwarfarmPayloadError("Swarfarm monster payload is not an object")
        return data

    return _cache.get_or_set(f"monster:{monster_id}", config.MONSTER_CACHE_TTL, load)


def _shape_monster_entry(entry: dict) -> dict:
    element = entry.get("element")
    return {
        "id": int(entry.get("id") or 0),
        "name": str(entry.get("name") or ""),
        "element": None if element is None else str(element),
    }


def _load_awakened_monsters() -> List[dict]:
    url = f"{config.SWARFARM_API_ROOT}/monsters/?awaken_level=1"
    monsters = [_shape_monster_entry(entry) for entry in _iterate_pages(url, "monsters")]
    # Name first, then element, so same-name variants keep a stable order.
    monsters.sort(key=lambda m: (m["name"].lower(), (m["element"] or "").lower()))
    return monsters


def fetch_awakened_monsters() -> List[dict]:
    """Every awakened monster as ``{id, name, element}``, sorted by name."""

    return _cache.get_or_set("monsters:awakened", config.LIST_CACHE_TTL, _load_awakened_monsters)


def _shape_leader_skill(entry: dict) -> dict:
    element = entry.get("element")
    try:
        amount = float(entry.get("amount") or 0)
    except (TypeError, ValueError):
        amount = 0.0
    return {
        "id": int(entry.get("id") or 0),
        "attribute": str(entry.get("attribute") or ""),
        "amount": amount,
        "area": str(entry.get("area") or ""),
        "element": None if element is None else str(element),
    }


def _load_leader_skills() -> List[dict]:
    url = f"{config.SWARFARM_API_ROOT}/leader-skills/"
    return [_shape_leader_skill(entry) for entry in _iterate_pages(url, "leader-skills")]


def fetch_leader_skills() -> List[dict]:
    """Every leader skill as ``{id, attribute, amount, area, element}``."""

    return _cache.get_or_set("leader-skills", config.LIST_CACHE_TTL, _load_leader_skills)


def search_monsters(monsters: List[dict], term: str) -> List[dict]:
    """Filter the picker list by a case-insensitive ``name element`` match."""

    needle = (term or "").strip().lower()
    if not needle:
        return monsters[: config.SEARCH_DEFAULT_LIMIT]
    matches = [
        monster
        for monster in monsters
        if needle in f"{monster.get('name', '')} {monster.get('element') or ''}".lower()
    ]
    return matches[: config.SEARCH_MATCH_LIMIT]


# ── Passthrough ───────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ProxyResponse:
    status: int
    content_type: str
    body: bytes


def is_proxy_path_allowed(path: str) -> bool:
    parts = path.split("/")
    top = parts[0]
    nested = f"{top}/{parts[1] if len(parts) > 1 else ''}"
    return top in config.PROXY_ALLOWLIST or nested in config.PROXY_ALLOWLIST


def proxy_get(raw_path: str) -> ProxyResponse:
    """Forward an allow-listed GET to Swarfarm and return the body untouched."""

    path = (raw_path or "").lstrip("/")
    if ".." in path.split("/") or not is_proxy_path_allowed(path):
        raise ProxyPathNotAllowedError(path)
    response = _get(f"{config.SWARFARM_API_ROOT}/{path}", headers={"Accept": "*/*"})
    return ProxyResponse(
        status=response.status_code,
        content_type=response.headers.get("content-type", "application/json"),
        body=response.content,
    )


__all__ = [
    "InvalidMonsterIdError",
    "ProxyPathNotAllowedError",
    "ProxyResponse",
    "SwarfarmError",
    "SwarfarmHTTPError",
    "SwarfarmPayloadError",
    "SwarfarmUnavailableError",
    "TimedCache",
    "clear_cache",
    "fetch_awakened_monsters",
    "fetch_leader_skills",
    "fetch_monster",
    "parse_monster_id",
    "proxy_get",
    "search_monsters",
]
