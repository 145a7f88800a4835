"""Typed data-access surface over the upstream API.

ApiClient composes a ResilientFetcher, a per-client TTLCache and the
response parsers. It owns one Credentials bundle and the headers derived
from it; the cooldown lives in the shared AppState. Errors from the
fetcher propagate unchanged. The only place they are caught is
``search_menu_items``, a best-effort lookup across many vendors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

import structlog

from yemekcli.cache import TTLCache
from yemekcli.errors import ChallengeExhaustedError, YemekCliError
from yemekcli.fetcher import ResilientFetcher
from yemekcli.models.catalog import MenuSearchHit
from yemekcli.parsers import parse_addresses, parse_restaurants, parse_vendor_detail

if TYPE_CHECKING:
    from yemekcli.models.catalog import Address, Restaurant, VendorDetail
    from yemekcli.models.credentials import Credentials
    from yemekcli.protocols import CacheProtocol, FetcherProtocol
    from yemekcli.state import AppState

log = structlog.get_logger()

ADDRESSES_PATH = "/api/v5/customers/addresses"
VENDORS_PATH = "/vendors-gateway/api/v1/pandora/vendors"
VENDOR_DETAIL_PATH = "/api/v5/vendors/{code}"

DEFAULT_LISTING_LIMIT = 48
SEARCH_LISTING_LIMIT = 30
SEARCH_VENDOR_LIMIT = 10
MIN_SEARCH_QUERY_LENGTH = 2
CACHE_HIT_MESSAGE = "Loaded from cache"


def joker_restaurants(restaurants: list[Restaurant]) -> list[Restaurant]:
    """Listings that carry at least one promotional ("joker") discount."""
    return [r for r in restaurants if r.discounts_info]


class ApiClient:
    """Authenticated, cached access to addresses, listings and vendor menus."""

    def __init__(
        self,
        credentials: Credentials,
        state: AppState,
        *,
        fetcher: FetcherProtocol | None = None,
        cache: CacheProtocol | None = None,
    ) -> None:
        self._credentials = credentials
        self._state = state
        self._api = state.settings.api
        if fetcher is None:
            if state.http_client is None:
                raise RuntimeError("AppState has no HTTP client; use runtime.open_session")
            fetcher_settings = state.settings.fetcher
            fetcher = ResilientFetcher(
                state.http_client,
                state.cooldown,
                state.status,
                retry_delays=fetcher_settings.retry_delays_seconds,
                cooldown_seconds=fetcher_settings.cooldown_seconds,
                body_prefix_chars=fetcher_settings.body_prefix_chars,
            )
        self._fetcher = fetcher
        self._cache = cache if cache is not None else TTLCache(state.settings.cache.ttl_seconds)

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    @property
    def headers(self) -> dict[str, str]:
        creds = self._credentials
        return {
            "Authorization": f"Bearer {creds.auth_token}",
            "x-fp-api-key": self._api.api_key,
            "Accept": "application/json",
            "Content-Type": "application/json",
            "x-pd-language-id": self._api.language_id,
            "x-disco-client-id": self._api.client_id,
            "perseus-client-id": creds.perseus_client_id,
            "perseus-session-id": creds.perseus_session_id,
            "User-Agent": self._api.user_agent,
        }

    def _url(self, path: str, params: dict[str, str] | None = None) -> str:
        url = self._api.base_url.rstrip("/") + path
        if params:
            # Keep commas literal, e.g. include=menus,deals
            query = urlencode(params, safe=",")
            url = f"{url}?{query}"
        return url

    async def _fetch(self, url: str) -> Any:
        return await self._fetcher.fetch_json(url, self.headers)

    async def _fetch_cached(self, cache_key: str, url: str) -> Any:
        cached = self._cache.get(cache_key)
        if cached is not None:
            log.debug("cache_hit", key=cache_key)
            self._state.status(CACHE_HIT_MESSAGE)
            return cached
        data = await self._fetch(url)
        self._cache.set(cache_key, data)
        return data

    def clear_cache(self) -> None:
        """Drop every cached result. The shared cooldown is left untouched."""
        self._cache.clear()

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    async def get_addresses(self) -> list[Address]:
        """Saved delivery addresses. Never cached."""
        data = await self._fetch(self._url(ADDRESSES_PATH))
        return parse_addresses(data)

    async def get_restaurants(
        self,
        lat: float,
        lng: float,
        *,
        cuisine: str | None = None,
        offset: int = 0,
        limit: int = DEFAULT_LISTING_LIMIT,
        sort: str | None = None,
        joker_id: str | None = None,
    ) -> list[Restaurant]:
        """Restaurants delivering to the given coordinates.

        Cached per coordinates, joker code and offset. Coordinates are used
        as given, without rounding.
        """
        creds = self._credentials
        params = {
            "latitude": str(lat),
            "longitude": str(lng),
            "language_id": self._api.language_id,
            "include": "characteristics",
            "configuration": "Original",
            "country": self._api.country,
            "customer_id": creds.user_id,
            "customer_type": "regular",
            "use_free_delivery_label": "true",
            "limit": str(limit),
            "offset": str(offset),
            "vertical": "restaurants",
        }
        if creds.customer_hash:
            params["customer_hash"] = creds.customer_hash
        if cuisine:
            params["cuisine"] = cuisine
        if sort:
            params["sort"] = sort
        if joker_id:
            params["joker_id"] = joker_id

        cache_key = f"restaurants:{lat}:{lng}:{joker_id or ''}:{offset}"
        data = await self._fetch_cached(cache_key, self._url(VENDORS_PATH, params))
        return parse_restaurants(data)

    async def get_vendor_detail(self, code: str, lat: float, lng: float) -> VendorDetail:
        """One vendor with menus and deals. Empty menu categories are dropped."""
        params = {
            "include": "menus,deals",
            "language_id": self._api.language_id,
            "latitude": str(lat),
            "longitude": str(lng),
        }
        url = self._url(VENDOR_DETAIL_PATH.format(code=code), params)
        data = await self._fetch_cached(f"vendor:{code}:{lat}:{lng}", url)
        return parse_vendor_detail(data)

    async def search_menu_items(
        self,
        query: str,
        lat: float,
        lng: float,
        *,
        restaurants: list[Restaurant] | None = None,
        vendor_limit: int = SEARCH_VENDOR_LIMIT,
    ) -> list[MenuSearchHit]:
        """Find menu items matching ``query`` across the first ``vendor_limit`` vendors.

        Best effort: a vendor whose menu cannot be loaded is skipped. A
        ChallengeExhaustedError still propagates since every further vendor
        would be blocked as well. Hits are sorted by ascending price.
        """
        needle = query.strip().lower()
        if len(needle) < MIN_SEARCH_QUERY_LENGTH:
            return []

        if not restaurants:
            restaurants = await self.get_restaurants(lat, lng, limit=SEARCH_LISTING_LIMIT)

        hits: list[MenuSearchHit] = []
        for restaurant in restaurants[:vendor_limit]:
            try:
                vendor = await self.get_vendor_detail(restaurant.code, lat, lng)
            except ChallengeExhaustedError:
                raise
            except YemekCliError as exc:
                log.warning(
                    "vendor_lookup_failed",
                    vendor=restaurant.code,
                    code=exc.code,
                    message=exc.message,
                )
                continue
            for category in vendor.menus:
                for item in category.items:
                    if needle in item.name.lower() or needle in item.description.lower():
                        hits.append(MenuSearchHit(restaurant=restaurant, item=item))

        hits.sort(key=lambda hit: hit.item.price)
        return hits
