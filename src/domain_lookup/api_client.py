"""
Async client for the domain lookup API.

The remote API exposes two endpoints:
- GET /domains: the TLD catalog, as [{"name": ..., "type": "GENERIC" | "COUNTRY_CODE"}]
- GET /availability?domain=<label>.<tld>: {"domain": ..., "available": bool}

Every transport or protocol failure is converted into a FetchError (catalog)
or QueryError (availability). Requests are never retried here.
"""

import hashlib
import time
from typing import Any, Optional

import httpx

from .config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECONDS
from .enums import ApiErrorCode, TldKind
from .exceptions import DomainLookupError, FetchError, QueryError
from .models import AvailabilityResult, Tld
from .tld_registry import DEFAULT_TLDS


DOMAINS_PATH = "/domains"
AVAILABILITY_PATH = "/availability"


class DomainApiClient:
    """
    Async HTTP client for the catalog and availability endpoints.

    The underlying httpx.AsyncClient is created lazily on first use or on
    context manager entry. In simulation mode no network requests are made:
    the catalog comes from the built-in TLD registry and availability is
    derived deterministically from the domain name.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        simulation_mode: bool = False,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the API client.

        Args:
            base_url: Base URL of the lookup API
            timeout: Per-request timeout in seconds
            simulation_mode: If True, no real network requests are made
            transport: Optional httpx transport (used by tests)
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._simulation_mode = simulation_mode
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._request_count = 0

    async def __aenter__(self) -> "DomainApiClient":
        """Async context manager entry."""
        self._ensure_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def simulation_mode(self) -> bool:
        return self._simulation_mode

    @property
    def request_count(self) -> int:
        """Number of availability queries issued so far."""
        return self._request_count

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=httpx.Timeout(self._timeout),
                transport=self._transport,
                follow_redirects=True,
            )
        return self._client

    async def get_domains(self) -> list[Tld]:
        """
        Fetch the TLD catalog, in the order the API returns it.

        Returns:
            List of Tld entries

        Raises:
            FetchError: On network error, timeout, non-2xx status or malformed body
        """
        if self._simulation_mode:
            return list(DEFAULT_TLDS)

        url = f"{self._base_url}{DOMAINS_PATH}"
        payload = await self._get_json(DOMAINS_PATH, None, url, FetchError)

        if not isinstance(payload, list):
            raise FetchError(
                code=ApiErrorCode.PARSE_ERROR.value,
                message="Domain catalog response is not a list",
                details={"request_url": url},
            )

        return [self._parse_tld(item, url) for item in payload]

    async def get_availability(self, term: str, tld: Tld) -> AvailabilityResult:
        """
        Query availability of term.tld.

        Args:
            term: Canonical search term (label only)
            tld: The TLD to combine it with

        Returns:
            AvailabilityResult for the full domain

        Raises:
            QueryError: On network error, timeout, non-2xx status or malformed body
        """
        start_time = time.perf_counter()
        full_domain = f"{term}.{tld.name}"
        self._request_count += 1

        if self._simulation_mode:
            return AvailabilityResult(
                full_domain=full_domain,
                available=self._simulated_availability(full_domain),
                tld=tld,
                response_time_ms=self._elapsed_ms(start_time),
            )

        url = f"{self._base_url}{AVAILABILITY_PATH}?domain={full_domain}"
        payload = await self._get_json(
            AVAILABILITY_PATH, {"domain": full_domain}, url, QueryError
        )

        available = payload.get("available") if isinstance(payload, dict) else None
        if not isinstance(available, bool):
            raise QueryError(
                code=ApiErrorCode.PARSE_ERROR.value,
                message=f"Availability response for {full_domain} has no boolean 'available' field",
                details={"request_url": url, "domain": full_domain},
            )

        return AvailabilityResult(
            full_domain=full_domain,
            available=available,
            tld=tld,
            response_time_ms=self._elapsed_ms(start_time),
        )

    async def _get_json(
        self,
        path: str,
        params: Optional[dict],
        url: str,
        error_cls: type[DomainLookupError],
    ) -> Any:
        """Perform a GET and decode the JSON body, mapping failures to error_cls."""
        client = self._ensure_client()

        try:
            response = await client.get(path, params=params)
        except httpx.TimeoutException:
            raise error_cls(
                code=ApiErrorCode.TIMEOUT.value,
                message=f"Request timed out after {self._timeout}s",
                details={"request_url": url},
            )
        except httpx.HTTPError as e:
            raise error_cls(
                code=ApiErrorCode.NETWORK_ERROR.value,
                message=f"Connection error: {e}",
                details={"request_url": url},
            )

        if not response.is_success:
            raise error_cls(
                code=ApiErrorCode.HTTP_ERROR.value,
                message=f"Unexpected HTTP status: {response.status_code}",
                details={"request_url": url, "http_status_code": response.status_code},
            )

        try:
            return response.json()
        except ValueError as e:
            raise error_cls(
                code=ApiErrorCode.PARSE_ERROR.value,
                message=f"Failed to parse response: {e}",
                details={"request_url": url, "http_status_code": response.status_code},
            )

    def _parse_tld(self, item: Any, url: str) -> Tld:
        if not isinstance(item, dict):
            raise FetchError(
                code=ApiErrorCode.PARSE_ERROR.value,
                message="Domain catalog entry is not an object",
                details={"request_url": url, "entry": repr(item)},
            )

        name = item.get("name")
        if not isinstance(name, str) or not name.strip(".").strip():
            raise FetchError(
                code=ApiErrorCode.PARSE_ERROR.value,
                message="Domain catalog entry has no name",
                details={"request_url": url, "entry": item},
            )

        try:
            kind = TldKind(item.get("type"))
        except ValueError:
            raise FetchError(
                code=ApiErrorCode.PARSE_ERROR.value,
                message=f"Unknown TLD type: {item.get('type')!r}",
                details={"request_url": url, "entry": item},
            )

        return Tld(name=name.strip().strip(".").lower(), kind=kind)

    @staticmethod
    def _simulated_availability(full_domain: str) -> bool:
        digest = hashlib.sha256(full_domain.encode("utf-8")).digest()
        return digest[0] % 3 == 0

    def _elapsed_ms(self, start_time: float) -> float:
        """Calculate elapsed time in milliseconds."""
        return (time.perf_counter() - start_time) * 1000

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None
