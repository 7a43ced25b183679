"""
TLD Catalog - the session-wide list of known TLDs.

The catalog is fetched once from the lookup API, sorted by name and frozen.
Search runs read it; nothing mutates it after load.
"""

from typing import Iterable, Iterator, Optional

from .api_client import DomainApiClient
from .audit_logger import AuditLogger
from .enums import LogLevel, TldKind
from .exceptions import FetchError
from .models import Tld


class TldCatalog:
    """
    Immutable-per-session list of TLDs, sorted by name ascending.

    load() performs the single remote fetch; later calls return the cached
    sequence. A failed load leaves the catalog empty so the caller may try
    again.
    """

    def __init__(
        self,
        client: Optional[DomainApiClient] = None,
        logger: Optional[AuditLogger] = None,
    ) -> None:
        self._client = client
        self._logger = logger
        self._tlds: Optional[tuple[Tld, ...]] = None

    @classmethod
    def from_tlds(cls, tlds: Iterable[Tld]) -> "TldCatalog":
        """Build an already-loaded catalog from static data."""
        catalog = cls()
        catalog._tlds = cls._normalize(tlds)
        return catalog

    async def load(self) -> tuple[Tld, ...]:
        """
        Load the catalog from the remote API.

        Returns:
            Tuple of Tld sorted by name ascending, without duplicate names

        Raises:
            FetchError: If the remote call errors, times out or returns bad data
        """
        if self._tlds is not None:
            return self._tlds

        if self._client is None:
            raise FetchError(
                code="no_client",
                message="TLD catalog has no API client to load from",
            )

        try:
            fetched = await self._client.get_domains()
        except FetchError as e:
            if self._logger:
                self._logger.log_error(
                    "TldCatalog",
                    f"Catalog load failed: {e.message}",
                    error=e,
                    request_url=e.details.get("request_url"),
                    response_status_code=e.details.get("http_status_code"),
                )
            raise

        self._tlds = self._normalize(fetched)

        if self._logger:
            self._logger.log(
                LogLevel.INFO,
                "TldCatalog",
                f"Loaded {len(self._tlds)} TLDs",
                {
                    "generic": len(self.by_kind(TldKind.GENERIC)),
                    "country_code": len(self.by_kind(TldKind.COUNTRY_CODE)),
                },
            )

        return self._tlds

    @staticmethod
    def _normalize(tlds: Iterable[Tld]) -> tuple[Tld, ...]:
        # First occurrence of a name wins; sort is stable
        seen: set[str] = set()
        unique = []
        for tld in tlds:
            if tld.name in seen:
                continue
            seen.add(tld.name)
            unique.append(tld)
        return tuple(sorted(unique, key=lambda t: t.name))

    @property
    def loaded(self) -> bool:
        return self._tlds is not None

    @property
    def tlds(self) -> tuple[Tld, ...]:
        """The loaded TLDs. Raises RuntimeError before load()."""
        if self._tlds is None:
            raise RuntimeError("TLD catalog has not been loaded")
        return self._tlds

    def by_kind(self, kind: TldKind) -> tuple[Tld, ...]:
        """TLDs of one kind, in catalog order."""
        return tuple(t for t in self.tlds if t.kind == kind)

    def get(self, name: str) -> Optional[Tld]:
        name = name.lower().lstrip(".")
        for tld in self.tlds:
            if tld.name == name:
                return tld
        return None

    def __len__(self) -> int:
        return len(self.tlds)

    def __iter__(self) -> Iterator[Tld]:
        return iter(self.tlds)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Tld):
            return item in self.tlds
        if isinstance(item, str):
            return self.get(item) is not None
        return False
