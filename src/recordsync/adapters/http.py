"""Source fetching a JSON array of records from an HTTP endpoint."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import Field, PositiveFloat, PositiveInt, StrictStr

from recordsync.config.http_resilience import CacheConfig, RateLimit, ResilienceConfig
from recordsync.config.options import OptionsModel
from recordsync.domain.errors import LoadError
from recordsync.domain.model import ReadinessResult

from ._payload import PayloadError, records_from_json
from .http_resilience import ResilientClient

if TYPE_CHECKING:
    from collections.abc import Callable

    from recordsync.domain.model import RecordSet
    from recordsync.domain.ports import Source, SourceFactory

log = getLogger(__name__)

_DEFAULT_HEADERS = {"Accept": "application/json"}


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class HttpSourceOptions(OptionsModel):
    endpoint: StrictStr
    id_attribute: StrictStr = "id"
    version_attribute: StrictStr | None = None
    headers: dict[str, StrictStr] = Field(default_factory=lambda: dict(_DEFAULT_HEADERS))
    timeout_seconds: PositiveFloat = 30.0
    cache_ttl_seconds: PositiveFloat | None = None
    rate_limit_calls: PositiveInt | None = None
    rate_limit_seconds: PositiveFloat = 1.0


@dataclass(slots=True)
class HttpSource:
    endpoint: str
    id_attribute: str = "id"
    version_attribute: str | None = None
    resilience: ResilienceConfig = field(
        default_factory=lambda: ResilienceConfig(name="http", default_headers=_DEFAULT_HEADERS)
    )
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def load(self) -> RecordSet:
        return asyncio.run(self._load_async())

    def setup(self) -> ReadinessResult:
        result = ReadinessResult()
        try:
            status = asyncio.run(self._probe_async())
        except httpx.HTTPError as exc:
            result.add_error(f"Endpoint {self.endpoint} is not reachable: {exc}")
            return result
        if status == httpx.codes.OK:
            result.add_notice(f"Endpoint {self.endpoint} is reachable")
        else:
            result.add_error(f"Endpoint {self.endpoint} responded with status {status}")
        return result

    async def _probe_async(self) -> int:
        async with self.client_factory(self.resilience) as client:
            response = await client.get(self.endpoint)
        return response.status_code

    async def _load_async(self) -> RecordSet:
        async with self.client_factory(self.resilience) as client:
            response = await client.get(self.endpoint)
        if response.status_code != httpx.codes.OK:
            raise LoadError(
                f"Request to {self.endpoint} failed with status {response.status_code}"
            )
        try:
            records = records_from_json(
                response.content,
                id_attribute=self.id_attribute,
                version_attribute=self.version_attribute,
            )
        except PayloadError as exc:
            raise LoadError(f"Invalid response from {self.endpoint}: {exc}") from exc
        if records.is_empty():
            raise LoadError(f"Response from {self.endpoint} contains no records")
        log.debug("Fetched %d records from %s", len(records), self.endpoint)
        return records


class HttpSourceFactory:
    options_model = HttpSourceOptions

    def create(self, options: HttpSourceOptions) -> HttpSource:
        cache = (
            CacheConfig(default_ttl_seconds=options.cache_ttl_seconds)
            if options.cache_ttl_seconds is not None
            else None
        )
        ratelimit = (
            RateLimit(options.rate_limit_calls, options.rate_limit_seconds)
            if options.rate_limit_calls is not None
            else None
        )
        return HttpSource(
            endpoint=options.endpoint,
            id_attribute=options.id_attribute,
            version_attribute=options.version_attribute,
            resilience=ResilienceConfig(
                name="http",
                timeout_seconds=options.timeout_seconds,
                ratelimit=ratelimit,
                cache=cache,
                default_headers=dict(options.headers),
            ),
        )


if TYPE_CHECKING:
    _source_check: Source = HttpSource(endpoint="https://example.com/records.json")
    _factory_check: SourceFactory[HttpSourceOptions] = HttpSourceFactory()
