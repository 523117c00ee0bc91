"""Index resolution - turns index names and patterns into SQL tables.

The resolver asks the cluster for the mappings behind a name, applies the
single-table rules and hands back either a Catalog (one requested name) or
a sorted list of tables (wildcard listing).

Rules, applied to every concrete index in the answer:
1. Internal indices (name starts with the internal prefix) are not found
2. The ``_default_`` template type is ignored
3. No remaining type -> invalid
4. More than one remaining type -> invalid
5. Exactly one type -> its fields become the table's columns
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable

from .catalog.catalog import Catalog, FilteredCatalog, IndexFilter, PreloadedCatalog, apply_filter
from .catalog.types import EsIndex, GetIndexResult, Invalid, NotFound, Valid
from .config import Config, ResolverConfig
from .mapping.translator import MappingError, from_es
from .mapping.types import DataType
from .metadata.base import IndexMetadataClient
from .metadata.http import HttpIndexMetadataClient
from .telemetry.emitter import TelemetryEmitter
from .telemetry.events import EventOutcome, Operation, ResolutionEvent


logger = logging.getLogger(__name__)

Translator = Callable[[dict[str, Any]], dict[str, DataType]]


def validate_index(
    concrete_index: str,
    index_or_alias: str,
    types: dict[str, dict[str, Any]],
    config: ResolverConfig | None = None,
    translator: Translator = from_es,
) -> GetIndexResult:
    """
    Check that a concrete index can be exposed as a single table.

    Args:
        concrete_index: Name of the concrete index the mappings belong to
        index_or_alias: Name the table is exposed under
        types: Type name -> raw mapping, as returned by the cluster
        config: Internal prefix and default type name
        translator: Turns the single type's mapping into columns

    Returns:
        Valid, Invalid or NotFound for ``index_or_alias``
    """
    config = config or ResolverConfig()

    if concrete_index.startswith(config.internal_index_prefix):
        return NotFound(index_or_alias)

    # The default mapping is merged into every real type, so each type
    # already holds all of its fields
    type_names = sorted(name for name in types if name != config.default_type_name)

    if not type_names:
        return Invalid(f"[{index_or_alias}] doesn't have any types so it is incompatible with sql")
    if len(type_names) > 1:
        return Invalid(
            f"[{index_or_alias}] contains more than one type [{', '.join(type_names)}] "
            f"so it is incompatible with sql"
        )

    try:
        columns = translator(types[type_names[0]])
    except MappingError as e:
        return Invalid(f"[{index_or_alias}] {e} so it is incompatible with sql")

    return Valid(EsIndex(index_or_alias, columns))


@dataclass
class IndexResolver:
    """
    Resolves index names against cluster metadata.

    Holds no mutable state: concurrent calls are independent, and every
    call builds its results from scratch.
    """
    client: IndexMetadataClient
    catalog_filter: IndexFilter | None = None
    config: ResolverConfig = field(default_factory=ResolverConfig)
    telemetry: TelemetryEmitter | None = None
    translator: Translator = from_es

    async def resolve_one(self, name: str) -> Catalog:
        """
        Resolve a single index or alias name into a Catalog.

        Wildcards are not expected here. The entry is keyed by the
        requested name, never by the concrete index behind an alias:
        a caller authorized for the alias only must keep querying
        through the alias.

        Raises:
            Whatever the metadata client raises, unchanged
        """
        start = time.perf_counter()
        outcome = EventOutcome.SUCCESS
        error_message: str | None = None
        results: dict[str, GetIndexResult] = {}

        try:
            mappings = await self.client.request_index_metadata([name])

            if len(mappings) > 1:
                results[name] = Invalid(
                    f"[{name}] is an alias pointing to more than one index "
                    f"which is currently incompatible with sql"
                )
            elif len(mappings) == 1:
                concrete_index, types = next(iter(mappings.items()))
                result = self._validate(concrete_index, name, types)
                # Hidden indices get no entry at all; lookup reports them missing
                if not isinstance(result, NotFound):
                    results[name] = result
            else:
                logger.debug(f"No index matched [{name}]")

            catalog: Catalog = PreloadedCatalog(results)
            if self.catalog_filter is not None:
                catalog = FilteredCatalog(catalog, self.catalog_filter)
            return catalog

        except Exception as e:
            outcome = EventOutcome.ERROR
            error_message = str(e)
            logger.warning(f"Index metadata request for [{name}] failed: {e}")
            raise

        finally:
            self._emit_telemetry(
                operation=Operation.RESOLVE_ONE,
                names=[name],
                outcome=outcome,
                start=start,
                error_message=error_message,
                results=list(results.values()),
            )

    async def resolve_many(self, *patterns: str) -> list[EsIndex]:
        """
        Discover every valid table matching one or more patterns.

        Tables are named after their concrete index (the caller already
        sees concrete names through wildcard expansion) and returned
        sorted by name. Invalid indices, internal indices and anything the
        filter hides are left out.

        Raises:
            Whatever the metadata client raises, unchanged
        """
        start = time.perf_counter()
        outcome = EventOutcome.SUCCESS
        error_message: str | None = None
        results: dict[str, GetIndexResult] = {}
        indices: list[EsIndex] = []

        try:
            mappings = await self.client.request_index_metadata(list(patterns))

            # Keyed by concrete name, so an index matched by several
            # patterns is validated once
            for concrete_index, types in mappings.items():
                results[concrete_index] = self._validate(concrete_index, concrete_index, types)

            for result in results.values():
                if not isinstance(result, Valid):
                    continue
                if self.catalog_filter is not None:
                    result = apply_filter(self.catalog_filter, result)
                    if not isinstance(result, Valid):
                        continue
                indices.append(result.index)

            indices.sort(key=lambda index: index.name)
            logger.debug(f"Patterns {list(patterns)} matched {len(mappings)} indices, {len(indices)} usable")
            return indices

        except Exception as e:
            outcome = EventOutcome.ERROR
            error_message = str(e)
            logger.warning(f"Index metadata request for {list(patterns)} failed: {e}")
            raise

        finally:
            self._emit_telemetry(
                operation=Operation.RESOLVE_MANY,
                names=list(patterns),
                outcome=outcome,
                start=start,
                error_message=error_message,
                results=list(results.values()),
                metadata={"returned": len(indices)},
            )

    async def close(self) -> None:
        """Release the metadata client."""
        await self.client.close()

    def _validate(
        self,
        concrete_index: str,
        index_or_alias: str,
        types: dict[str, dict[str, Any]],
    ) -> GetIndexResult:
        return validate_index(concrete_index, index_or_alias, types, self.config, self.translator)

    def _emit_telemetry(
        self,
        operation: Operation,
        names: list[str],
        outcome: EventOutcome,
        start: float,
        error_message: str | None,
        results: list[GetIndexResult],
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """Emit a resolution event (non-blocking, never raises into the caller)."""
        if self.telemetry is None:
            return

        latency = (time.perf_counter() - start) * 1000
        event = ResolutionEvent.create(
            operation=operation,
            names=names,
            outcome=outcome,
            latency_ms=latency,
            error_message=error_message,
            valid_count=sum(1 for r in results if isinstance(r, Valid)),
            invalid_count=sum(1 for r in results if isinstance(r, Invalid)),
            metadata=metadata or {},
        )
        try:
            self.telemetry.emit(event)
        except Exception as e:
            logger.error(f"Failed to emit resolution telemetry: {e}")


def create_resolver(
    config: Config | None = None,
    client: IndexMetadataClient | None = None,
    catalog_filter: IndexFilter | None = None,
    telemetry: TelemetryEmitter | None = None,
) -> IndexResolver:
    """
    Build a resolver from configuration.

    Without an explicit client, an HTTP client for ``config.cluster`` is
    used. With telemetry enabled in config and no emitter given, a new
    emitter is created; the caller is responsible for starting it.
    """
    config = config or Config()

    if client is None:
        client = HttpIndexMetadataClient(config=config.cluster)

    if telemetry is None and config.telemetry.enabled:
        telemetry = TelemetryEmitter(max_queue_size=config.telemetry.max_queue_size)

    return IndexResolver(
        client=client,
        catalog_filter=catalog_filter,
        config=config.resolver,
        telemetry=telemetry,
    )
