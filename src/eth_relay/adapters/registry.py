"""
Relayer Registry

Resolves, per chain, the first configured relay adapter that supports it and
caches the result for the lifetime of the registry instance.
"""

import asyncio
import inspect
import logging
from typing import Awaitable, Dict, List, Optional, Sequence, Union

from ..metatx.signers import Signer
from .bases import Relayer, RelayerBuilder

logger = logging.getLogger(__name__)


BuilderLike = Union[RelayerBuilder, Awaitable[RelayerBuilder]]


class RelayerRegistry:
    """
    Registry picking and caching one relay adapter per chain.

    Builders are probed in list order. Every candidate is built before it is
    asked ``supports_chain``, so builders should be cheap and free of side
    effects. Candidates whose construction raises are skipped. A candidate
    whose ``supports_chain`` raises is skipped too, but a later candidate
    picked in that same pass is returned without being cached, so the next
    call probes the failed one again.

    The registry never closes adapters: a builder may hand out one shared
    instance for several chains, so adapter lifecycle stays with the caller.

    The chain cache is owned by this instance, is filled lazily and never
    evicted. Concurrent first resolutions of one chain may probe redundantly;
    the last write wins.

    Example:
        registry = RelayerRegistry([
            GelatoRelayer.builder(GelatoConfig(api_key="...")),
            ITXRelayer.builder(itx_config),
        ])
        relayer = await registry.resolve(137, signer)
        if relayer is None:
            ...  # no relay route for this chain
    """

    def __init__(self, builders: Sequence[BuilderLike]):
        """
        Args:
            builders: Ordered adapter builders. An entry may also be an
                awaitable resolving to a builder; it is awaited on first use.
        """
        self._builders: List[BuilderLike] = list(builders)
        self._cache: Dict[int, Relayer] = {}

    async def _builder_at(self, index: int) -> RelayerBuilder:
        builder = self._builders[index]
        if inspect.isawaitable(builder):
            # a coroutine can only be awaited once; a future can be shared
            # by concurrent resolutions
            if not isinstance(builder, asyncio.Future):
                builder = asyncio.ensure_future(builder)
                self._builders[index] = builder
            builder = await builder
            self._builders[index] = builder
        return builder

    async def resolve(self, chain_id: int, signer: Signer) -> Optional[Relayer]:
        """
        Return the relay adapter for ``chain_id``.

        A cached adapter is returned without re-probing. Otherwise each
        builder is materialized in order and the first adapter reporting
        support is returned. It is cached unless an earlier candidate's
        ``supports_chain`` raised during this pass.

        Returns:
            Optional[Relayer]: ``None`` when no configured adapter supports
            the chain. This is not an error.
        """
        cached = self._cache.get(chain_id)
        if cached is not None:
            return cached

        probe_failed = False
        for index in range(len(self._builders)):
            try:
                builder = await self._builder_at(index)
                relayer = await builder(chain_id, signer)
            except Exception:
                logger.warning(
                    "Relayer candidate %d could not be built for chain %s, trying next",
                    index, chain_id, exc_info=True,
                )
                continue

            try:
                supported = await relayer.supports_chain(chain_id)
            except Exception:
                logger.warning(
                    "Relayer candidate %d failed to report support for chain %s, trying next",
                    index, chain_id, exc_info=True,
                )
                probe_failed = True
                continue

            if supported:
                if probe_failed:
                    logger.info(
                        "Using %s for chain %s without caching it", type(relayer).__name__, chain_id
                    )
                else:
                    logger.debug("Resolved %s for chain %s", type(relayer).__name__, chain_id)
                    self._cache[chain_id] = relayer
                return relayer

        logger.info("No relayer supports chain %s", chain_id)
        return None

    def cached_chains(self) -> List[int]:
        """Chain ids resolved so far."""
        return list(self._cache)
