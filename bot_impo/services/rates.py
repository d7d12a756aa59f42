"""Fetch the USD "dólar observado" rate (CLP per 1 USD) from mindicador.cl."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Dict

import aiohttp

from bot_impo.errors import ExchangeRateError
from bot_impo.settings import get_settings

logger = logging.getLogger(__name__)

_cache: tuple[float, float] | None = None
_session: aiohttp.ClientSession | None = None


async def _get_session() -> aiohttp.ClientSession:
    global _session
    if _session is None or _session.closed:
        _session = aiohttp.ClientSession()
    return _session


def _parse_dolar(payload: Dict[str, Any]) -> float:
    try:
        value = float(payload["serie"][0]["valor"])
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        raise ExchangeRateError(
            "Formato de respuesta inesperado del servicio de tipo de cambio."
        ) from exc
    if value <= 0:
        raise ExchangeRateError(
            "Formato de respuesta inesperado del servicio de tipo de cambio."
        )
    return value


async def _fetch_payload(url: str, timeout: float) -> Dict[str, Any]:
    sess = await _get_session()
    async with sess.get(url, timeout=aiohttp.ClientTimeout(total=timeout)) as resp:
        resp.raise_for_status()
        return await resp.json(content_type=None)


async def get_dolar_observado(ttl: int | None = None, force_refresh: bool = False) -> float:
    """Return today's CLP per USD rate, cached in-process for ``ttl`` seconds."""
    global _cache
    settings = get_settings()
    ttl = settings.RATES_TTL if ttl is None else ttl
    now = time.time()
    if not force_refresh and _cache is not None and now - _cache[1] < ttl:
        return _cache[0]

    try:
        payload = await _fetch_payload(settings.RATES_URL, settings.HTTP_TIMEOUT)
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
        logger.error("Error fetching exchange rate: %s", exc)
        raise ExchangeRateError() from exc

    rate = _parse_dolar(payload)
    _cache = (rate, now)
    logger.info("USD/CLP rate %.2f", rate)
    return rate


def clear_cache() -> None:
    global _cache
    _cache = None


async def close_rates_session() -> None:
    global _session
    if _session is not None:
        try:
            await _session.close()
        finally:
            _session = None


__all__ = ["get_dolar_observado", "clear_cache", "close_rates_session"]
