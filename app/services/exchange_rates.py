# app/services/exchange_rates.py
"""
ARS/USD exchange rates: lookup, conversion and refresh.

Rates are stored as ARS per 1 USD. The newest active row is the current
rate; it is cached in memory for ``ttl_seconds`` and the cache is cleared
on every rate write made through this service.
"""
import logging
import time
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Union

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import InvalidCurrencyError, InvalidRateError, NoRateConfiguredError
from app.crud import exchange_rate as rate_crud
from app.crud import automatic_debit as debit_crud
from app.crud import recurring as recurring_crud
from app.models.exchange_rate import ExchangeRate, RateSource
from app.models.expense import Currency
from app.utils.dates import today_in_tz, to_date

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

# BCRA publishes a single value; the buy side is taken 0.5% below it
BCRA_BUY_FACTOR = Decimal("0.995")

RateLike = Union[ExchangeRate, Decimal, float, int, str]


def to_money(value: Any) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass
class CurrencyAmounts:
    amount_ars: Decimal
    amount_usd: Decimal
    rate_used: Decimal
    rate_date: Optional[date] = None


@dataclass
class RateCache:
    """Single cached value with an explicit time-to-live."""
    ttl: float
    value: Optional[ExchangeRate] = None
    last_fetched_at: Optional[float] = None

    def get(self, now: float) -> Optional[ExchangeRate]:
        if self.value is None or self.last_fetched_at is None:
            return None
        if now - self.last_fetched_at >= self.ttl:
            return None
        return self.value

    def put(self, value: ExchangeRate, now: float) -> None:
        self.value = value
        self.last_fetched_at = now

    def clear(self) -> None:
        self.value = None
        self.last_fetched_at = None


class ExchangeRateService:
    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        fallback_api_url: Optional[str] = None,
        fallback_token: Optional[str] = None,
    ):
        ttl = settings.EXCHANGE_RATE_CACHE_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        self.cache = RateCache(ttl=ttl)
        self.clock = clock
        self.api_url = api_url or settings.EXCHANGE_RATE_API_URL
        self.fallback_api_url = fallback_api_url or settings.EXCHANGE_RATE_FALLBACK_API_URL
        self.fallback_token = fallback_token or settings.BCRA_API_TOKEN
        self.timeout = timeout or settings.EXCHANGE_RATE_HTTP_TIMEOUT
        self.transport = transport

    def invalidate_cache(self) -> None:
        self.cache.clear()
        logger.debug("Exchange rate cache invalidated")

    # ------------------------------------------------------------
    # LOOKUPS
    # ------------------------------------------------------------
    async def get_current_rate(self, db: AsyncSession) -> ExchangeRate:
        cached = self.cache.get(self.clock())
        if cached is not None:
            logger.debug("Using cached exchange rate")
            return cached

        rate = await rate_crud.get_latest_active(db)
        if rate is None:
            logger.error("No exchange rate found in the database")
            raise NoRateConfiguredError()

        self.cache.put(rate, self.clock())
        logger.debug(f"Exchange rate loaded from database: date={rate.date} sell={rate.sell_rate}")
        return rate

    async def get_rate_for_date(self, db: AsyncSession, rate_date: Union[date, str]) -> ExchangeRate:
        """Exact match, else the closest earlier active rate, else the current rate."""
        target = to_date(rate_date)
        rate = await rate_crud.get_by_date(target, db)
        if rate is not None:
            return rate

        rate = await rate_crud.get_closest_before(target, db)
        if rate is None:
            logger.warning(f"No historical rate on or before {target}, using current rate")
            return await self.get_current_rate(db)

        logger.debug(f"Using closest earlier rate {rate.date} for {target}")
        return rate

    async def get_history(
        self,
        db: AsyncSession,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        limit: int = 30,
    ) -> List[ExchangeRate]:
        return await rate_crud.list_rates(db, start_date=date_from, end_date=date_to, limit=limit)

    # ------------------------------------------------------------
    # CONVERSION
    # ------------------------------------------------------------
    @staticmethod
    def _rate_value(rate: RateLike, side: str) -> Decimal:
        if isinstance(rate, (Decimal, float, int, str)):
            raw = rate
        elif side == "buy":
            raw = rate.buy_rate
        else:
            raw = rate.sell_rate
        try:
            value = Decimal(str(raw))
        except InvalidOperation:
            raise InvalidRateError(f"Exchange rate is not numeric: {raw!r}")
        if value <= 0:
            raise InvalidRateError(f"Exchange rate must be greater than zero, got {value}")
        return value

    def convert_ars_to_usd(self, amount: Any, rate: RateLike, side: str = "sell") -> Decimal:
        return to_money(Decimal(str(amount)) / self._rate_value(rate, side))

    def convert_usd_to_ars(self, amount: Any, rate: RateLike, side: str = "buy") -> Decimal:
        return to_money(Decimal(str(amount)) * self._rate_value(rate, side))

    async def calculate_both_amounts(
        self,
        amount: Any,
        origin_currency: Union[Currency, str],
        db: Optional[AsyncSession] = None,
        rate: Optional[RateLike] = None,
    ) -> CurrencyAmounts:
        """ARS and USD amounts for ``amount`` expressed in ``origin_currency``."""
        try:
            currency = Currency(origin_currency)
        except ValueError:
            raise InvalidCurrencyError(str(origin_currency))

        if rate is None:
            if db is None:
                raise NoRateConfiguredError("No exchange rate supplied and no session to look one up")
            rate = await self.get_current_rate(db)

        if currency == Currency.ARS:
            amount_ars = to_money(amount)
            amount_usd = self.convert_ars_to_usd(amount, rate)
        else:
            amount_usd = to_money(amount)
            amount_ars = self.convert_usd_to_ars(amount, rate)

        return CurrencyAmounts(
            amount_ars=amount_ars,
            amount_usd=amount_usd,
            rate_used=self._rate_value(rate, "sell"),
            rate_date=getattr(rate, "date", None),
        )

    # ------------------------------------------------------------
    # WRITES
    # ------------------------------------------------------------
    async def set_manual_rate(
        self,
        db: AsyncSession,
        rate_date: Union[date, str],
        buy_rate: Any,
        sell_rate: Any,
        notes: Optional[str] = None,
        source: RateSource = RateSource.manual,
    ) -> ExchangeRate:
        buy = Decimal(str(buy_rate))
        sell = Decimal(str(sell_rate))
        if buy <= 0 or sell <= 0:
            raise InvalidRateError("Buy and sell rates must be greater than zero")
        if sell < buy:
            raise InvalidRateError("Sell rate must be greater than or equal to the buy rate")

        target = to_date(rate_date)
        rate = await rate_crud.upsert_rate(
            target,
            {
                "buy_rate": to_money(buy),
                "sell_rate": to_money(sell),
                "source": source,
                "notes": notes,
            },
            db,
        )
        self.invalidate_cache()
        logger.info(f"Exchange rate stored for {target}: buy={rate.buy_rate} sell={rate.sell_rate} source={source.value}")
        return rate

    # ------------------------------------------------------------
    # FEEDS
    # ------------------------------------------------------------
    async def _fetch_dolar_api(self, client: httpx.AsyncClient) -> Tuple[Any, Any]:
        response = await client.get(self.api_url)
        response.raise_for_status()
        payload = response.json()
        return payload["compra"], payload["venta"]

    async def _fetch_bcra(self, client: httpx.AsyncClient) -> Tuple[Any, Any]:
        # Official series of {"d": date, "v": value}; only a single value is published
        headers = {"Authorization": f"Bearer {self.fallback_token}"} if self.fallback_token else {}
        response = await client.get(self.fallback_api_url, headers=headers)
        response.raise_for_status()
        series = response.json()
        if not isinstance(series, list) or not series:
            raise ValueError("BCRA feed returned no data")
        sell = Decimal(str(series[-1]["v"]))
        return to_money(sell * BCRA_BUY_FACTOR), sell

    def _feed_order(self, source: str) -> List[str]:
        if source == "auto":
            return list(FEEDS)
        if source not in FEEDS:
            raise ValueError(f"Unknown exchange rate feed: '{source}'")
        return [source]

    async def refresh_from_api(
        self,
        db: AsyncSession,
        today: Optional[date] = None,
        source: str = "auto",
    ) -> Optional[ExchangeRate]:
        """
        Store today's official rate from an external feed.

        ``source`` is ``"dolarapi"``, ``"bcra"`` or ``"auto"``; auto tries
        DolarAPI first and falls back to BCRA. Returns the existing row
        untouched when a feed rate was already stored today, and None when
        no feed can be reached or parsed.
        """
        feeds = self._feed_order(source)
        today = today or today_in_tz()
        existing = await rate_crud.get_by_date(today, db)
        if existing is not None and existing.source != RateSource.manual:
            logger.info(f"Exchange rate for {today} already refreshed from the feed")
            return existing

        for name in feeds:
            fetch, rate_source = FEEDS[name]
            try:
                async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                    buy, sell = await fetch(self, client)
            except (httpx.HTTPError, ValueError, KeyError, TypeError, IndexError, InvalidOperation) as e:
                logger.warning(f"Exchange rate feed '{name}' unavailable: {str(e)}")
                continue

            try:
                return await self.set_manual_rate(
                    db,
                    today,
                    buy,
                    sell,
                    notes=f"Refreshed from the {name} rate feed",
                    source=rate_source,
                )
            except (InvalidRateError, InvalidOperation) as e:
                logger.warning(f"Exchange rate feed '{name}' returned an unusable pair ({buy}, {sell}): {str(e)}")

        logger.warning("No exchange rate feed available, keeping last stored rate")
        return None

    async def refresh_source_amounts(self, db: AsyncSession) -> int:
        """
        Recompute dual-currency amounts on active recurring sources and debits.

        A source that cannot be converted keeps its previous amounts and does
        not stop the others. Returns how many sources were updated.
        """
        rate = await self.get_current_rate(db)
        sources = list(await recurring_crud.find_active(db)) + list(await debit_crud.find_active(db))
        refreshed = 0
        for source in sources:
            try:
                amounts = await self.calculate_both_amounts(source.amount, source.origin_currency, rate=rate)
            except Exception as e:
                logger.error(f"Could not refresh amounts of {type(source).__name__} {source.id}: {str(e)}")
                continue
            source.amount_ars = amounts.amount_ars
            source.amount_usd = amounts.amount_usd
            source.reference_rate = amounts.rate_used
            db.add(source)
            refreshed += 1
        await db.flush()
        logger.info(f"Refreshed currency amounts on {refreshed}/{len(sources)} recurring sources using rate {rate.date}")
        return refreshed


# Feed name -> (fetcher, source stamped on the stored row), in fallback order
FEEDS: Dict[str, Tuple[Callable[..., Awaitable[Tuple[Any, Any]]], RateSource]] = {
    "dolarapi": (ExchangeRateService._fetch_dolar_api, RateSource.api_dolar_api),
    "bcra": (ExchangeRateService._fetch_bcra, RateSource.api_bcra),
}
