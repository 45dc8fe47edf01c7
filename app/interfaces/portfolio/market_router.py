"""
FastAPI router for exchange price lookups.

Thin pass-through to the price gateway use cases so the dashboard can
show live prices without talking to the exchange directly.
"""

from fastapi import APIRouter, Depends, Path, Query

from app.application.portfolio.market_data import (
    GetPriceChangeUseCase,
    GetPricesUseCase,
    GetPriceUseCase,
)
from app.interfaces.portfolio.dependencies import (
    get_price_change_use_case,
    get_price_use_case,
    get_prices_use_case,
)
from app.interfaces.portfolio.schemas import (
    SYMBOL_MAX_LEN,
    SYMBOL_MIN_LEN,
    SYMBOL_PATTERN,
    ErrorResponse,
    PriceChangeResponse,
    PriceItem,
    PriceListResponse,
)

UPSTREAM_ERRORS = {502: {"model": ErrorResponse}}

router = APIRouter(prefix="/prices", tags=["market"])

SymbolPath = Path(
    ...,
    min_length=SYMBOL_MIN_LEN,
    max_length=SYMBOL_MAX_LEN,
    pattern=SYMBOL_PATTERN,
)


@router.get(
    "",
    response_model=PriceListResponse,
    responses=UPSTREAM_ERRORS,
    summary="Current prices",
    description="Comma-separated tickers, e.g. ?symbols=BTC,ETH",
)
def get_prices(
    symbols: str = Query(..., min_length=1, max_length=500),
    use_case: GetPricesUseCase = Depends(get_prices_use_case),
) -> PriceListResponse:
    requested = [s.strip() for s in symbols.split(",") if s.strip()]
    return PriceListResponse(
        prices=[PriceItem.model_validate(q) for q in use_case.execute(requested)]
    )


@router.get(
    "/{symbol}",
    response_model=PriceItem,
    responses=UPSTREAM_ERRORS,
    summary="Current price of one asset",
)
def get_price(
    symbol: str = SymbolPath,
    use_case: GetPriceUseCase = Depends(get_price_use_case),
) -> PriceItem:
    return PriceItem.model_validate(use_case.execute(symbol))


@router.get(
    "/{symbol}/24h",
    response_model=PriceChangeResponse,
    responses=UPSTREAM_ERRORS,
    summary="24h statistics of one asset",
)
def get_price_change(
    symbol: str = SymbolPath,
    use_case: GetPriceChangeUseCase = Depends(get_price_change_use_case),
) -> PriceChangeResponse:
    return PriceChangeResponse.model_validate(use_case.execute(symbol))
