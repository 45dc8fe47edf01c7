"""
FastAPI routers for the portfolio bounded context.

All routes delegate to use cases. No business logic here.
Input validation is handled by Pydantic schemas.
Error mapping is handled by centralized error handlers.
"""

from fastapi import APIRouter, Depends, Path, Query

from app.application.portfolio.audit_ledger import AuditLedgerUseCase
from app.application.portfolio.dtos import (
    DepositCommand,
    ListTransactionsQuery,
    TradeCommand,
    WithdrawCommand,
)
from app.application.portfolio.execute_trade import BuyUseCase, SellUseCase
from app.application.portfolio.get_portfolio_summary import GetPortfolioSummaryUseCase
from app.application.portfolio.list_ledger import (
    ListAssetsUseCase,
    ListTransactionsUseCase,
)
from app.application.portfolio.manage_wallet import (
    DepositUseCase,
    GetBalanceUseCase,
    WithdrawUseCase,
)
from app.interfaces.portfolio.dependencies import (
    get_audit_ledger_use_case,
    get_balance_use_case,
    get_buy_use_case,
    get_deposit_use_case,
    get_list_assets_use_case,
    get_list_transactions_use_case,
    get_portfolio_summary_use_case,
    get_sell_use_case,
    get_withdraw_use_case,
)
from app.interfaces.portfolio.schemas import (
    AmountRequest,
    AssetItem,
    AssetListResponse,
    BalanceResponse,
    ErrorResponse,
    LedgerAuditResponse,
    LedgerMutationResponse,
    PortfolioSummaryResponse,
    SYMBOL_MAX_LEN,
    SYMBOL_MIN_LEN,
    SYMBOL_PATTERN,
    TradeRequest,
    TransactionItem,
    TransactionListResponse,
)

LEDGER_ERRORS = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
}

router = APIRouter(tags=["portfolio"])


# ── Wallet ───────────────────────────────────────────────────────────


@router.get(
    "/wallet/balance",
    response_model=BalanceResponse,
    summary="Get wallet balance",
    description="Current USDT balance; 0 before the first deposit.",
)
def get_balance(
    use_case: GetBalanceUseCase = Depends(get_balance_use_case),
) -> BalanceResponse:
    return BalanceResponse(balance=use_case.execute().balance)


@router.post(
    "/wallet/deposit",
    response_model=LedgerMutationResponse,
    responses=LEDGER_ERRORS,
    summary="Deposit USDT",
)
def deposit(
    request: AmountRequest,
    use_case: DepositUseCase = Depends(get_deposit_use_case),
) -> LedgerMutationResponse:
    """Credit the wallet and record a deposit transaction."""
    result = use_case.execute(DepositCommand(amount=request.amount))
    return LedgerMutationResponse.model_validate(result)


@router.post(
    "/wallet/withdraw",
    response_model=LedgerMutationResponse,
    responses=LEDGER_ERRORS,
    summary="Withdraw USDT",
)
def withdraw(
    request: AmountRequest,
    use_case: WithdrawUseCase = Depends(get_withdraw_use_case),
) -> LedgerMutationResponse:
    """Debit the wallet and record a withdraw transaction."""
    result = use_case.execute(WithdrawCommand(amount=request.amount))
    return LedgerMutationResponse.model_validate(result)


# ── Trading ──────────────────────────────────────────────────────────


@router.post(
    "/trading/buy",
    response_model=LedgerMutationResponse,
    responses={**LEDGER_ERRORS, 502: {"model": ErrorResponse}},
    summary="Buy an asset with USDT",
    description="Trades at the given price, or at the market price when omitted.",
)
def buy(
    request: TradeRequest,
    use_case: BuyUseCase = Depends(get_buy_use_case),
) -> LedgerMutationResponse:
    command = TradeCommand(
        symbol=request.symbol, quantity=request.quantity, price=request.price
    )
    return LedgerMutationResponse.model_validate(use_case.execute(command))


@router.post(
    "/trading/sell",
    response_model=LedgerMutationResponse,
    responses={**LEDGER_ERRORS, 502: {"model": ErrorResponse}},
    summary="Sell an asset for USDT",
    description="Trades at the given price, or at the market price when omitted.",
)
def sell(
    request: TradeRequest,
    use_case: SellUseCase = Depends(get_sell_use_case),
) -> LedgerMutationResponse:
    command = TradeCommand(
        symbol=request.symbol, quantity=request.quantity, price=request.price
    )
    return LedgerMutationResponse.model_validate(use_case.execute(command))


# ── Ledger reads ─────────────────────────────────────────────────────


@router.get(
    "/assets",
    response_model=AssetListResponse,
    summary="List open positions",
)
def list_assets(
    use_case: ListAssetsUseCase = Depends(get_list_assets_use_case),
) -> AssetListResponse:
    return AssetListResponse(
        assets=[AssetItem.model_validate(a) for a in use_case.execute()]
    )


@router.get(
    "/transactions",
    response_model=TransactionListResponse,
    summary="List transactions",
    description="Transaction log, newest first. Omit limit to get everything.",
)
def list_transactions(
    limit: int | None = Query(default=None, ge=1, le=1000),
    use_case: ListTransactionsUseCase = Depends(get_list_transactions_use_case),
) -> TransactionListResponse:
    results = use_case.execute(ListTransactionsQuery(limit=limit))
    return TransactionListResponse(
        transactions=[TransactionItem.model_validate(r) for r in results]
    )


@router.get(
    "/transactions/{symbol}",
    response_model=TransactionListResponse,
    responses={422: {"model": ErrorResponse}},
    summary="List transactions for one asset",
)
def list_transactions_by_symbol(
    symbol: str = Path(
        ...,
        min_length=SYMBOL_MIN_LEN,
        max_length=SYMBOL_MAX_LEN,
        pattern=SYMBOL_PATTERN,
    ),
    use_case: ListTransactionsUseCase = Depends(get_list_transactions_use_case),
) -> TransactionListResponse:
    results = use_case.execute(ListTransactionsQuery(symbol=symbol))
    return TransactionListResponse(
        transactions=[TransactionItem.model_validate(r) for r in results]
    )


@router.get(
    "/ledger/audit",
    response_model=LedgerAuditResponse,
    summary="Reconcile the ledger",
    description="Replays the transaction log and compares it with stored balances.",
)
def audit_ledger(
    use_case: AuditLedgerUseCase = Depends(get_audit_ledger_use_case),
) -> LedgerAuditResponse:
    return LedgerAuditResponse.model_validate(use_case.execute())


@router.get(
    "/portfolio/summary",
    response_model=PortfolioSummaryResponse,
    summary="Portfolio summary",
    description="Holdings at market value with unrealized profit and loss.",
)
def portfolio_summary(
    use_case: GetPortfolioSummaryUseCase = Depends(get_portfolio_summary_use_case),
) -> PortfolioSummaryResponse:
    return PortfolioSummaryResponse.model_validate(use_case.execute())
