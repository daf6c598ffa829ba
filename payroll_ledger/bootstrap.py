from __future__ import annotations

from typing import Optional

from .clock import Clock
from .config import Settings, get_settings
from .events import EventBus, EventLog
from .fund import Fund, Token, TokenFund
from .ledger import PayrollLedger
from .logging import configure_logging, get_logger
from .monitoring import configure_error_monitoring
from .observability import configure_observability
from .storage import LedgerStore

logger = get_logger(__name__)


def configure_runtime(settings: Optional[Settings] = None) -> Settings:
    settings = settings or get_settings()
    configure_logging(settings.log_level, json_logs=settings.json_logs, env=settings.env)
    configure_observability(settings)
    configure_error_monitoring(settings)
    return settings


def build_token_fund(settings: Settings) -> TokenFund:
    """Mint the configured token to the admin and open an empty fund account."""

    token = Token(
        name=settings.token.name,
        symbol=settings.token.symbol,
        total_supply=settings.token.initial_supply,
        owner=settings.admin,
    )
    return TokenFund(token, account=settings.token.fund_account)


def build_ledger(
    settings: Optional[Settings] = None,
    fund: Optional[Fund] = None,
    clock: Optional[Clock] = None,
) -> PayrollLedger:
    """Restore the ledger from its snapshot when one exists, otherwise initialise a new one."""

    settings = settings or get_settings()
    fund = fund or build_token_fund(settings)
    events = EventBus()
    if settings.event_log_path:
        events.subscribe(EventLog(settings.event_log_path))

    if settings.data_path and LedgerStore(settings.data_path).exists():
        state = LedgerStore(settings.data_path).load()
        logger.info("ledger_restored", path=str(settings.data_path), employees=len(state.employees))
        return PayrollLedger.restore(state, fund, clock=clock, events=events)

    logger.info("ledger_initialised", admin=settings.admin, env=settings.env)
    return PayrollLedger(
        admin=settings.admin,
        max_change_working_days=settings.max_change_working_days,
        check_in=settings.check_in,
        check_out=settings.check_out,
        fund=fund,
        clock=clock,
        utc_offset_minutes=settings.utc_offset_minutes,
        events=events,
    )


def save_ledger(ledger: PayrollLedger, settings: Optional[Settings] = None) -> bool:
    settings = settings or get_settings()
    if not settings.data_path:
        return False
    LedgerStore(settings.data_path).save(ledger.state)
    return True
