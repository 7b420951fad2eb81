"""
Balance report.

Builds a summary of account state (balance, unrealised PnL, depth, position
counts) and submits it to a dashboard endpoint via HTTP POST.
"""

import logging
import time
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..config.loader import ReportingConfig
from ..exceptions import ReportingError
from ..logic.depth import get_depth_percent_for_all_positions
from ..logic.pnl import get_unrealised_pnl, get_unrealised_pnl_pct
from ..utils.numbers import is_number

if TYPE_CHECKING:
    from ..state.store import AccountStateStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BalanceUpdateEventData:
    """Account figures submitted with each balance report."""

    balance: float
    balance_symbol: str
    upnl_value: float
    upnl_percent: float
    upnl_balance: float
    depth_percent: float
    leader_count: int
    hedge_count: int


@dataclass(frozen=True)
class BalanceUpdateEvent:
    update_data: BalanceUpdateEventData
    account_key: str
    timestamp: int
    view_tags: str  # Comma separated, restricts visibility in the dashboard

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def build_balance_update(
    store: 'AccountStateStore',
    quote_balance_asset: Optional[str] = None,
) -> BalanceUpdateEventData:
    """
    Build balance report figures from the store.

    Args:
        store: Account state store.
        quote_balance_asset: Quote asset name (defaults to the store's config).

    Returns:
        BalanceUpdateEventData.

    Raises:
        ZeroBalanceError: If the wallet balance is zero.
    """
    quote_balance_asset = quote_balance_asset or store.config.quote_asset
    total_positions = store.get_total_active_positions()
    wallet_balance = store.get_wallet_balance()
    positions = store.get_all_positions()

    upnl_value = get_unrealised_pnl(positions)
    return BalanceUpdateEventData(
        balance=wallet_balance,
        balance_symbol=quote_balance_asset,
        upnl_value=upnl_value,
        upnl_percent=get_unrealised_pnl_pct(positions, wallet_balance),
        upnl_balance=wallet_balance + upnl_value,
        depth_percent=get_depth_percent_for_all_positions(
            positions,
            wallet_balance,
            store.get_symbol_leverage_cache(),
            quote_balance_asset,
            store.config.default_leverage,
        ),
        leader_count=total_positions.total,
        hedge_count=total_positions.total_hedged,
    )


class BalanceReporter:
    """Submits balance reports to an HTTP endpoint."""

    def __init__(self, config: ReportingConfig, session: Optional[requests.Session] = None):
        """
        Initialize balance reporter.

        Args:
            config: Reporting configuration (url, timeout, retries, view tags).
            session: Optional pre-configured requests session.
        """
        if not config.url:
            raise ValueError("Reporting URL is not configured")
        self.config = config
        self.session = session or self._create_session()

    def _create_session(self) -> requests.Session:
        """
        Create a requests session with retry strategy.

        Returns:
            Configured requests session.
        """
        session = requests.Session()

        retry_strategy = Retry(
            total=self.config.retry_count,
            backoff_factor=self.config.retry_delay,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["POST"],
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    def report(
        self,
        account_id: str,
        update_data: BalanceUpdateEventData,
        view_tags: Optional[List[str]] = None,
        silent: bool = False,
    ) -> BalanceUpdateEvent:
        """
        Submit a balance report.

        Args:
            account_id: Account key shown in the dashboard.
            update_data: Report figures.
            view_tags: Visibility tags (defaults to the configured tags).
            silent: Skip the info log on success.

        Returns:
            The submitted event.

        Raises:
            ReportingError: If the balance is not a number or the submission fails.
        """
        if not is_number(update_data.balance):
            raise ReportingError(
                f"Balance is not a number: {update_data.balance} | {type(update_data.balance).__name__}"
            )

        tags = self.config.view_tags if view_tags is None else view_tags
        event = BalanceUpdateEvent(
            update_data=update_data,
            account_key=account_id,
            timestamp=int(time.time() * 1000),
            view_tags=",".join(tags),
        )

        try:
            response = self.session.post(
                self.config.url,
                json=event.to_dict(),
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Exception seen in reporting balance update for {account_id}: {e}")
            raise ReportingError(f"Balance API request failed: {e}") from e

        if response.status_code != 200:
            logger.error(
                f"Balance API rejected update for {account_id}: "
                f"status={response.status_code}, body={response.text}"
            )
            raise ReportingError(
                f"Balance API submission error: {response.status_code} {response.text}"
            )

        if not silent:
            logger.info(f"Submitted balance update for {account_id}: {update_data}")
        return event

    def report_store(
        self,
        account_id: str,
        store: 'AccountStateStore',
        quote_balance_asset: Optional[str] = None,
        view_tags: Optional[List[str]] = None,
        silent: bool = False,
    ) -> BalanceUpdateEvent:
        """Build a report from the store and submit it."""
        update_data = build_balance_update(store, quote_balance_asset)
        return self.report(account_id, update_data, view_tags=view_tags, silent=silent)

    def close(self) -> None:
        self.session.close()
