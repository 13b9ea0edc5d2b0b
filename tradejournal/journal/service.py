"""Trade journal service.

Binds the store to the analytics engine for a single caller identity.
Mutations are validated here, derived trade fields are recomputed here,
and every read of a derived summary goes through the invalidation graph.
"""

import logging
import time
import uuid
from datetime import tzinfo
from typing import Optional

from tradejournal import analytics
from tradejournal.analytics.bucketing import UTC, month_key, week_key
from tradejournal.db.store import JournalStore
from tradejournal.journal.errors import (
    ProfileNotFoundError,
    TradeNotFoundError,
    TradeValidationError,
)
from tradejournal.journal.invalidation import Mutation, SummaryCache
from tradejournal.journal.validation import validate_trade_request
from tradejournal.models import (
    AddTradeResult,
    CalendarDayPerformance,
    FTMOAnalytics,
    HomepageSummaryMetrics,
    PerformanceGoalsSummary,
    PerformanceSummary,
    TradeChecklist,
    TradeEntry,
    TradeRequest,
    TradeStatistics,
    UserProfile,
)

logger = logging.getLogger(__name__)


class TradeJournal:
    """Trade journal of one caller.

    The service assumes it is the only writer of the caller's data while
    it is alive; memoized summaries are invalidated by its own mutations.
    """

    def __init__(self, store: JournalStore, owner: str, tz: tzinfo = UTC):
        """Initialize the journal.

        Args:
            store: Backing data store.
            owner: Caller identity every read and write is scoped to.
            tz: Calendar anchor for day/week/month bucketing.
        """
        self.store = store
        self.owner = owner
        self.tz = tz
        self.cache = SummaryCache()

    def _mutated(self, mutation: Mutation) -> None:
        stale = self.cache.invalidate(mutation)
        logger.debug("%s invalidated %s", mutation.value, ", ".join(stale))

    def _period(self, now_ns: int) -> tuple[str, str]:
        """Cache key for wall-clock summaries, which only depend on the current week and month."""
        return week_key(now_ns, self.tz), month_key(now_ns, self.tz)

    def _store(self, trade: TradeEntry) -> TradeEntry:
        """Save trade and read it back with its store-assigned sequence."""
        self.store.save_trade(self.owner, trade)
        return self.store.get_trade(self.owner, trade.id)

    def _balance(self) -> float:
        profile = self.get_profile()
        return profile.account_balance if profile else 0.0

    # ==================== Profile ====================

    def get_profile(self) -> Optional[UserProfile]:
        return self.cache.get_or_compute(
            "profile", None, lambda: self.store.get_profile(self.owner)
        )

    def require_profile(self) -> UserProfile:
        profile = self.get_profile()
        if profile is None:
            raise ProfileNotFoundError(self.owner)
        return profile

    def save_profile(self, profile: UserProfile) -> None:
        """Save the caller's profile.

        A changed account balance re-derives the risk percentage of
        every stored trade.
        """
        previous = self.get_profile()
        self.store.save_profile(self.owner, profile)

        if previous is None or previous.account_balance != profile.account_balance:
            trades = self.store.get_trades(self.owner)
            if trades:
                self.store.save_trades(
                    self.owner,
                    [analytics.with_metrics(trade, profile.account_balance) for trade in trades],
                )
                logger.info("Recomputed metrics of %d trades after balance change", len(trades))

        self._mutated(Mutation.PROFILE_SAVED)

    # ==================== Trades ====================

    def _validate(self, request: TradeRequest) -> None:
        errors = validate_trade_request(request)
        if errors:
            logger.warning("Rejected trade for %s: %s", self.owner, "; ".join(errors))
            raise TradeValidationError(errors)

    def add_trade(self, request: TradeRequest) -> AddTradeResult:
        """Validate and store a new trade.

        Returns:
            The stored trade and the refreshed goals summary.

        Raises:
            TradeValidationError: If the request is invalid.
        """
        self._validate(request)
        trade = analytics.with_metrics(
            TradeEntry(id=uuid.uuid4().hex, **request.model_dump()), self._balance()
        )
        trade = self._store(trade)
        for tag in trade.tags:
            self.store.add_tag(self.owner, tag)
        self._mutated(Mutation.TRADE_ADDED)
        return AddTradeResult(trade=trade, updated_goals=self.get_performance_goals_summary())

    def edit_trade(self, trade_id: str, request: TradeRequest) -> TradeEntry:
        """Replace the user-supplied fields of a trade.

        The checklist of the stored trade is kept; use
        update_trade_checklist to change it.
        """
        existing = self.get_trade(trade_id)
        self._validate(request)
        edited = TradeEntry(
            id=existing.id,
            checklist=existing.checklist,
            **request.model_dump(exclude={"checklist"}),
        )
        trade = analytics.with_metrics(edited, self._balance())
        trade = self._store(trade)
        for tag in trade.tags:
            self.store.add_tag(self.owner, tag)
        self._mutated(Mutation.TRADE_EDITED)
        return trade

    def delete_trade(self, trade_id: str) -> PerformanceGoalsSummary:
        if not self.store.delete_trade(self.owner, trade_id):
            raise TradeNotFoundError(trade_id)
        self._mutated(Mutation.TRADE_DELETED)
        return self.get_performance_goals_summary()

    def update_trade_checklist(self, trade_id: str, checklist: TradeChecklist) -> TradeEntry:
        trade = self._store(self.get_trade(trade_id).model_copy(update={"checklist": checklist}))
        self._mutated(Mutation.CHECKLIST_UPDATED)
        return trade

    def get_trade(self, trade_id: str) -> TradeEntry:
        trade = self.store.get_trade(self.owner, trade_id)
        if trade is None:
            raise TradeNotFoundError(trade_id)
        return trade

    def get_all_trades(self) -> list[TradeEntry]:
        """Every trade of the caller; analytics always run on this full list."""
        return self.cache.get_or_compute(
            "trades", None, lambda: self.store.get_trades(self.owner)
        )

    def get_trades_page(self, page: int, page_size: int) -> list[TradeEntry]:
        return self.store.get_trades_page(self.owner, page, page_size)

    def filter_trades_by_tag(self, tag: str) -> list[TradeEntry]:
        return analytics.filter_trades_by_tag(self.get_all_trades(), tag)

    def get_tags(self) -> list[str]:
        return self.store.get_tags(self.owner)

    def add_tag(self, name: str) -> None:
        self.store.add_tag(self.owner, name)

    def get_stats(self) -> dict:
        """Record counts of the caller, per table."""
        return self.store.get_stats(self.owner)

    # ==================== Analytics ====================

    def get_calendar_performance(self, month: int, year: int) -> list[CalendarDayPerformance]:
        return self.cache.get_or_compute(
            "calendar",
            (month, year),
            lambda: analytics.get_calendar_performance(self.get_all_trades(), month, year, self.tz),
        )

    def get_trades_for_day(self, day: int, month: int, year: int) -> list[TradeEntry]:
        return self.cache.get_or_compute(
            "trades_for_day",
            (day, month, year),
            lambda: analytics.get_trades_for_day(self.get_all_trades(), day, month, year, self.tz),
        )

    def get_performance_summary(self) -> PerformanceSummary:
        return self.cache.get_or_compute(
            "performance_summary",
            None,
            lambda: analytics.get_performance_summary(
                self.get_all_trades(), self.get_profile(), self.tz
            ),
        )

    def get_ftmo_analytics(self) -> FTMOAnalytics:
        return self.cache.get_or_compute(
            "ftmo",
            None,
            lambda: analytics.get_ftmo_analytics(self.get_all_trades(), self.get_profile(), self.tz),
        )

    def get_performance_goals_summary(self, now_ns: Optional[int] = None) -> PerformanceGoalsSummary:
        if now_ns is None:
            now_ns = time.time_ns()
        return self.cache.get_or_compute(
            "goals",
            self._period(now_ns),
            lambda: analytics.get_performance_goals_summary(
                self.get_all_trades(), self.get_profile(), now_ns, self.tz
            ),
        )

    def get_homepage_summary(self, now_ns: Optional[int] = None) -> HomepageSummaryMetrics:
        if now_ns is None:
            now_ns = time.time_ns()
        return self.cache.get_or_compute(
            "homepage",
            self._period(now_ns),
            lambda: analytics.get_homepage_summary(
                self.get_all_trades(), self.get_profile(), now_ns, self.tz
            ),
        )

    def get_trade_statistics(self) -> TradeStatistics:
        return self.cache.get_or_compute(
            "statistics",
            None,
            lambda: analytics.get_trade_statistics(self.get_all_trades(), self.get_profile()),
        )
