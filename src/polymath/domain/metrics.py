"""Metric derivation over business ledgers.

All functions here are pure: they read ledgers and return new metric
records without touching state or storage.
"""

from collections import defaultdict
from datetime import datetime, timedelta
from typing import Iterable, Optional, Sequence

from polymath.domain.entities import (
    BusinessMetrics,
    Entry,
    HealthStatus,
    HistoricalPoint,
    OverallHealth,
    Trend,
)
from polymath.domain.ledger import BusinessLedger
from polymath.utils.date_parser import start_of_day

EXCELLENT_PROFIT = 5000
GOOD_PROFIT = 2500

BASE_SCORE = 50
PROFIT_BONUS = 30
HIGH_MARGIN = 20
HIGH_MARGIN_BONUS = 20
FAIR_MARGIN = 10
FAIR_MARGIN_BONUS = 10
COVERAGE_BONUS = 10

TREND_UP_FACTOR = 1.05
TREND_DOWN_FACTOR = 0.95


def _profit_between(entries: Iterable[Entry], start: datetime, end: Optional[datetime] = None) -> float:
    """Sum net profit of entries whose day starts in [start, end)."""
    total = 0.0
    for entry in entries:
        moment = start_of_day(entry.date)
        if moment >= start and (end is None or moment < end):
            total += entry.net_profit
    return total


def classify_health(total_net_profit: float) -> HealthStatus:
    """Classify all-time net profit into a health tier."""
    if total_net_profit > EXCELLENT_PROFIT:
        return HealthStatus.EXCELLENT
    if total_net_profit > GOOD_PROFIT:
        return HealthStatus.GOOD
    if total_net_profit > 0:
        return HealthStatus.WARNING
    return HealthStatus.CRITICAL


def weekly_growth(current_week: float, previous_week: float) -> float:
    """Percent change week over week; 0 unless the previous week was positive."""
    if previous_week > 0:
        return (current_week - previous_week) / previous_week * 100
    return 0.0


def business_metrics(ledger: BusinessLedger, now: datetime) -> BusinessMetrics:
    """Compute windowed metrics for one ledger.

    Entry dates count from midnight UTC. Windows are measured back from
    ``now``: the current week is the last 7 days, the previous week the 7
    days before that, and month-to-date the last 30 days.

    Args:
        ledger: Ledger to measure
        now: Timezone-aware current instant

    Returns:
        BusinessMetrics for the ledger
    """
    week_ago = now - timedelta(days=7)
    two_weeks_ago = now - timedelta(days=14)
    month_ago = now - timedelta(days=30)

    current_week = _profit_between(ledger.entries, week_ago)
    previous_week = _profit_between(ledger.entries, two_weeks_ago, week_ago)
    month_to_date = _profit_between(ledger.entries, month_ago)

    return BusinessMetrics(
        current_week=current_week,
        previous_week=previous_week,
        month_to_date=month_to_date,
        weekly_growth=weekly_growth(current_week, previous_week),
        health_status=classify_health(ledger.total_net_profit),
    )


def empty_metrics() -> BusinessMetrics:
    """Metrics reported for a business with no ledger."""
    return BusinessMetrics(
        current_week=0.0,
        previous_week=0.0,
        month_to_date=0.0,
        weekly_growth=0.0,
        health_status=HealthStatus.CRITICAL,
    )


def health_score(total_revenue: float, total_net_profit: float, total_expenses: float) -> float:
    """Composite 0-100 heuristic of portfolio profitability.

    The two margin bonuses stack: a margin above 20% earns both.
    """
    margin = profit_margin(total_revenue, total_net_profit)
    score = BASE_SCORE
    if total_net_profit > 0:
        score += PROFIT_BONUS
    if margin > HIGH_MARGIN:
        score += HIGH_MARGIN_BONUS
    if margin > FAIR_MARGIN:
        score += FAIR_MARGIN_BONUS
    if total_revenue > total_expenses:
        score += COVERAGE_BONUS
    return float(min(100, max(0, score)))


def profit_margin(total_revenue: float, total_net_profit: float) -> float:
    if total_revenue > 0:
        return total_net_profit / total_revenue * 100
    return 0.0


def historical_series(ledgers: Iterable[BusinessLedger]) -> tuple[HistoricalPoint, ...]:
    """Merge entries of all ledgers into one point per date, ascending."""
    by_date: dict = defaultdict(lambda: [0.0, 0.0])
    for ledger in ledgers:
        for entry in ledger.entries:
            bucket = by_date[entry.date]
            bucket[0] += entry.net_profit
            bucket[1] += entry.revenue

    return tuple(
        HistoricalPoint(date=day, total_net_profit=profit, total_revenue=revenue)
        for day, (profit, revenue) in sorted(by_date.items())
    )


def classify_trend(series: Sequence[HistoricalPoint]) -> Trend:
    """Compare the last two points of a date-sorted series."""
    if len(series) < 2:
        return Trend.STABLE
    recent = series[-1].total_net_profit
    previous = series[-2].total_net_profit
    if recent > previous * TREND_UP_FACTOR:
        return Trend.UP
    if recent < previous * TREND_DOWN_FACTOR:
        return Trend.DOWN
    return Trend.STABLE


def overall_health(ledgers: Sequence[BusinessLedger]) -> OverallHealth:
    """Aggregate all ledgers into portfolio-wide health.

    ``total_expenses`` counts cost categories only: salaries plus expenses.
    """
    total_revenue = sum(ledger.total_revenue for ledger in ledgers)
    total_net_profit = sum(ledger.total_net_profit for ledger in ledgers)
    total_expenses = sum(ledger.total_salaries + ledger.total_expenses for ledger in ledgers)
    series = historical_series(ledgers)

    return OverallHealth(
        total_revenue=total_revenue,
        total_net_profit=total_net_profit,
        total_expenses=total_expenses,
        health_score=health_score(total_revenue, total_net_profit, total_expenses),
        trend=classify_trend(series),
        profit_margin=profit_margin(total_revenue, total_net_profit),
        historical_data=series,
    )
