"""Revenue, status, client and aging analytics over a user's invoices.

Every ``build_*`` function is a pure computation over records already loaded
for the request: invoices expose ``status``, ``total``, ``issue_date``,
``due_date`` and ``client_id``; clients expose ``id``, ``name``, ``company``,
``created_at`` and ``invoices``. Money is accumulated as ``Decimal`` and only
rounded when the payload is built.
"""

from collections import OrderedDict
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Sequence

import structlog
from sqlalchemy.orm import Session, selectinload

from invoicehub.app.core.invoice_status import InvoiceStatus
from invoicehub.app.core.time import as_date, utc_now
from invoicehub.app.models.client import Client
from invoicehub.app.models.invoice import Invoice
from invoicehub.app.services.periods import (
    DEFAULT_PERIOD,
    ReportingWindow,
    bucket_key,
    bucket_keys,
    last_n_months,
    next_bucket_keys,
    resolve_period,
    shift_months,
)
from invoicehub.app.services.totals import ZERO, money_str, quantize_money, to_decimal

LOGGER = structlog.get_logger(__name__)

TOP_CLIENTS_LIMIT = 10
TREND_MONTHS = 12
FORECAST_PERIODS = 3
MIN_FORECAST_POINTS = 3

AGING_BUCKETS = ("current", "days_31_to_60", "days_61_to_90", "over_90")


def _status(invoice) -> InvoiceStatus:
    return InvoiceStatus(invoice.status)


def _with_status(invoices: Iterable, status: InvoiceStatus) -> List:
    return [inv for inv in invoices if _status(inv) is status]


def _sum_totals(invoices: Iterable) -> Decimal:
    return sum((to_decimal(inv.total) for inv in invoices), ZERO)


def _percent(value: Decimal) -> float:
    return float(value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _ratio_percent(part, whole) -> float:
    if not whole:
        return 0.0
    return _percent(Decimal(part) * Decimal("100") / Decimal(whole))


def growth_rate(current: Decimal, previous: Decimal) -> float:
    """Relative change in percent; a zero baseline yields 0 (flat) or 100 (any growth)."""
    if previous == 0:
        return 0.0 if current == 0 else 100.0
    return _percent((current - previous) / previous * Decimal("100"))


def invoices_in_window(invoices: Iterable, window: ReportingWindow) -> List:
    return [inv for inv in invoices if window.contains(as_date(inv.issue_date))]


def build_revenue_over_time(invoices: Iterable, window: ReportingWindow) -> List[dict]:
    keys = bucket_keys(window.start.date(), window.end.date(), window.granularity)
    revenue: Dict[str, Decimal] = OrderedDict((key, ZERO) for key in keys)

    for inv in _with_status(invoices, InvoiceStatus.PAID):
        key = bucket_key(as_date(inv.issue_date), window.granularity)
        if key in revenue:
            revenue[key] += to_decimal(inv.total)

    return [{"date": key, "revenue": money_str(amount)} for key, amount in revenue.items()]


def build_status_distribution(invoices: Sequence) -> List[dict]:
    counts = {status: 0 for status in InvoiceStatus}
    revenue = {status: ZERO for status in InvoiceStatus}
    for inv in invoices:
        status = _status(inv)
        counts[status] += 1
        revenue[status] += to_decimal(inv.total)

    total_count = len(invoices)
    return [
        {
            "status": status.value,
            "count": counts[status],
            "revenue": money_str(revenue[status]),
            "percentage": _ratio_percent(counts[status], total_count),
        }
        for status in InvoiceStatus
    ]


def build_top_clients(clients: Iterable, limit: int = TOP_CLIENTS_LIMIT) -> List[dict]:
    rows = []
    for client in clients:
        client_invoices = list(client.invoices)
        paid = _with_status(client_invoices, InvoiceStatus.PAID)
        total_revenue = _sum_totals(paid)
        if total_revenue <= 0:
            continue
        average = _sum_totals(client_invoices) / len(client_invoices)
        rows.append(
            {
                "id": client.id,
                "name": client.name,
                "company": client.company,
                "invoice_count": len(client_invoices),
                "paid_invoice_count": len(paid),
                "total_revenue": total_revenue,
                "average_invoice_value": average,
            }
        )

    # Equal revenue falls back to the lower client id
    rows.sort(key=lambda row: (-row["total_revenue"], row["id"]))
    top = rows[:limit]
    for row in top:
        row["total_revenue"] = money_str(row["total_revenue"])
        row["average_invoice_value"] = money_str(row["average_invoice_value"])
    return top


def build_monthly_trends(invoices: Iterable, today: date) -> List[dict]:
    months = last_n_months(today, TREND_MONTHS)
    data = {key: {"revenue": ZERO, "invoice_count": 0, "clients": set()} for key in months}

    for inv in invoices:
        issued = as_date(inv.issue_date)
        entry = data.get((issued.year, issued.month))
        if entry is None:
            continue
        entry["invoice_count"] += 1
        entry["clients"].add(inv.client_id)
        if _status(inv) is InvoiceStatus.PAID:
            entry["revenue"] += to_decimal(inv.total)

    trends = []
    for year, month in months:
        entry = data[(year, month)]
        count = entry["invoice_count"]
        trends.append(
            {
                "month": f"{year:04d}-{month:02d}",
                "revenue": money_str(entry["revenue"]),
                "invoice_count": count,
                "client_count": len(entry["clients"]),
                "average_invoice_value": money_str(entry["revenue"] / count if count else ZERO),
            }
        )
    return trends


def build_client_growth(clients: Iterable, today: date) -> List[dict]:
    months = last_n_months(today, TREND_MONTHS)
    new_clients = {key: 0 for key in months}
    for client in clients:
        created = as_date(client.created_at)
        key = (created.year, created.month)
        if key in new_clients:
            new_clients[key] += 1

    growth = []
    cumulative = 0
    for year, month in months:
        cumulative += new_clients[(year, month)]
        growth.append(
            {
                "month": f"{year:04d}-{month:02d}",
                "new_clients": new_clients[(year, month)],
                "total_clients": cumulative,
            }
        )
    return growth


def _aging_bucket(days_overdue: int) -> str:
    # Not yet due and up to 30 days late share the "current" bucket
    if days_overdue <= 30:
        return "current"
    if days_overdue <= 60:
        return "days_31_to_60"
    if days_overdue <= 90:
        return "days_61_to_90"
    return "over_90"


def build_invoice_aging(invoices: Iterable, today: date) -> Dict[str, dict]:
    buckets = {key: {"count": 0, "amount": ZERO} for key in AGING_BUCKETS}
    for inv in _with_status(invoices, InvoiceStatus.SENT):
        due = as_date(inv.due_date)
        key = "current" if due is None else _aging_bucket((today - due).days)
        buckets[key]["count"] += 1
        buckets[key]["amount"] += to_decimal(inv.total)

    return {key: {"count": data["count"], "amount": money_str(data["amount"])} for key, data in buckets.items()}


def _is_overdue(invoice, today: date) -> bool:
    due = as_date(invoice.due_date)
    return due is not None and due < today


def build_key_metrics(invoices: Sequence, client_count: int, window: ReportingWindow) -> dict:
    today = window.end.date()
    period_invoices = invoices_in_window(invoices, window)
    paid = _with_status(period_invoices, InvoiceStatus.PAID)
    outstanding = _with_status(invoices, InvoiceStatus.SENT)
    overdue = [inv for inv in outstanding if _is_overdue(inv, today)]

    total_revenue = _sum_totals(paid)
    previous_revenue = _sum_totals(
        inv
        for inv in _with_status(invoices, InvoiceStatus.PAID)
        if window.contains_previous(as_date(inv.issue_date))
    )
    average_invoice_value = total_revenue / len(paid) if paid else ZERO

    return {
        "total_revenue": money_str(total_revenue),
        "outstanding_amount": money_str(_sum_totals(outstanding)),
        "overdue_amount": money_str(_sum_totals(overdue)),
        "total_invoices": len(period_invoices),
        "paid_invoices": len(paid),
        "unpaid_invoices": len(outstanding),
        "overdue_invoices": len(overdue),
        "total_clients": client_count,
        "average_invoice_value": money_str(average_invoice_value),
        "conversion_rate": _ratio_percent(len(paid), len(period_invoices)),
        "revenue_growth": growth_rate(total_revenue, previous_revenue),
    }


def build_revenue_forecast(series: Sequence[dict], granularity: str) -> List[dict]:
    """Project the next three buckets with an ordinary least-squares line.

    ``series`` is the ascending revenue-over-time output; fewer than three
    points give no forecast. Projected revenue never drops below zero.
    """
    n = len(series)
    if n < MIN_FORECAST_POINTS:
        return []

    ys = [to_decimal(point["revenue"]) for point in series]
    count = Decimal(n)
    sum_x = Decimal(n * (n - 1) // 2)
    sum_x2 = Decimal(sum(x * x for x in range(n)))
    sum_y = sum(ys, ZERO)
    sum_xy = sum((Decimal(x) * y for x, y in enumerate(ys)), ZERO)

    slope = (count * sum_xy - sum_x * sum_y) / (count * sum_x2 - sum_x * sum_x)
    intercept = (sum_y - slope * sum_x) / count

    labels = next_bucket_keys(series[-1]["date"], granularity, FORECAST_PERIODS)
    forecast = []
    for offset, label in enumerate(labels):
        predicted = quantize_money(slope * Decimal(n + offset) + intercept)
        forecast.append(
            {
                "date": label,
                "revenue": money_str(max(ZERO, predicted)),
                "is_forecast": True,
            }
        )
    return forecast


def build_enhanced_analytics(
    invoices: Sequence,
    clients: Sequence,
    window: ReportingWindow,
) -> dict:
    today = window.end.date()
    period_invoices = invoices_in_window(invoices, window)
    revenue_over_time = build_revenue_over_time(period_invoices, window)

    return {
        "period": window.period,
        "granularity": window.granularity,
        "date_range": {"start": window.start.isoformat(), "end": window.end.isoformat()},
        "key_metrics": build_key_metrics(invoices, len(clients), window),
        "revenue_over_time": revenue_over_time,
        "status_distribution": build_status_distribution(period_invoices),
        "top_clients": build_top_clients(clients),
        "monthly_trends": build_monthly_trends(invoices, today),
        "client_growth": build_client_growth(clients, today),
        "invoice_aging": build_invoice_aging(invoices, today),
        "revenue_forecast": build_revenue_forecast(revenue_over_time, window.granularity),
    }


def build_dashboard_summary(invoices: Sequence, client_count: int, today: date) -> dict:
    """Month-over-month headline figures for the dashboard cards."""
    current_month_start = today.replace(day=1)
    last_month_start = shift_months(datetime.combine(current_month_start, datetime.min.time()), -1).date()

    def in_current_month(inv) -> bool:
        return as_date(inv.issue_date) >= current_month_start

    def in_last_month(inv) -> bool:
        return last_month_start <= as_date(inv.issue_date) < current_month_start

    paid = _with_status(invoices, InvoiceStatus.PAID)
    outstanding = _with_status(invoices, InvoiceStatus.SENT)
    overdue = [inv for inv in outstanding if _is_overdue(inv, today)]

    total_revenue = _sum_totals(paid)
    current_month_revenue = _sum_totals(inv for inv in paid if in_current_month(inv))
    last_month_revenue = _sum_totals(inv for inv in paid if in_last_month(inv))
    current_month_count = sum(1 for inv in invoices if in_current_month(inv))
    last_month_count = sum(1 for inv in invoices if in_last_month(inv))

    status_counts = {status.value: 0 for status in InvoiceStatus}
    for inv in invoices:
        status_counts[_status(inv).value] += 1

    return {
        "as_of": today.isoformat(),
        "total_revenue": money_str(total_revenue),
        "total_invoices": len(invoices),
        "total_clients": client_count,
        "outstanding_amount": money_str(_sum_totals(outstanding)),
        "overdue_amount": money_str(_sum_totals(overdue)),
        "current_month_revenue": money_str(current_month_revenue),
        "last_month_revenue": money_str(last_month_revenue),
        "revenue_change": growth_rate(current_month_revenue, last_month_revenue),
        "invoice_change": growth_rate(Decimal(current_month_count), Decimal(last_month_count)),
        "status_counts": status_counts,
        "average_invoice_value": money_str(total_revenue / len(paid) if paid else ZERO),
    }


def _load_invoices(db: Session, owner_id: int) -> List[Invoice]:
    return (
        db.query(Invoice)
        .filter(Invoice.owner_id == owner_id)
        .order_by(Invoice.issue_date.asc(), Invoice.id.asc())
        .all()
    )


def get_enhanced_analytics(
    db: Session,
    *,
    owner_id: int,
    period: str = DEFAULT_PERIOD,
    now: Optional[datetime] = None,
) -> dict:
    window = resolve_period(period, now or utc_now())
    invoices = _load_invoices(db, owner_id)
    clients = (
        db.query(Client)
        .options(selectinload(Client.invoices))
        .filter(Client.owner_id == owner_id)
        .order_by(Client.id.asc())
        .all()
    )
    analytics = build_enhanced_analytics(invoices, clients, window)
    LOGGER.info("analytics_computed", owner_id=owner_id, period=period, invoice_count=len(invoices))
    return analytics


def get_dashboard_summary(db: Session, *, owner_id: int, today: Optional[date] = None) -> dict:
    invoices = _load_invoices(db, owner_id)
    client_count = db.query(Client).filter(Client.owner_id == owner_id).count()
    return build_dashboard_summary(invoices, client_count, today or utc_now().date())
