"""Tests for dashboard aggregates and their period helpers."""

import datetime as dt

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from budget_tracker.exceptions import ValidationError
from budget_tracker.models import BudgetPeriod, CategoryType
from budget_tracker.services.dashboard import month_range, parse_month, period_range, week_range
from tests.factories import make_budget, make_category, make_transaction
from tests.seeds import Seed


# ---------------------------------------------------------------------------
# Period helpers
# ---------------------------------------------------------------------------
@pytest.mark.parametrize(
    "day, start, end",
    [
        (dt.date(2026, 10, 18), dt.date(2026, 10, 1), dt.date(2026, 10, 31)),
        (dt.date(2026, 2, 1), dt.date(2026, 2, 1), dt.date(2026, 2, 28)),
        (dt.date(2028, 2, 29), dt.date(2028, 2, 1), dt.date(2028, 2, 29)),
        (dt.date(2026, 12, 31), dt.date(2026, 12, 1), dt.date(2026, 12, 31)),
    ],
    ids=["october", "february", "leap_february", "december"],
)
def test_month_range(day: dt.date, start: dt.date, end: dt.date) -> None:
    assert month_range(day) == (start, end)


@pytest.mark.parametrize(
    "day",
    [dt.date(2026, 10, 12), dt.date(2026, 10, 15), dt.date(2026, 10, 18)],
    ids=["monday", "thursday", "sunday"],
)
def test_week_range_runs_monday_to_sunday(day: dt.date) -> None:
    assert week_range(day) == (dt.date(2026, 10, 12), dt.date(2026, 10, 18))


def test_week_range_crosses_month_boundary() -> None:
    assert week_range(dt.date(2026, 11, 1)) == (dt.date(2026, 10, 26), dt.date(2026, 11, 1))


def test_period_range_dispatches_on_period() -> None:
    day = dt.date(2026, 10, 14)

    assert period_range(BudgetPeriod.WEEK, day) == week_range(day)
    assert period_range(BudgetPeriod.MONTH, day) == month_range(day)


def test_parse_month() -> None:
    today = dt.date(2026, 10, 18)

    assert parse_month(None, today) == dt.date(2026, 10, 1)
    assert parse_month("", today) == dt.date(2026, 10, 1)
    assert parse_month("2025-01", today) == dt.date(2025, 1, 1)


@pytest.mark.parametrize("raw", ["2026-13", "2026-00", "2026-1", "10-2026", "2026-10-01", "october"])
def test_parse_month_rejects_malformed(raw: str) -> None:
    with pytest.raises(ValidationError) as exc_info:
        parse_month(raw, dt.date(2026, 10, 18))

    assert exc_info.value.field == "month"


# ---------------------------------------------------------------------------
# GET /dashboard/summary
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_monthly_summary(client: AsyncClient, seeded_db: Seed) -> None:
    resp = await client.get("/dashboard/summary?month=2026-10", headers=seeded_db.headers)

    assert resp.status_code == 200
    assert resp.json()["data"] == {
        "month": "2026-10",
        "totalIncome": 5_000_000,
        "totalExpenses": 325_000,
        "balance": 4_675_000,
        "savingsRate": 93.5,
        "transactionCount": 4,
    }


@pytest.mark.asyncio
async def test_monthly_summary_for_previous_month(client: AsyncClient, seeded_db: Seed) -> None:
    data = (await client.get("/dashboard/summary?month=2026-09", headers=seeded_db.headers)).json()["data"]

    assert data["totalIncome"] == 4_500_000
    assert data["totalExpenses"] == 30_000
    assert data["transactionCount"] == 2


@pytest.mark.asyncio
async def test_empty_month_has_zero_savings_rate(client: AsyncClient, seeded_db: Seed) -> None:
    data = (await client.get("/dashboard/summary?month=2020-01", headers=seeded_db.headers)).json()["data"]

    assert data == {
        "month": "2020-01",
        "totalIncome": 0,
        "totalExpenses": 0,
        "balance": 0,
        "savingsRate": 0.0,
        "transactionCount": 0,
    }


@pytest.mark.asyncio
async def test_summary_defaults_to_current_month(client: AsyncClient, seeded_db: Seed) -> None:
    data = (await client.get("/dashboard/summary", headers=seeded_db.headers)).json()["data"]

    assert data["month"] == dt.date.today().strftime("%Y-%m")


@pytest.mark.asyncio
async def test_summary_rejects_bad_month(client: AsyncClient, seeded_db: Seed) -> None:
    resp = await client.get("/dashboard/summary?month=2026-13", headers=seeded_db.headers)

    assert resp.status_code == 400
    assert resp.json()["error"]["field"] == "month"


# ---------------------------------------------------------------------------
# GET /dashboard/budgets
# ---------------------------------------------------------------------------
@pytest.mark.asyncio
async def test_budget_usage(client: AsyncClient, db: AsyncSession, seeded_db: Seed) -> None:
    user_id = seeded_db.user.id
    today = dt.date.today()
    kopi = make_category(user_id=user_id, name="Kopi", type=CategoryType.WEEKLY)
    buku = make_category(user_id=user_id, name="Buku", type=CategoryType.MONTHLY)
    db.add_all([kopi, buku])
    await db.flush()

    db.add_all(
        [
            make_budget(user_id=user_id, category_id=kopi.id, amount=100_000, period=BudgetPeriod.WEEK),
            make_budget(user_id=user_id, category_id=buku.id, amount=200_000, period=BudgetPeriod.MONTH),
            make_transaction(user_id=user_id, category_id=kopi.id, amount=-60_000, date=today),
            make_transaction(user_id=user_id, category_id=kopi.id, amount=-70_000, date=today),
            # Income and spending outside the period do not count
            make_transaction(user_id=user_id, category_id=kopi.id, amount=1_000_000, date=today),
            make_transaction(
                user_id=user_id, category_id=kopi.id, amount=-5_000, date=today - dt.timedelta(days=40)
            ),
            make_transaction(user_id=user_id, category_id=buku.id, amount=-50_000, date=today),
        ]
    )
    await db.commit()

    resp = await client.get("/dashboard/budgets", headers=seeded_db.headers)

    assert resp.status_code == 200
    assert resp.headers["Cache-Control"] == "no-store"
    body = resp.json()
    assert body["message"] == "1 of 2 budgets exceeded"

    usage = {item["categoryName"]: item for item in body["data"]}
    week_start, week_end = week_range(today)
    assert usage["Kopi"] == {
        "budgetId": usage["Kopi"]["budgetId"],
        "categoryId": str(kopi.id),
        "categoryName": "Kopi",
        "period": "week",
        "periodStart": week_start.isoformat(),
        "periodEnd": week_end.isoformat(),
        "amount": 100_000,
        "spent": 130_000,
        "remaining": -30_000,
        "percentage": 130.0,
        "overBudget": True,
    }
    assert usage["Buku"]["spent"] == 50_000
    assert usage["Buku"]["percentage"] == 25.0
    assert usage["Buku"]["overBudget"] is False
    assert usage["Buku"]["periodStart"] == today.replace(day=1).isoformat()


@pytest.mark.asyncio
async def test_budget_overspent_by_one_is_over_budget(
    client: AsyncClient, db: AsyncSession, seeded_db: Seed
) -> None:
    user_id = seeded_db.user.id
    today = dt.date.today()
    sewa = make_category(user_id=user_id, name="Kost/Sewa", type=CategoryType.MONTHLY)
    db.add(sewa)
    await db.flush()
    db.add_all(
        [
            make_budget(user_id=user_id, category_id=sewa.id, amount=1_000_000, period=BudgetPeriod.MONTH),
            make_transaction(user_id=user_id, category_id=sewa.id, amount=-1_000_001, date=today),
        ]
    )
    await db.commit()

    body = (await client.get("/dashboard/budgets", headers=seeded_db.headers)).json()

    [usage] = body["data"]
    assert usage["remaining"] == -1
    assert usage["percentage"] == 100.0
    assert usage["overBudget"] is True
    assert body["message"] == "1 of 1 budgets exceeded"


@pytest.mark.asyncio
async def test_budget_spent_exactly_is_on_track(client: AsyncClient, db: AsyncSession, seeded_db: Seed) -> None:
    user_id = seeded_db.user.id
    sewa = make_category(user_id=user_id, name="Kost/Sewa", type=CategoryType.MONTHLY)
    db.add(sewa)
    await db.flush()
    db.add_all(
        [
            make_budget(user_id=user_id, category_id=sewa.id, amount=1_000_000, period=BudgetPeriod.MONTH),
            make_transaction(user_id=user_id, category_id=sewa.id, amount=-1_000_000, date=dt.date.today()),
        ]
    )
    await db.commit()

    [usage] = (await client.get("/dashboard/budgets", headers=seeded_db.headers)).json()["data"]

    assert usage["percentage"] == 100.0
    assert usage["overBudget"] is False


@pytest.mark.asyncio
async def test_budget_usage_without_budgets(client: AsyncClient, seeded_db: Seed) -> None:
    resp = await client.get("/dashboard/budgets", headers=seeded_db.headers)

    assert resp.json() == {"success": True, "data": [], "message": "All budgets on track"}
