from datetime import datetime

import pandas as pd
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.core.errors import BadRequestError
from fintrack.models.base import utcnow
from fintrack.models.finance import Category, Transaction
from fintrack.services import repository

GROUP_FORMATS = {"day": "%Y-%m-%d", "month": "%Y-%m", "year": "%Y"}
HISTORY_COLUMNS = ["id", "amount", "type", "date", "category_id"]


class ReportService:
    @staticmethod
    async def get_history_df(db: AsyncSession, user_id: str, start: datetime, end: datetime,
                             tx_type: str | None = None) -> pd.DataFrame:
        stmt = repository.visible(
            select(Transaction).where(
                Transaction.user_id == user_id, Transaction.date >= start, Transaction.date <= end
            ),
            Transaction,
        )
        if tx_type:
            stmt = stmt.where(Transaction.type == tx_type)
        transactions = (await db.execute(stmt.order_by(Transaction.date))).scalars().all()
        if not transactions:
            return pd.DataFrame(columns=HISTORY_COLUMNS)

        df = pd.DataFrame([{col: getattr(t, col) for col in HISTORY_COLUMNS} for t in transactions])
        df["date"] = pd.to_datetime(df["date"])
        return df

    @staticmethod
    def period_labels(dates: pd.Series, group_by: str) -> pd.Series:
        if group_by == "week":
            iso = dates.dt.isocalendar()
            return iso["year"].astype(str) + "-W" + iso["week"].astype(str)
        return dates.dt.strftime(GROUP_FORMATS.get(group_by, GROUP_FORMATS["month"]))

    @staticmethod
    async def spending_by_category(db: AsyncSession, user_id: str, start: datetime, end: datetime):
        df = await ReportService.get_history_df(db, user_id, start, end, tx_type="expense")
        data = []
        if not df.empty:
            totals = df.groupby("category_id")["amount"].sum().sort_values(ascending=False)
            cats_stmt = select(Category).where(Category.id.in_(list(totals.index)))
            categories = {c.id: c for c in (await db.execute(cats_stmt)).scalars().all()}
            for category_id, total in totals.items():
                category = categories.get(category_id)
                if category is None:
                    continue
                data.append({
                    "categoryId": category_id,
                    "categoryName": category.name,
                    "categoryIcon": category.icon,
                    "categoryColor": category.color,
                    "totalAmount": round(float(total), 2),
                })

        return {
            "data": data,
            "summary": {
                "totalSpending": round(sum(item["totalAmount"] for item in data), 2),
                "categoriesCount": len(data),
            },
        }

    @staticmethod
    async def income_vs_expenses(db: AsyncSession, user_id: str, start: datetime, end: datetime,
                                 group_by: str = "month"):
        if group_by not in ("day", "week", "month", "year"):
            raise BadRequestError("groupBy must be one of day, week, month, year")
        df = await ReportService.get_history_df(db, user_id, start, end)

        rows = []
        if not df.empty:
            df["period"] = ReportService.period_labels(df["date"], group_by)
            grouped = df.groupby(["period", "type"])["amount"].agg(["sum", "count"])
            for period in sorted(df["period"].unique()):
                income = grouped.loc[(period, "income")] if (period, "income") in grouped.index else None
                expense = grouped.loc[(period, "expense")] if (period, "expense") in grouped.index else None
                income_amt = float(income["sum"]) if income is not None else 0.0
                expense_amt = float(expense["sum"]) if expense is not None else 0.0
                rows.append({
                    "period": period,
                    "income": round(income_amt, 2),
                    "incomeCount": int(income["count"]) if income is not None else 0,
                    "expense": round(expense_amt, 2),
                    "expenseCount": int(expense["count"]) if expense is not None else 0,
                    "balance": round(income_amt - expense_amt, 2),
                })

        total_income = sum(r["income"] for r in rows)
        total_expense = sum(r["expense"] for r in rows)
        return {
            "data": rows,
            "summary": {
                "totalIncome": round(total_income, 2),
                "totalExpense": round(total_expense, 2),
                "balance": round(total_income - total_expense, 2),
                "periodCount": len(rows),
            },
        }

    @staticmethod
    async def monthly_trend(db: AsyncSession, user_id: str, months: int = 6):
        end = utcnow()
        start = (pd.Timestamp(end) - pd.DateOffset(months=months)).to_pydatetime()
        df = await ReportService.get_history_df(db, user_id, start, end, tx_type="expense")

        data = []
        if not df.empty:
            df["month"] = df["date"].dt.strftime("%Y-%m")
            grouped = df.groupby("month")["amount"].agg(["sum", "count"]).sort_index()
            data = [
                {"month": month, "totalAmount": round(float(row["sum"]), 2), "transactionCount": int(row["count"])}
                for month, row in grouped.iterrows()
            ]

        avg = sum(d["totalAmount"] for d in data) / len(data) if data else 0
        return {
            "period": {"startDate": start.date().isoformat(), "endDate": end.date().isoformat(), "months": months},
            "data": data,
            "summary": {"averageSpending": round(avg, 2), "monthsCount": len(data)},
        }
