import pytest

from conftest import create_account, create_category, create_transaction


@pytest.fixture
async def history(client, auth):
    account = await create_account(client, auth)
    food = await create_category(client, auth, "Food")
    rent = await create_category(client, auth, "Rent")
    salary = await create_category(client, auth, "Salary", "income")
    await create_transaction(client, auth, account, food, amount=40, date="2024-03-02")
    await create_transaction(client, auth, account, food, amount=60, date="2024-03-20")
    await create_transaction(client, auth, account, rent, amount=900, date="2024-03-01")
    await create_transaction(client, auth, account, salary, amount=3000, type="income", date="2024-03-25")
    await create_transaction(client, auth, account, rent, amount=900, date="2024-04-01")
    dropped = await create_transaction(client, auth, account, food, amount=999, date="2024-03-05")
    await client.delete(f"/api/transactions/{dropped['_id']}", headers=auth)
    return {"food": food, "rent": rent, "salary": salary}


async def test_spending_by_category(client, auth, history):
    params = {"startDate": "2024-03-01", "endDate": "2024-03-31"}

    body = (await client.get("/api/reports/spending-by-category", params=params, headers=auth)).json()

    assert [(row["categoryName"], row["totalAmount"]) for row in body["data"]] == [("Rent", 900), ("Food", 100)]
    assert body["summary"] == {"totalSpending": 1000, "categoriesCount": 2}


async def test_income_vs_expenses_by_month(client, auth, history):
    params = {"startDate": "2024-03-01", "endDate": "2024-04-30", "groupBy": "month"}

    body = (await client.get("/api/reports/income-vs-expenses", params=params, headers=auth)).json()

    march, april = body["data"]
    assert march["period"] == "2024-03"
    assert march["income"] == 3000
    assert march["expense"] == 1000
    assert march["expenseCount"] == 3
    assert april == {"period": "2024-04", "income": 0, "incomeCount": 0, "expense": 900, "expenseCount": 1,
                     "balance": -900}
    assert body["summary"]["balance"] == 1100


async def test_income_vs_expenses_rejects_unknown_grouping(client, auth):
    params = {"startDate": "2024-03-01", "endDate": "2024-04-30", "groupBy": "decade"}

    response = await client.get("/api/reports/income-vs-expenses", params=params, headers=auth)

    assert response.status_code == 400


async def test_monthly_trend_covers_recent_spending(client, auth):
    account = await create_account(client, auth)
    food = await create_category(client, auth)
    await create_transaction(client, auth, account, food, amount=25)
    await create_transaction(client, auth, account, food, amount=75)

    body = (await client.get("/api/reports/monthly-trend", params={"months": 3}, headers=auth)).json()

    assert body["period"]["months"] == 3
    assert len(body["data"]) == 1
    assert body["data"][0]["totalAmount"] == 100
    assert body["data"][0]["transactionCount"] == 2
    assert body["summary"] == {"averageSpending": 100, "monthsCount": 1}


async def test_empty_reports(client, auth):
    params = {"startDate": "2024-01-01", "endDate": "2024-01-31"}

    body = (await client.get("/api/reports/spending-by-category", params=params, headers=auth)).json()

    assert body["data"] == []
    assert body["summary"]["totalSpending"] == 0
