from datetime import date

import httpx
import pytest

from fintrack.client.api import FinanceClient
from fintrack.client.http import ApiClient, ApiError
from fintrack.client.models import AccountForm, TransactionForm
from fintrack.client.resources import (
    ACCOUNTS, TRANSACTIONS, AccountFilters, BudgetFilters, CategoryFilters, CrudService, TransactionFilters,
    filters_to_query_params,
)
from fintrack.client.tokens import FileTokenStore, MemoryTokenStore


def mock_api(handler, token=None) -> ApiClient:
    return ApiClient("http://test/api", token_store=MemoryTokenStore(token), transport=httpx.MockTransport(handler))


@pytest.mark.parametrize("filters, keys, expected", [
    (AccountFilters(), ("type", "name"), {}),
    (AccountFilters(type="cash", name=""), ("type", "name"), {"type": "cash"}),
    (AccountFilters(type="  ", name="Main"), ("type", "name"), {"name": "Main"}),
    (CategoryFilters(), (), {}),
    (BudgetFilters(period="monthly", start_date=date(2024, 1, 1)),
     ("period", "category", "start_date", "end_date"),
     {"period": "monthly", "startDate": "2024-01-01"}),
    (TransactionFilters(start_date="", end_date="2024-02-01", account="acc"),
     ("start_date", "end_date", "type", "category", "account"),
     {"endDate": "2024-02-01", "account": "acc"}),
    ({"type": "income", "category": None, "ignored": "x"}, ("type", "category"), {"type": "income"}),
    ({"startDate": "2024-01-01"}, ("start_date",), {"startDate": "2024-01-01"}),
    (None, ("type",), {}),
])
def test_filters_to_query_params(filters, keys, expected):
    assert filters_to_query_params(filters, keys) == expected


async def test_account_lifecycle_through_the_client(finance_client):
    account = await finance_client.accounts.create({"name": "Checking", "type": "bank"})

    assert account.id
    assert account.balance == 0
    assert (await finance_client.accounts.get_by_id(account.id)) == account

    renamed = await finance_client.accounts.update(account.id, AccountForm(name="Everyday"))
    assert renamed.name == "Everyday"

    await finance_client.accounts.delete(account.id)
    assert await finance_client.accounts.get_all() == []

    with pytest.raises(ApiError) as excinfo:
        await finance_client.accounts.get_by_id(account.id)
    assert excinfo.value.status_code == 404
    assert excinfo.value.is_not_found

    restored = await finance_client.accounts.restore(account.id)
    assert restored.is_deleted is False
    assert [a.id for a in await finance_client.accounts.get_all()] == [account.id]


async def test_duplicate_account_reports_server_message(finance_client):
    await finance_client.accounts.create({"name": "Checking"})

    with pytest.raises(ApiError) as excinfo:
        await finance_client.accounts.create(AccountForm(name="Checking"))

    assert excinfo.value.status_code == 400
    assert excinfo.value.message == "An account with this name already exists"


async def test_budget_by_period_through_the_client(finance_client):
    category = await finance_client.categories.create({"name": "Groceries", "type": "expense"})
    budget = await finance_client.budgets.create({
        "amount": 500, "period": "monthly", "category": category.id, "start_date": "2024-01-01",
    })

    monthly = await finance_client.budgets.get_by_period("monthly")

    assert [b.id for b in monthly] == [budget.id]
    assert monthly[0].category_details.name == "Groceries"
    assert await finance_client.budgets.get_by_category_type("income") == []
    assert await finance_client.budgets.get_all(BudgetFilters(period="weekly")) == []


async def test_paginated_transactions(finance_client):
    account = await finance_client.accounts.create({"name": "Checking"})
    category = await finance_client.categories.create({"name": "Food", "type": "expense"})
    for i in range(15):
        await finance_client.transactions.create(TransactionForm(
            amount=i + 1, type="expense", description=f"Item {i}", category=category.id, account=account.id,
        ))

    page = await finance_client.transactions.get_all_paginated(page=2, limit=10)

    assert len(page.items) == 5
    assert page.pagination.count == 15
    assert page.pagination.total_pages == 2
    assert page.pagination.page == 2

    filtered = await finance_client.transactions.get_all_paginated(TransactionFilters(account=account.id), limit=20)
    assert filtered.pagination.count == 15


async def test_transaction_delete_and_restore_through_the_client(finance_client):
    account = await finance_client.accounts.create({"name": "Checking"})
    category = await finance_client.categories.create({"name": "Food", "type": "expense"})
    created = await finance_client.transactions.create({
        "amount": 50, "type": "expense", "description": "Market", "category": category.id, "account": account.id,
    })

    await finance_client.transactions.delete(created.id)
    assert created.id not in [t.id for t in await finance_client.transactions.get_all()]

    restored = await finance_client.transactions.restore(created.id)
    assert restored.model_dump(exclude={"updated_at"}) == created.model_dump(exclude={"updated_at"})


async def test_requests_without_token_are_sent_and_rejected_by_server(transport):
    async with FinanceClient("http://test/api", token_store=MemoryTokenStore(), transport=transport) as fc:
        with pytest.raises(ApiError) as excinfo:
            await fc.accounts.get_all()

    assert excinfo.value.status_code == 401
    assert excinfo.value.message == "Authentication required"


async def test_login_stores_token_and_logout_clears_it(finance_client, transport):
    store = MemoryTokenStore()
    async with FinanceClient("http://test/api", token_store=store, transport=transport) as fc:
        user = await fc.login("carol@example.com", "secret123")
        assert user.username == "carol"
        assert store.get()
        assert (await fc.current_user()).email == "carol@example.com"

        fc.logout()
        assert store.get() is None


async def test_bearer_token_is_attached():
    seen = {}

    def handler(request: httpx.Request):
        seen["auth"] = request.headers.get("authorization")
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"accounts": [], "count": 0, "page": 3, "limit": 5, "totalPages": 0})

    api = mock_api(handler, token="abc")
    page = await CrudService(api, ACCOUNTS).get_all_paginated(AccountFilters(type="cash"), page=3, limit=5)
    await api.aclose()

    assert seen["auth"] == "Bearer abc"
    assert seen["params"] == {"type": "cash", "page": "3", "limit": "5"}
    assert page.items == []


async def test_account_envelope_falls_back_to_total():
    def handler(request):
        return httpx.Response(200, json={"accounts": [], "total": 12, "page": 1, "limit": 10, "totalPages": 2})

    api = mock_api(handler)
    page = await CrudService(api, ACCOUNTS).get_all_paginated()
    await api.aclose()

    assert page.pagination.count == 12


async def test_other_envelopes_require_count():
    def handler(request):
        return httpx.Response(200, json={"transactions": [], "total": 12, "page": 1, "limit": 10, "totalPages": 2})

    api = mock_api(handler)
    with pytest.raises(ApiError) as excinfo:
        await CrudService(api, TRANSACTIONS).get_all_paginated()
    await api.aclose()

    assert "Malformed response" in excinfo.value.message


async def test_error_without_message_uses_status_fallback():
    api = mock_api(lambda request: httpx.Response(502, text="bad gateway"))

    with pytest.raises(ApiError) as excinfo:
        await CrudService(api, ACCOUNTS).get_by_id("x")
    await api.aclose()

    assert excinfo.value.message == "Request failed with status code 502"
    assert excinfo.value.status_code == 502


async def test_network_failure_becomes_api_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    api = mock_api(handler)
    with pytest.raises(ApiError) as excinfo:
        await CrudService(api, ACCOUNTS).delete("x")
    await api.aclose()

    assert excinfo.value.message == "connection refused"
    assert excinfo.value.status_code is None


async def test_network_failure_without_text_uses_generic_message():
    def handler(request):
        raise httpx.ConnectError("", request=request)

    api = mock_api(handler)
    with pytest.raises(ApiError) as excinfo:
        await CrudService(api, ACCOUNTS).delete("x")
    await api.aclose()

    assert excinfo.value.message == "An unknown error occurred"


def test_file_token_store(tmp_path):
    store = FileTokenStore(tmp_path / "nested" / "token")

    assert store.get() is None
    store.set("abc")
    assert store.get() == "abc"
    assert FileTokenStore(tmp_path / "nested" / "token").get() == "abc"
    store.clear()
    assert store.get() is None
    store.clear()
