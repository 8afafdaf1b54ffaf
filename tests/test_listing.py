from dataclasses import dataclass

import pytest

from fintrack.client.forms import validate_account_form, validate_budget_form, validate_transaction_form
from fintrack.client.http import ApiError
from fintrack.client.listing import Column, ListView
from fintrack.client.models import PaginationData


@dataclass
class Item:
    id: str
    name: str
    is_deleted: bool = False


ITEMS = [Item("1", "Rent"), Item("2", "Food", is_deleted=True), Item("3", "Fun")]
COLUMNS = [Column("name", "Name"), Column("id", "Id", render=lambda item: f"#{item.id}")]


def test_rows_follow_the_deleted_toggle():
    live = ListView(COLUMNS, on_restore=lambda item: None)
    deleted = ListView(COLUMNS, show_deleted=True, on_restore=lambda item: None)

    assert [row.item.id for row in live.rows(ITEMS)] == ["1", "3"]
    assert [row.item.id for row in deleted.rows(ITEMS)] == ["2"]
    assert live.rows(ITEMS)[0].cells == ["Rent", "#1"]


def test_each_row_offers_exactly_one_action_set():
    view = ListView(COLUMNS, on_restore=lambda item: None)

    assert view.actions_for(ITEMS[0]) == ("edit", "delete")
    assert view.actions_for(ITEMS[1]) == ("restore",)


def test_deleted_rows_without_restore_handler_have_no_actions():
    view = ListView(COLUMNS, show_deleted=True)

    assert [row.actions for row in view.rows(ITEMS)] == [()]


def test_empty_state_message_depends_on_toggle():
    assert ListView(COLUMNS, empty_state_message="accounts found.").render([]) == "accounts found."
    deleted = ListView(COLUMNS, empty_state_message="accounts found.", show_deleted=True)
    assert deleted.render([ITEMS[0]]) == "No deleted accounts found."


async def test_select_without_detail_fetch_uses_row_item():
    view = ListView(COLUMNS)

    assert await view.select(ITEMS[0]) is ITEMS[0]
    assert view.selected is ITEMS[0]


async def test_select_awaits_detail_fetch():
    calls = []

    async def fetch(item):
        calls.append(item.id)
        return Item(item.id, f"{item.name} (full)")

    view = ListView(COLUMNS, row_click_action=fetch)

    selected = await view.select(ITEMS[0])

    assert calls == ["1"]
    assert selected.name == "Rent (full)"
    assert view.selected == selected


async def test_failed_detail_fetch_keeps_message():
    async def fetch(item):
        raise ApiError("Account not found", 404)

    view = ListView(COLUMNS, row_click_action=fetch)

    assert await view.select(ITEMS[0]) is None
    assert view.error == "Account not found"
    assert view.render(ITEMS) == "Error: Account not found"


async def test_trigger_runs_matching_handler():
    deleted_ids = []

    async def on_delete(item):
        deleted_ids.append(item.id)

    view = ListView(COLUMNS, on_delete=on_delete, on_edit=lambda item: item.name)

    await view.trigger("delete", ITEMS[0])
    assert deleted_ids == ["1"]
    assert await view.trigger("edit", ITEMS[0]) == "Rent"
    with pytest.raises(ValueError):
        await view.trigger("restore", ITEMS[0])


def test_render_table_with_pagination():
    view = ListView(COLUMNS, pagination=PaginationData(count=2, page=1, limit=10, total_pages=1))

    lines = view.render(ITEMS).splitlines()

    assert lines[0].split() == ["Name", "Id", "Actions"]
    assert lines[2].split() == ["Rent", "#1", "edit", "/", "delete"]
    assert lines[-1] == "Page 1 of 1"


def test_transaction_form_validation():
    errors = validate_transaction_form({"amount": 0, "description": " ", "type": "expense"})

    assert set(errors) == {"amount", "description", "category", "account"}
    assert validate_transaction_form(
        {"amount": "12.5", "description": "Lunch", "type": "expense", "category": "c", "account": "a"}
    ) == {}


def test_budget_form_requires_end_after_start():
    base = {"amount": 100, "category": "c", "start_date": "2024-01-10"}

    assert validate_budget_form(base) == {}
    assert validate_budget_form({**base, "end_date": "2024-01-10"}) == {
        "end_date": "End date must be after start date"
    }
    assert validate_budget_form({**base, "end_date": "2024-02-01"}) == {}
    assert "start_date" in validate_budget_form({"amount": 100, "category": "c"})


def test_account_form_validation():
    assert validate_account_form({"name": "Main"}) == {}
    assert set(validate_account_form({"name": "", "type": "piggy"})) == {"name", "type"}
