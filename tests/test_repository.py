import pytest
from sqlalchemy import select

from fintrack.core.errors import BadRequestError, NotFoundError
from fintrack.core.seed import custom_date_parser, seed_data
from fintrack.models.finance import Account, Category, Transaction
from fintrack.models.user import User
from fintrack.services import repository


@pytest.fixture
async def owner(db):
    user = User(username="owner", email="owner@example.com", password_hash="x", first_name="Own", last_name="Er")
    return await repository.save(db, user)


async def test_visible_hides_deleted_rows_unless_asked(db, owner):
    kept = await repository.save(db, Account(name="Kept", user_id=owner.id))
    gone = await repository.save(db, Account(name="Gone", user_id=owner.id))
    await repository.soft_delete(db, gone)

    async def names(**flags):
        stmt = repository.visible(select(Account), Account, **flags).order_by(Account.name)
        return [a.name for a in (await db.execute(stmt)).scalars().all()]

    assert await names() == [kept.name]
    assert await names(include_deleted=True) == ["Gone", "Kept"]
    assert await names(only_deleted=True) == ["Gone"]


async def test_soft_delete_is_idempotent(db, owner):
    account = await repository.save(db, Account(name="Twice", user_id=owner.id))

    await repository.soft_delete(db, account)
    again = await repository.soft_delete(db, account)

    assert again.is_deleted is True


async def test_get_entity_respects_owner_and_deleted_flag(db, owner):
    account = await repository.save(db, Account(name="Mine", user_id=owner.id))

    assert (await repository.get_entity(db, Account, account.id, owner.id)).name == "Mine"
    with pytest.raises(NotFoundError):
        await repository.get_entity(db, Account, account.id, "someone-else")

    await repository.soft_delete(db, account)
    with pytest.raises(NotFoundError):
        await repository.get_entity(db, Account, account.id, owner.id)
    restored = await repository.restore(db, await repository.get_entity(
        db, Account, account.id, owner.id, only_deleted=True))
    assert restored.is_deleted is False


async def test_save_turns_unique_violation_into_bad_request(db, owner):
    await repository.save(db, Category(name="Food", type="expense", user_id=owner.id))

    with pytest.raises(BadRequestError) as excinfo:
        await repository.save(db, Category(name="Food", type="expense", user_id=owner.id), "taken")

    assert excinfo.value.message == "taken"
    assert excinfo.value.status_code == 400


async def test_fetch_page_counts_all_matches(db, owner):
    for i in range(7):
        await repository.save(db, Account(name=f"A{i}", user_id=owner.id))

    stmt = repository.apply_sort(select(Account), Account, "-name")
    items, total = await repository.fetch_page(db, stmt, page=2, limit=3)

    assert total == 7
    assert [a.name for a in items] == ["A3", "A2", "A1"]


def test_apply_sort_rejects_unknown_fields():
    with pytest.raises(BadRequestError):
        repository.apply_sort(select(Account), Account, "color")


def test_custom_date_parser_accepts_day_first_and_iso():
    assert custom_date_parser("05/03/24").strftime("%Y-%m-%d") == "2024-03-05"
    assert custom_date_parser("2024-03-05").strftime("%Y-%m-%d") == "2024-03-05"


async def test_seed_creates_demo_data_once(db, tmp_path):
    csv_path = tmp_path / "seed.csv"
    csv_path.write_text(
        "Date,Description,Category,Type,Amount,Account\n"
        "01/02/2024,Salary,Salary,Income,2500,Bank\n"
        "03/02/2024,Supermarket,Food,Expense,54.20,Bank\n"
        "04/02/2024,Coffee,Food,Expense,3.5,Cash\n"
        "05/02/2024,Broken row,Food,Expense,-1,Cash\n"
    )

    user = await seed_data(db, csv_path)

    assert user.username == "demo"
    accounts = (await db.execute(select(Account).order_by(Account.name))).scalars().all()
    assert [a.name for a in accounts] == ["Bank", "Cash"]
    transactions = (await db.execute(select(Transaction))).scalars().all()
    assert len(transactions) == 3
    assert await seed_data(db, csv_path) is None


async def test_save_reports_other_integrity_errors_separately(db, owner):
    with pytest.raises(BadRequestError) as excinfo:
        await repository.save(db, Account(name=None, user_id=owner.id), "taken")

    assert excinfo.value.message == "Invalid account data"


async def test_get_restorable_rejects_live_rows(db, owner):
    account = await repository.save(db, Account(name="Live", user_id=owner.id))

    with pytest.raises(BadRequestError) as excinfo:
        await repository.get_restorable(db, Account, account.id, owner.id)
    assert excinfo.value.message == "Account is not deleted"

    await repository.soft_delete(db, account)
    assert (await repository.get_restorable(db, Account, account.id, owner.id)).id == account.id


async def test_get_reference_hides_foreign_and_deleted_rows(db, owner):
    category = await repository.save(db, Category(name="Food", type="expense", user_id=owner.id))

    with pytest.raises(NotFoundError) as excinfo:
        await repository.get_reference(db, Category, category.id, "someone-else")
    assert excinfo.value.message == "Category not found or does not belong to the current user"

    await repository.soft_delete(db, category)
    with pytest.raises(NotFoundError):
        await repository.get_reference(db, Category, category.id, owner.id)
