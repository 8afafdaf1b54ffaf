import logging
import os

import pandas as pd
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fintrack.config import settings
from fintrack.core.security import hash_password
from fintrack.models.finance import Account, Category, Transaction
from fintrack.models.user import User

logger = logging.getLogger(__name__)

DEMO_USER = {
    "username": "demo",
    "email": "demo@example.com",
    "first_name": "Demo",
    "last_name": "Account",
    "currency": "USD",
}
DEMO_PASSWORD = "demo1234"


def custom_date_parser(date_str):
    if pd.isna(date_str): return pd.NaT
    date_str = str(date_str).strip()
    for sep in ['/', '.', '-']:
        if sep in date_str:
            parts = date_str.split(sep)
            if len(parts) == 3:
                if len(parts[0]) == 4:
                    y, m, d = parts
                else:
                    d, m, y = parts
                if len(y) == 2: y = '20' + y
                return pd.Timestamp(year=int(y), month=int(m), day=int(d))
    return pd.NaT


def load_seed_frame(csv_path) -> pd.DataFrame:
    df = pd.read_csv(csv_path)
    col_map = {
        'Date': 'date', 'Description': 'description', 'Category': 'category',
        'Type': 'type', 'Amount': 'amount', 'Account': 'account',
    }
    df = df.rename(columns=col_map)
    df['date'] = df['date'].apply(custom_date_parser)
    df['amount'] = pd.to_numeric(df['amount'], errors='coerce')
    df['type'] = df['type'].astype(str).str.strip().str.lower()
    df = df.dropna(subset=['date', 'amount'])
    df = df[(df['amount'] > 0) & df['type'].isin(['income', 'expense'])]
    if 'account' not in df.columns:
        df['account'] = 'Main'
    df['account'] = df['account'].fillna('Main').astype(str).str.strip()
    df['category'] = df['category'].fillna('Misc').astype(str).str.strip().replace('', 'Misc')
    df['description'] = df['description'].fillna('').astype(str).str.strip()
    return df.sort_values('date').reset_index(drop=True)


async def seed_data(db: AsyncSession, csv_path=None):
    count = (await db.execute(select(func.count(User.id)))).scalar()
    if count > 0:
        logger.info("Database already has %s users. Skipping seed.", count)
        return None

    csv_path = csv_path or settings.SEED_CSV_PATH
    if not os.path.exists(csv_path):
        return None

    try:
        df = load_seed_frame(csv_path)
    except (OSError, ValueError, KeyError) as e:
        logger.warning("Seeding skipped, unreadable CSV %s: %s", csv_path, e)
        return None

    user = User(**DEMO_USER, password_hash=hash_password(DEMO_PASSWORD))
    db.add(user)
    await db.flush()

    accounts = {name: Account(name=name, type="bank", user_id=user.id) for name in df['account'].unique()}
    categories = {
        (name, tx_type): Category(name=name, type=tx_type, user_id=user.id)
        for name, tx_type in df[['category', 'type']].drop_duplicates().itertuples(index=False)
    }
    db.add_all(list(accounts.values()) + list(categories.values()))
    await db.flush()

    transactions = [
        Transaction(
            amount=float(row.amount),
            type=row.type,
            description=row.description or row.category,
            date=row.date.to_pydatetime(),
            category_id=categories[(row.category, row.type)].id,
            account_id=accounts[row.account].id,
            user_id=user.id,
        )
        for row in df.itertuples(index=False)
    ]
    db.add_all(transactions)
    await db.commit()
    logger.info("Seeded %s transactions for user %s.", len(transactions), user.username)
    return user
