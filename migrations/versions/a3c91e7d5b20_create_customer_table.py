"""create customer table with seed rows

Revision ID: a3c91e7d5b20
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = "a3c91e7d5b20"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


SEED_CUSTOMERS = [
    {"id": 1, "first_name": "Клиент1", "last_name": "Клиентов1", "patronymic_name": "Клиентович1", "phone": "77777777777", "email": "test1@test.ru"},
    {"id": 2, "first_name": "Клиент2", "last_name": "Клиентов2", "patronymic_name": "Клиентович2", "phone": "77777777777", "email": "test2@test.ru"},
    {"id": 3, "first_name": "Клиент3", "last_name": "Клиентов3", "patronymic_name": "Клиентович3", "phone": "77777777777", "email": "test3@test.ru"},
    {"id": 4, "first_name": "Клиент4", "last_name": "Клиентов4", "patronymic_name": "Клиентович4", "phone": "77777777777", "email": "test4@test.ru"},
    {"id": 5, "first_name": "ДругойКлиент5", "last_name": "Клиентов5", "patronymic_name": "Клиентович5", "phone": "77777777777", "email": "test5@test.ru"},
]


def upgrade() -> None:
    bind = op.get_bind()
    insp = inspect(bind)
    if "customer" in set(insp.get_table_names()):
        return

    customer = op.create_table(
        "customer",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=False, nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=True),
        sa.Column("last_name", sa.String(length=100), nullable=True),
        sa.Column("patronymic_name", sa.String(length=100), nullable=True),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("email", sa.String(length=200), nullable=True),
    )
    op.bulk_insert(customer, SEED_CUSTOMERS)


def downgrade() -> None:
    # Undoing this revision means dropping customer and every row in it.
    # Left empty so a rollback never discards data; drop the table by hand if needed.
    pass
