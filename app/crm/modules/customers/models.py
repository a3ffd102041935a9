from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.crm.models import Base


class Customer(Base):
    """
    Table definition only. Reads and deletes go through CustomerStore, which
    owns the SQL; rows are created by the initial migration.
    """

    __tablename__ = "customer"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)

    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    patronymic_name: Mapped[str | None] = mapped_column(String(100), nullable=True)

    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    email: Mapped[str | None] = mapped_column(String(200), nullable=True)


@dataclass(frozen=True)
class CustomerInfo:
    id: int
    first_name: str | None = None
    last_name: str | None = None
    patronymic_name: str | None = None
    phone: str | None = None
    email: str | None = None

    def to_dict(self) -> dict[str, Any]:
        # None stays None (JSON null); an empty string is a real value.
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "patronymicName": self.patronymic_name,
            "phone": self.phone,
            "email": self.email,
            "id": self.id,
        }


@dataclass(frozen=True)
class DeleteInfo:
    count: int
    ids: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"count": self.count, "ids": list(self.ids)}
