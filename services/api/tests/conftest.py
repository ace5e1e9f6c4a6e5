from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path

import pytest
from sqlalchemy.orm import Session


@dataclass(frozen=True)
class Catalog:
    customer_id: int
    other_customer_id: int
    owner_id: int
    address_id: int
    restaurant_id: int
    other_restaurant_id: int
    pasta_id: int
    pizza_id: int
    fries_id: int
    burger_id: int


@pytest.fixture()
def db(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Session]:
    db_path = tmp_path / "foodorder_test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{db_path}")
    monkeypatch.setenv("FOODORDER_DB_AUTO_CREATE", "true")

    from services.api.app.db.database import db_session
    from services.api.app.db.init_db import init_db

    init_db()
    session = db_session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def catalog(db: Session) -> Catalog:
    from services.api.app.db.models import Address, MenuItem, Restaurant, Role, User

    role = Role(name="customer")
    db.add(role)
    db.flush()

    john = User(name="John Doe", email="john@example.com", role_id=role.id)
    jane = User(name="Jane Roe", email="jane@example.com", role_id=role.id)
    alice = User(name="Alice Smith", email="alice@example.com", role_id=role.id)
    db.add_all([john, jane, alice])
    db.flush()

    address = Address(user_id=john.id, street="221B Baker Street", city="London")
    italiano = Restaurant(name="Italiano House", cuisine_type="Italian", owner_user_id=alice.id)
    burgers = Restaurant(name="Burger Hub", cuisine_type="Fast Food")
    db.add_all([address, italiano, burgers])
    db.flush()

    pasta = MenuItem(
        restaurant_id=italiano.id, name="Pasta Alfredo", price=Decimal("10.99"), availability=100
    )
    pizza = MenuItem(
        restaurant_id=italiano.id, name="Margherita Pizza", price=Decimal("8.49"), availability=50
    )
    fries = MenuItem(
        restaurant_id=burgers.id, name="French Fries", price=Decimal("3.49"), availability=300
    )
    burger = MenuItem(
        restaurant_id=burgers.id, name="Cheese Burger", price=Decimal("6.99"), availability=3
    )
    db.add_all([pasta, pizza, fries, burger])
    db.flush()

    built = Catalog(
        customer_id=john.id,
        other_customer_id=jane.id,
        owner_id=alice.id,
        address_id=address.id,
        restaurant_id=italiano.id,
        other_restaurant_id=burgers.id,
        pasta_id=pasta.id,
        pizza_id=pizza.id,
        fries_id=fries.id,
        burger_id=burger.id,
    )
    db.commit()
    return built
