from __future__ import annotations

import argparse
from decimal import Decimal

from packages.shared.schemas.order_v1 import OrderStatusV1
from services.api.app.db.database import db_session
from services.api.app.db.init_db import init_db
from services.api.app.db.models import (
    Address,
    DeliveryAgent,
    MenuItem,
    Restaurant,
    RestaurantAdmin,
    Review,
    Role,
    User,
)
from services.api.app.services import lifecycle


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed the FoodOrder sample catalog and ledger")
    parser.add_argument(
        "--skip-orders",
        action="store_true",
        help="Seed reference data and the catalog only, without the sample paid orders",
    )
    args = parser.parse_args()

    init_db()

    db = db_session()
    try:
        if db.query(Restaurant).limit(1).count():
            print("Catalog already seeded")
            return 0

        customer_role, owner_role, admin_role = (
            Role(name="customer"),
            Role(name="restaurant_owner"),
            Role(name="admin"),
        )
        db.add_all([customer_role, owner_role, admin_role])
        db.flush()

        john = User(
            name="John Doe", email="john@gmail.com", phone="9876543210", role_id=customer_role.id
        )
        alice = User(
            name="Alice Smith", email="alice@yahoo.com", phone="9123456780", role_id=owner_role.id
        )
        admin = User(
            name="Admin User", email="admin@foodsys.com", phone="9000000000", role_id=admin_role.id
        )
        db.add_all([john, alice, admin])
        db.flush()

        home = Address(user_id=john.id, street="221B Baker Street", city="London", pincode="NW16XE")
        work = Address(user_id=john.id, street="44 Albert Road", city="London", pincode="SE12GP")
        shop = Address(user_id=alice.id, street="12 Rose Lane", city="London", pincode="E17HZ")
        db.add_all([home, work, shop])

        italiano = Restaurant(
            name="Italiano House",
            contact="020012345",
            cuisine_type="Italian",
            owner_user_id=alice.id,
            license="LIC-IT-001",
        )
        burgers = Restaurant(
            name="Burger Hub",
            contact="020098765",
            cuisine_type="Fast Food",
            owner_user_id=alice.id,
            license="LIC-BG-002",
        )
        db.add_all([italiano, burgers])
        db.flush()

        db.add_all(
            [
                RestaurantAdmin(restaurant_id=italiano.id, user_id=alice.id, access_level="owner"),
                RestaurantAdmin(restaurant_id=burgers.id, user_id=alice.id, access_level="owner"),
            ]
        )

        pasta, pizza, burger, fries = (
            MenuItem(
                restaurant_id=restaurant.id, name=name, price=Decimal(price), availability=stock
            )
            for restaurant, name, price, stock in (
                (italiano, "Pasta Alfredo", "10.99", 100),
                (italiano, "Margherita Pizza", "8.49", 50),
                (burgers, "Cheese Burger", "6.99", 200),
                (burgers, "French Fries", "3.49", 300),
            )
        )
        db.add_all([pasta, pizza, burger, fries])

        db.add_all(
            [
                Review(
                    customer_id=john.id,
                    restaurant_id=italiano.id,
                    rating=5,
                    comment="Delicious pasta, quick service!",
                ),
                Review(
                    customer_id=john.id,
                    restaurant_id=burgers.id,
                    rating=4,
                    comment="Tasty burgers, fries were okay.",
                ),
                DeliveryAgent(name="Bob Rider", contact="0770000001"),
            ]
        )
        db.commit()

        if not args.skip_orders:
            # Sample history goes through the engine so amounts and stock stay consistent.
            for restaurant, address, lines in (
                (italiano, home, ((pasta, 2), (pizza, 1))),
                (burgers, work, ((burger, 3), (fries, 0))),
            ):
                order_id = lifecycle.place_order(db, john.id, restaurant.id, address.id)
                for menu_item, quantity in lines:
                    lifecycle.add_line_item(db, order_id, menu_item.id, quantity)
                total = lifecycle.get_order(db, order_id).amount
                lifecycle.record_payment(db, order_id, total, method="CREDIT_CARD")
                lifecycle.set_order_status(db, order_id, OrderStatusV1.DELIVERED)

        print("Seeded FoodOrder sample data")
        return 0
    finally:
        db.close()


if __name__ == "__main__":
    raise SystemExit(main())
