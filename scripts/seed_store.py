"""Seed script for local storefront testing.

Creates:
- 1 merchant profile with a registered store name
- 1 public store (website enabled)
- 3 products: simple stock, variant stock, and one near its threshold
- 1 pending order ready to be moved to Processing

Localhost is never treated as a tenant host, so browse ``/store/demo-shop``
directly or send ``Host: demo-shop.koopi.online``.

Usage:
    uv run python -m scripts.seed_store
"""

import asyncio

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.config import get_settings
from storefront.core.database import Database
from storefront.models import Order, Product, Store, StoreName, UserProfile
from storefront.models.store import default_website

OWNER_ID = "seed-owner-0001"
SLUG = "demo-shop"
STORE_NAME = "Demo Shop"

TEE_ID = "seed-product-tee"
HOODIE_ID = "seed-product-hoodie"
MUG_ID = "seed-product-mug"
ORDER_ID = "seed-order-0001"


async def seed(session: AsyncSession) -> None:
    # Clean previous seed data
    for model, column in (
        (Order, Order.store_id),
        (Product, Product.store_id),
        (Store, Store.owner_id),
        (StoreName, StoreName.owner_id),
        (UserProfile, UserProfile.id),
    ):
        await session.execute(delete(model).where(column == OWNER_ID))
    await session.commit()

    session.add(
        UserProfile(
            id=OWNER_ID,
            email="owner@demo.test",
            store_name=STORE_NAME,
            store_name_slug=SLUG,
            subscription={"plan": "free", "status": "active", "productCount": 3},
            onboarding={"isCompleted": True, "addedFirstProduct": True},
        )
    )
    session.add(StoreName(slug=SLUG, owner_id=OWNER_ID, store_name=STORE_NAME))

    website = default_website(STORE_NAME)
    website["enabled"] = True
    session.add(
        Store(
            owner_id=OWNER_ID,
            store_name=STORE_NAME,
            store_name_slug=SLUG,
            store_description="Seeded store for local testing",
            store_category="Apparel",
            website=website,
            has_products=True,
        )
    )

    session.add_all(
        [
            Product(
                id=TEE_ID,
                store_id=OWNER_ID,
                name="Classic Tee",
                category="Shirts",
                price=20.0,
                inventory=50,
                quantity=50,
            ),
            Product(
                id=HOODIE_ID,
                store_id=OWNER_ID,
                name="Zip Hoodie",
                category="Outerwear",
                price=55.0,
                variant_stock={"color:black|size:M": 5, "color:black|size:L": 12},
                variant_low_stock_threshold={"color:black|size:M": 3},
            ),
            Product(
                id=MUG_ID,
                store_id=OWNER_ID,
                name="Logo Mug",
                category="Accessories",
                price=12.5,
                inventory=12,
                quantity=12,
                low_stock_threshold=10,
            ),
        ]
    )

    session.add(
        Order(
            id=ORDER_ID,
            store_id=OWNER_ID,
            customer_email="shopper@demo.test",
            customer_name="Sam Shopper",
            items=[
                {
                    "productId": HOODIE_ID,
                    "name": "Zip Hoodie",
                    "quantity": 2,
                    "price": 55.0,
                    "variant": {"size": "M", "color": "black"},
                },
                {"productId": MUG_ID, "name": "Logo Mug", "quantity": 3, "price": 12.5},
            ],
            total=147.5,
            status="Pending",
        )
    )
    await session.commit()


async def main() -> None:
    database = Database(get_settings().database_url)
    try:
        async with database.session_factory() as session:
            await seed(session)
    finally:
        await database.dispose()

    print("=" * 60)
    print("  Storefront seed data created successfully!")
    print("=" * 60)
    print()
    print(f"  Owner ID:     {OWNER_ID}")
    print(f"  Store slug:   {SLUG}")
    print(f"  Products:     {TEE_ID}, {HOODIE_ID}, {MUG_ID}")
    print(f"  Order:        {ORDER_ID} (Pending)")
    print()
    print("  Moving the order to Processing leaves the hoodie variant at 3")
    print("  and the mug at 9, raising two low-stock notifications.")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
