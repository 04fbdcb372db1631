#!/usr/bin/env python3
"""
Seed demo users, tenders, listings and directory profiles into an empty database.
"""
from buildmarket.database import SessionLocal, init_db
from buildmarket.directory.models import Specialist, Crew
from buildmarket.marketplace.models import MarketplaceListing, ListingType
from buildmarket.moderation import ModerationStatus
from buildmarket.tenders.models import Tender, PersonType
from buildmarket.users.crud import create_user, count_users
from buildmarket.users.models import UserType

USERS = [
    {
        "username": "admin",
        "email": "admin@buildmarket.local",
        "password": "admin123",
        "user_type": UserType.COMPANY,
        "is_admin": True,
        "is_verified": True,
        "first_name": "Admin",
    },
    {
        "username": "customer",
        "email": "customer@buildmarket.local",
        "password": "customer123",
        "user_type": UserType.INDIVIDUAL,
        "first_name": "Anna",
        "last_name": "Petrova",
    },
    {
        "username": "contractor",
        "email": "contractor@buildmarket.local",
        "password": "contractor123",
        "user_type": UserType.CONTRACTOR,
        "first_name": "Ivan",
        "last_name": "Smirnov",
        "completed_projects": 12,
        "is_top_specialist": True,
    },
]


def seed(db):
    if count_users(db) > 0:
        return False

    users = {}
    for data in USERS:
        data = dict(data)
        users[data["username"]] = create_user(db, **data)

    customer = users["customer"]
    contractor = users["contractor"]
    approved = {"moderation_status": ModerationStatus.APPROVED, "moderated_by": users["admin"].id}

    db.add_all([
        Tender(
            user_id=customer.id,
            title="Renovate a two-room apartment",
            description="Full renovation of a 54 m2 apartment: walls, floors, plumbing and electrical.",
            category="services",
            subcategory="repair",
            budget=450000,
            location="Moscow",
            person_type=PersonType.INDIVIDUAL,
            required_professions=["plasterer", "electrician", "plumber"],
            **approved,
        ),
        Tender(
            user_id=customer.id,
            title="Build a timber frame summer house",
            description="Turnkey 6x8 m frame house on screw piles, roofing included.",
            category="services",
            subcategory="construction",
            budget=1200000,
            location="Tver region",
            person_type=PersonType.INDIVIDUAL,
            required_professions=["carpenter"],
        ),
        MarketplaceListing(
            user_id=contractor.id,
            title="Concrete mixer 180 L",
            description="Electric concrete mixer in good condition, used for one season.",
            category="equipment",
            subcategory="concrete_mixers",
            price=15000,
            listing_type=ListingType.SELL,
            location="Moscow",
            condition="used",
            **approved,
        ),
        MarketplaceListing(
            user_id=contractor.id,
            title="Scaffolding for rent",
            description="Frame scaffolding sets, delivery within the city.",
            category="tools",
            subcategory="scaffolding",
            price=500,
            listing_type=ListingType.RENT,
            location="Moscow",
            **approved,
        ),
        Specialist(
            user_id=contractor.id,
            title="Electrician with 10 years of experience",
            description="Apartment and house wiring, switchboards, lighting. Work to code with a warranty.",
            specialty="electrician",
            experience=10,
            hourly_rate=1500,
            location="Moscow",
            specializations=["wiring", "switchboards", "lighting"],
            **approved,
        ),
        Crew(
            user_id=contractor.id,
            title="Finishing crew of five craftsmen",
            description="Plastering, tiling, drywall and painting. Our own tools and transport.",
            specialty="finishing",
            experience=8,
            member_count=5,
            daily_rate=25000,
            location="Moscow",
            specializations=["plastering", "tiling", "drywall"],
        ),
    ])
    db.commit()
    return True


def main():
    init_db()
    db = SessionLocal()
    try:
        if seed(db):
            print("Demo data created")
        else:
            print("Database already has users, nothing to seed")
    finally:
        db.close()


if __name__ == "__main__":
    main()
