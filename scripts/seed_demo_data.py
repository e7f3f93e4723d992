#!/usr/bin/env python3
"""Seed a development database with users, customers and inquiries.

Creates the agent user used by X-Agent-Key auth, a handful of VP/VPP
users, customers, and submitted inquiries with unassigned items so the
assignment board has something to show. Skips rows that already exist
(matched by email / customer name / inquiry title).

Usage:
    PYTHONPATH=. python scripts/seed_demo_data.py [--create-tables]
"""

import argparse
import logging
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from app.config import settings  # noqa: E402
from app.database import SessionLocal, engine  # noqa: E402
from app.logging_config import setup_logging  # noqa: E402
from app.models import Base, Customer, Inquiry, InquiryItem, User  # noqa: E402

log = logging.getLogger("inquiry.seed")

USERS = [
    (settings.agent_email, "Assignment Agent", "ADMIN"),
    ("vpp@inquiries.local", "Vesna Petrović", "VPP"),
    ("vp1@inquiries.local", "Marko Kovač", "VP"),
    ("vp2@inquiries.local", "Ana Horvat", "VP"),
    ("sales@inquiries.local", "Ivan Babić", "SALES"),
]

CUSTOMERS = ["Acme Manufacturing", "Nordic Steelworks", "Adriatic Marine"]

INQUIRIES = [
    ("Q3 Order", "Acme Manufacturing", "HIGH", [("Steel Bracket", 500, "pcs"), ("Hinge Plate", 200, "pcs")]),
    ("Frame Assembly", "Nordic Steelworks", "URGENT", [("Welded Frame", 12, "pcs")]),
    ("Hull Fittings", "Adriatic Marine", "MEDIUM", [("Cleat", 80, "pcs"), ("Rail Tube", 40, "m")]),
    ("Spare Parts", "Acme Manufacturing", "LOW", [("Bolt M12", 5000, "pcs")]),
]


def seed(db) -> dict:
    counts = {"users": 0, "customers": 0, "inquiries": 0, "items": 0}

    users = {u.email: u for u in db.query(User).all()}
    for email, name, role in USERS:
        if email not in users:
            users[email] = User(email=email, name=name, role=role, is_active=True)
            db.add(users[email])
            counts["users"] += 1
    db.flush()

    customers = {c.name: c for c in db.query(Customer).all()}
    for name in CUSTOMERS:
        if name not in customers:
            customers[name] = Customer(name=name, is_active=True)
            db.add(customers[name])
            counts["customers"] += 1
    db.flush()

    existing = {title for (title,) in db.query(Inquiry.title).all()}
    creator = users["sales@inquiries.local"]
    for title, customer_name, priority, items in INQUIRIES:
        if title in existing:
            continue
        inquiry = Inquiry(
            title=title,
            status="SUBMITTED",
            priority=priority,
            customer_id=customers[customer_name].id,
            created_by_id=creator.id,
        )
        for name, quantity, unit in items:
            inquiry.items.append(InquiryItem(name=name, quantity=quantity, unit=unit, status="PENDING"))
            counts["items"] += 1
        db.add(inquiry)
        counts["inquiries"] += 1

    db.commit()
    return counts


def main():
    parser = argparse.ArgumentParser(description="Seed demo data")
    parser.add_argument("--create-tables", action="store_true", help="create_all before seeding")
    args = parser.parse_args()
    setup_logging()

    if args.create_tables:
        Base.metadata.create_all(bind=engine, checkfirst=True)

    with SessionLocal() as db:
        counts = seed(db)
    log.info("Seeded %s", counts)


if __name__ == "__main__":
    main()
