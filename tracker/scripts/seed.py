"""
Load demo data: sector projects, impact metrics, completion rates and an
approved super admin. Run from project root:
  python -m tracker.scripts.seed [--reset] [--admin-password PASSWORD]

--reset empties projects, impact metrics, completion rates and users first.
Audit logs are never removed.
"""
import argparse
import logging
import sys

from sqlalchemy.orm import Session

from tracker.core.database import SessionLocal
from tracker.core.errors import TrackerError
from tracker.models import CompletionRate, ImpactMetric, Project, User
from tracker.services.access import SUPER_ADMIN
from tracker.services.normalize import derive_community
from tracker.services.users import admin_create_user

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

# sector -> (infra projects, support projects, impact metrics, completion rate)
# Projects are (name, locations, year, status); metrics are (label, value).
SEED_DATA: dict[str, tuple[list, list, list, int]] = {
    "education": (
        [
            ("Classroom Blocks", "Nyong, Bagurugu", 2023, "completed"),
            ("ICT Centres", "Nyong, Bagurugu", 2025, "completed"),
            ("Teachers' Quarters", "Gatrego, Daragu", 2023, "ongoing"),
            ("Renovations", "Sandua, Sanvan", 2023, "ongoing"),
        ],
        [
            ("Furniture Distribution", "Nyong, Sandua", 2023, "completed"),
            ("Laptops & Tablets", "Sharmi Pepiragu", 2022, "planned"),
            ("Teaching Materials", "Zanala, Consaliv", 2023, "completed"),
        ],
        [("Schools Supported", "20+"), ("Students Benefited", "15K+"), ("ICT Access Points", "4")],
        85,
    ),
    "health": (
        [
            ("CHPS Compound", "Zandua, Kalariga", 2023, "completed"),
            ("Maternity Ward", "Karaga Hospital", 2023, "ongoing"),
            ("Staff Housing", "Nyong", 2024, "planned"),
            ("Lab Renovation", "Bagurugu", 2023, "completed"),
        ],
        [
            ("Medical Equipment", "All Centers", 2023, "completed"),
            ("Screening Exercise", "Sandua", 2023, "completed"),
            ("Health Insurance", "Aged Citizens", 2024, "ongoing"),
        ],
        [("Health Facilities", "12"), ("Patients Served", "30K+"), ("Medics Supported", "15")],
        72,
    ),
    "roads": (
        [
            ("Pishicu - Karago Road", "Pishicu", 2023, "completed"),
            ("Bridge Construction", "Nyong River", 2024, "ongoing"),
            ("Feeder Roads", "Constituency Wide", 2023, "completed"),
            ("Culvert Installation", "Sandua", 2024, "planned"),
        ],
        [
            ("Motorbike Distribution", "Extension Officers", 2022, "completed"),
            ("Road Maintenance", "Major Arteries", 2024, "ongoing"),
        ],
        [("Roads Improved", "50km+"), ("Communities Linked", "10+"), ("Bridges Built", "2")],
        65,
    ),
    "water": (
        [
            ("Borehole Drilling", "Multiple Communities", 2023, "completed"),
            ("Public Latrines", "Karaga Market", 2023, "completed"),
            ("Small Water System", "Bagurugu", 2024, "ongoing"),
            ("Pipe Extension", "Nyong", 2024, "planned"),
        ],
        [
            ("Clean Up Kits", "Youth Groups", 2023, "completed"),
            ("Hygiene Training", "Schools", 2024, "planned"),
        ],
        [("Safe Water Points", "30+"), ("Access to Water", "25K+"), ("Sanitation Blocks", "5")],
        78,
    ),
    "ict": (
        [
            ("Community ICT Hub", "Karaga Town", 2023, "completed"),
            ("Modern Lab Setup", "Secondary School", 2024, "ongoing"),
            ("E-Learning Center", "Sandua", 2025, "planned"),
        ],
        [
            ("Coding Bootcamps", "Youth", 2023, "completed"),
            ("Digital Literacy", "Teachers", 2023, "completed"),
        ],
        [("Laptops Provided", "100+"), ("Youth Trained", "2K+"), ("ICT Hubs", "3")],
        58,
    ),
    "jobs": (
        [
            ("Disabled Center", "Karaga", 2023, "completed"),
            ("Skills Center", "Nyong", 2024, "ongoing"),
        ],
        [
            ("Widows Support", "Constituency Wide", 2023, "completed"),
            ("Business Grants", "Market Women", 2024, "ongoing"),
        ],
        [("Widows Supported", "500+"), ("Grants Issued", "1K+"), ("Social Centers", "2")],
        82,
    ),
}


def reset(db: Session) -> None:
    for model in (Project, ImpactMetric, CompletionRate, User):
        deleted = db.query(model).delete(synchronize_session=False)
        logger.info("Cleared %s: %s rows", model.__tablename__, deleted)
    db.commit()


def seed(db: Session) -> int:
    """Insert the demo rows. Returns the number of projects added."""
    added = 0
    for sector, (infra, support, metrics, rate) in SEED_DATA.items():
        for category, rows in (("infra", infra), ("support", support)):
            for name, locations, year, status in rows:
                db.add(
                    Project(
                        name=name,
                        locations=locations,
                        sector=sector,
                        year=year,
                        status=status,
                        category=category,
                        community=derive_community(locations),
                    )
                )
                added += 1
        for label, value in metrics:
            db.add(ImpactMetric(sector=sector, label=label, val=value))
        if db.query(CompletionRate).filter(CompletionRate.sector == sector).first() is None:
            db.add(CompletionRate(sector=sector, rate=rate))
    db.commit()
    return added


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Load tracker demo data.")
    parser.add_argument("--reset", action="store_true", help="Empty seeded tables first")
    parser.add_argument("--admin-username", default="admin")
    parser.add_argument("--admin-password", default="password123")
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        if args.reset:
            reset(db)
        added = seed(db)
        try:
            admin_create_user(db, args.admin_username, args.admin_password, SUPER_ADMIN)
            logger.info("Created super admin '%s'", args.admin_username)
        except TrackerError as e:
            logger.warning("Super admin not created: %s", e.message)
        logger.info("Seeding complete: projects_added=%s", added)
        return 0
    except Exception as e:
        db.rollback()
        logger.exception("Seeding failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
