"""
HireLog Database Seeder

Creates demo users and one candidate (Jordan Blake) with:
- Both users on the access list
- A status change recorded in the history
- A note mentioning the second user, with its notification
"""

import sys
sys.path.insert(0, ".")

from hirelog.db.session import SessionLocal, engine
from hirelog.db.base import Base
from hirelog.models import User
from hirelog.schemas import CandidateCreate
from hirelog.services.candidates import add_candidate, update_candidate_status
from hirelog.services.notes import post_note
from hirelog.services.session import register_account


def seed_database():
    """Seed the database with test data."""

    # Create all tables
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()

    try:
        # Check if already seeded
        existing = db.query(User).filter(User.name == "sarah").first()
        if existing:
            print("Database already seeded. Skipping...")
            return

        print("Seeding database...")

        # 1. Two recruiters
        _, sarah = register_account(db, "sarah", "sarah@hirelog.dev", "recruiter123")
        _, alex = register_account(db, "alex", "alex@hirelog.dev", "recruiter123")

        # 2. Candidate created by Sarah and shared with Alex
        jordan = add_candidate(
            db,
            sarah,
            CandidateCreate(
                name="Jordan Blake",
                email="jordan.blake@example.com",
                phone="+1 555 0100",
                location="Berlin",
                experience="5 years",
                role="Backend Engineer",
                assigned_users=[alex.uid],
            ),
        )

        # 3. Move through the pipeline
        update_candidate_status(db, sarah, jordan.id, "active")

        # 4. Note with a mention -> notification for Alex
        post_note(db, sarah, jordan.id, "Strong systems background. @alex can you run the tech screen?")

        print("Database seeded successfully!")
        print("\nTest Credentials:")
        print("  Recruiter: sarah / recruiter123")
        print("  Recruiter: alex@hirelog.dev / recruiter123")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
