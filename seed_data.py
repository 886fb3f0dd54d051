"""Seed data script for the research budget ledger database.

Populates the database with demo users, projects, allocations, a pending
request and a few expenses for development.  The script is idempotent: it
checks for existing records before inserting.

Usage (after ``alembic upgrade head``):
    python seed_data.py
"""

from __future__ import annotations

from decimal import Decimal

from app.database import SessionLocal
from app.models import BudgetEntry, BudgetRequest, Expense, Project, ProjectStaff, User
from app.utils.constants import BudgetCategory, RequestStatus, Role
from app.utils.fiscal_year import current_fiscal_year
from app.utils.security import hash_password

DEMO_PASSWORD = "Demo123!"

# ---------------------------------------------------------------------------
# Seed functions
# ---------------------------------------------------------------------------


def seed_users(session) -> dict[str, User]:
    """Insert one demo user per working role, keyed by role."""
    specs = [
        ("supervisor@research.local", "Sunita", "Rao", Role.SUPERVISOR),
        ("director@research.local", "Vikram", "Menon", Role.DIRECTOR),
        ("head.gap@research.local", "Anil", "Kumar", Role.PROJECT_HEAD),
        ("head.ssp@research.local", "Meera", "Iyer", Role.PROJECT_HEAD),
        ("scientist@research.local", "Ravi", "Shankar", Role.EMPLOYEE),
    ]
    users: dict[str, User] = {}
    for email, first, last, role in specs:
        user = session.query(User).filter(User.email == email).first()
        if user is None:
            user = User(
                email=email,
                password_hash=hash_password(DEMO_PASSWORD),
                first_name=first,
                last_name=last,
                role=role.value,
                is_active=True,
            )
            session.add(user)
            print(f"  [ADD]  {email} ({role.value})")
        else:
            print(f"  [SKIP] {email} already exists.")
        users[email] = user
    session.flush()
    return users


def seed_projects(session, users: dict[str, User]) -> list[Project]:
    """Insert two projects with their heads and one staff member."""
    specs = [
        ("GAP-0142", "Seismic retrofitting of heritage masonry", "head.gap@research.local"),
        ("SSP-0207", "Wind-induced fatigue in tall steel structures", "head.ssp@research.local"),
    ]
    projects: list[Project] = []
    for code, title, head_email in specs:
        project = session.query(Project).filter(Project.code == code).first()
        if project is None:
            project = Project(code=code, title=title, project_head_id=users[head_email].id)
            session.add(project)
            session.flush()
            print(f"  [ADD]  {code}")
        else:
            print(f"  [SKIP] {code} already exists.")
        projects.append(project)

    scientist = users["scientist@research.local"]
    if not session.query(ProjectStaff).filter(
        ProjectStaff.project_id == projects[0].id, ProjectStaff.user_id == scientist.id
    ).first():
        session.add(
            ProjectStaff(project_id=projects[0].id, user_id=scientist.id, designation="Scientist")
        )
        print(f"  [ADD]  {scientist.email} on {projects[0].code}")
    return projects


def seed_budget(session, projects: list[Project], users: dict[str, User]) -> None:
    """Insert current-year allocations, a pending request and some expenses."""
    fiscal_year = current_fiscal_year()
    if session.query(BudgetEntry).filter(BudgetEntry.fiscal_year == fiscal_year).count() > 0:
        print(f"  [SKIP] BudgetEntry — {fiscal_year} already has data.")
        return

    allocations = {
        BudgetCategory.MANPOWER: Decimal("1200000.00"),
        BudgetCategory.EQUIPMENT: Decimal("700000.00"),
        BudgetCategory.TRAVEL: Decimal("150000.00"),
        BudgetCategory.CONSUMABLES: Decimal("250000.00"),
    }
    for project in projects:
        for category, amount in allocations.items():
            session.add(
                BudgetEntry(
                    project_id=project.id,
                    category=category.value,
                    fiscal_year=fiscal_year,
                    allocated_amount=amount,
                    utilized_amount=Decimal("0"),
                )
            )
    session.flush()

    gap = projects[0]
    head = users["head.gap@research.local"]
    expenses = [
        (BudgetCategory.CONSUMABLES, Decimal("42500.00"), "Mortar samples and admixtures", "Ultratech Supplies"),
        (BudgetCategory.TRAVEL, Decimal("18750.00"), "Site survey, Hampi", "IRCTC"),
        (BudgetCategory.EQUIPMENT, Decimal("315000.00"), "Portable accelerometer array", "Kistler India"),
    ]
    for category, amount, description, vendor in expenses:
        session.add(
            Expense(
                project_id=gap.id,
                category=category.value,
                fiscal_year=fiscal_year,
                description=description,
                amount=amount,
                vendor=vendor,
                recorded_by_id=head.id,
            )
        )
        entry = (
            session.query(BudgetEntry)
            .filter(
                BudgetEntry.project_id == gap.id,
                BudgetEntry.category == category.value,
                BudgetEntry.fiscal_year == fiscal_year,
            )
            .one()
        )
        entry.utilized_amount = entry.utilized_amount + amount

    session.add(
        BudgetRequest(
            project_id=gap.id,
            requested_by_id=users["scientist@research.local"].id,
            category=BudgetCategory.TRAVEL.value,
            amount=Decimal("50000.00"),
            justification="Conference travel needed for the 18th World Conference on Earthquake Engineering",
            status=RequestStatus.PENDING.value,
        )
    )
    print(f"  [ADD]  {len(projects) * len(allocations)} entries, {len(expenses)} expenses, 1 request for {fiscal_year}")


def main() -> None:
    """Run the complete seed process within a single database transaction."""
    print("=" * 60)
    print("  Research Budget Ledger — Seed Data Script")
    print(f"  Fiscal year: {current_fiscal_year()}")
    print("=" * 60)

    session = SessionLocal()
    try:
        print("\n[1/3] Users...")
        users = seed_users(session)

        print("\n[2/3] Projects and staff...")
        projects = seed_projects(session, users)

        print("\n[3/3] Budget entries, expenses and requests...")
        seed_budget(session, projects, users)

        session.commit()
        print("\n" + "=" * 60)
        print(f"  Seed completed. Demo password: {DEMO_PASSWORD}")
        print("=" * 60)

    except Exception as exc:
        session.rollback()
        print("\n[ERROR] Seed failed — rolled back.")
        print(f"  Detail: {exc}")
        raise
    finally:
        session.close()


if __name__ == "__main__":
    main()
