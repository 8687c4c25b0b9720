"""Fixtures for plans and packages."""

import pytest

from app.models.roster import Package, Plan


@pytest.fixture(scope="function")
def setup_plan(db, faker, setup_user):
    """A plan created by ``setup_user`` with room for one buddy."""
    plan = Plan(
        user_id=setup_user.id,
        title=f"Trip to {faker.city()}",
        destination=faker.city(),
        max_buddies=1,
        member_count=0,
    )
    db.add(plan)
    db.commit()
    db.refresh(plan)
    return plan


@pytest.fixture(scope="function")
def setup_package(db, faker, setup_user):
    package = Package(
        user_id=setup_user.id,
        title=f"{faker.city()} weekend package",
        destination=faker.city(),
        member_count=0,
    )
    db.add(package)
    db.commit()
    db.refresh(package)
    return package
