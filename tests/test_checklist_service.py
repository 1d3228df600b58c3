"""Checklist initialization, stats and user-driven status changes."""

from datetime import date, datetime
from unittest.mock import patch

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.database import Base
from app.models.compliance import ComplianceItem, ComplianceRule, ComplianceStatus
from app.services.checklist_service import (
    ChecklistService,
    ChecklistAlreadyInitialized,
    NoActiveRules,
)
from app.services.permit_service import PermitService
from app.services.rule_catalog import DEFAULT_RULES, rule_slug, seed_rules

from conftest import make_user

NOW = datetime(2026, 3, 2, 8, 0)
PERMIT_RULE_ID = rule_slug("Study Permit Validity Check")


def _items_by_rule(db, user_id):
    items = db.query(ComplianceItem).filter(ComplianceItem.user_id == user_id).all()
    return {item.rule_id: item for item in items}


def test_initialize_creates_one_pending_item_per_active_rule(db, user, seeded_rules):
    count = ChecklistService(db).initialize(user.id, NOW)

    assert count == len(DEFAULT_RULES)
    items = _items_by_rule(db, user.id)
    assert len(items) == len(DEFAULT_RULES)
    assert all(item.status == ComplianceStatus.PENDING for item in items.values())


def test_initialize_skips_inactive_rules(db, user, seeded_rules):
    rule = db.query(ComplianceRule).filter(ComplianceRule.id == PERMIT_RULE_ID).one()
    rule.is_active = False
    db.commit()

    count = ChecklistService(db).initialize(user.id, NOW)

    assert count == len(DEFAULT_RULES) - 1
    assert PERMIT_RULE_ID not in _items_by_rule(db, user.id)


def test_initialize_uses_permit_expiry_for_relative_rules(db, user, seeded_rules):
    PermitService(db).upsert(user.id, date(2026, 9, 15), NOW)

    ChecklistService(db).initialize(user.id, NOW)

    item = _items_by_rule(db, user.id)[PERMIT_RULE_ID]
    assert item.due_date.date() == date(2026, 8, 16)


def test_initialize_without_permit_leaves_relative_rules_undated(db, user, seeded_rules):
    ChecklistService(db).initialize(user.id, NOW)

    items = _items_by_rule(db, user.id)
    assert items[PERMIT_RULE_ID].due_date is None
    assert items[rule_slug("File Canadian Tax Return")].due_date == datetime(2027, 3, 2, 8, 0)


def test_initialize_twice_is_rejected(db, user, seeded_rules):
    service = ChecklistService(db)
    service.initialize(user.id, NOW)

    with pytest.raises(ChecklistAlreadyInitialized):
        service.initialize(user.id, NOW)

    assert len(_items_by_rule(db, user.id)) == len(DEFAULT_RULES)


def test_initialize_without_rules_fails(db, user):
    with pytest.raises(NoActiveRules):
        ChecklistService(db).initialize(user.id, NOW)


def test_initialize_is_per_user(db, user, other_user, seeded_rules):
    service = ChecklistService(db)
    service.initialize(user.id, NOW)

    assert service.initialize(other_user.id, NOW) == len(DEFAULT_RULES)


def test_concurrent_initialize_creates_a_single_checklist(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'race.db'}")
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    setup = Session()
    seed_rules(setup)
    student = make_user(setup)
    user_id = student.id
    setup.close()

    first, second = Session(), Session()

    from app.services import checklist_service

    real_get_active_rules = checklist_service.get_active_rules
    raced = []

    def racing_get_active_rules(session):
        # The other request finishes between our count check and our insert
        if not raced:
            raced.append(True)
            ChecklistService(first).initialize(user_id, NOW)
        return real_get_active_rules(session)

    with patch.object(checklist_service, "get_active_rules", side_effect=racing_get_active_rules):
        with pytest.raises(ChecklistAlreadyInitialized):
            ChecklistService(second).initialize(user_id, NOW)

    check = Session()
    assert (
        check.query(ComplianceItem).filter(ComplianceItem.user_id == user_id).count()
        == len(DEFAULT_RULES)
    )
    for session in (first, second, check):
        session.close()
    engine.dispose()


def test_due_dates_are_frozen_when_permit_changes(db, user, seeded_rules):
    permits = PermitService(db)
    permits.upsert(user.id, date(2026, 9, 15), NOW)
    ChecklistService(db).initialize(user.id, NOW)

    permits.upsert(user.id, date(2027, 9, 15), NOW)

    item = _items_by_rule(db, user.id)[PERMIT_RULE_ID]
    db.refresh(item)
    assert item.due_date.date() == date(2026, 8, 16)


def test_update_item_sets_completed_at_only_when_completed(db, user, seeded_rules):
    service = ChecklistService(db)
    service.initialize(user.id, NOW)
    item = _items_by_rule(db, user.id)[PERMIT_RULE_ID]

    done = service.update_item(user.id, item.id, ComplianceStatus.COMPLETED, NOW, notes="Submitted")
    assert done.completed_at == NOW
    assert done.notes == "Submitted"

    reopened = service.update_item(user.id, item.id, ComplianceStatus.IN_PROGRESS, NOW)
    assert reopened.status == ComplianceStatus.IN_PROGRESS
    assert reopened.completed_at is None
    assert reopened.notes == "Submitted"


def test_update_item_of_another_user_is_not_found(db, user, other_user, seeded_rules):
    service = ChecklistService(db)
    service.initialize(user.id, NOW)
    item = _items_by_rule(db, user.id)[PERMIT_RULE_ID]

    assert service.update_item(other_user.id, item.id, ComplianceStatus.COMPLETED, NOW) is None
    db.refresh(item)
    assert item.status == ComplianceStatus.PENDING


def test_checklist_is_ordered_and_counted(db, user, seeded_rules):
    service = ChecklistService(db)
    service.initialize(user.id, NOW)
    items = service.get_checklist(user.id)

    priorities = [item.rule.priority for item in items]
    assert priorities == sorted(priorities, reverse=True)

    service.update_item(user.id, items[0].id, ComplianceStatus.COMPLETED, NOW)
    stats = service.calculate_stats(service.get_checklist(user.id))
    assert stats["total"] == len(DEFAULT_RULES)
    assert stats["completed"] == 1
    assert stats["pending"] == len(DEFAULT_RULES) - 1
    assert stats["completion_rate"] == round(100 / len(DEFAULT_RULES))


def test_stats_for_empty_checklist():
    stats = ChecklistService.calculate_stats([])
    assert stats["total"] == 0
    assert stats["completion_rate"] == 0
