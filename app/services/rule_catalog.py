# app/services/rule_catalog.py - Manitoba compliance rule catalog

import re
import logging
from typing import Dict, List, Any
from sqlalchemy.orm import Session
from app.models.compliance import ComplianceRule, ComplianceCategory, DeadlineType

logger = logging.getLogger(__name__)

CATALOG_VERSION = "2025.1"

IRCC_EXTEND_PERMIT_URL = "https://www.canada.ca/en/immigration-refugees-citizenship/services/study-canada/extend-study-permit.html"

DEFAULT_RULES: List[Dict[str, Any]] = [
    # STUDY PERMIT
    {
        "title": "Study Permit Validity Check",
        "description": "Ensure your study permit is valid and not expired. Apply for renewal at least 30 days before expiry.",
        "category": ComplianceCategory.STUDY_PERMIT,
        "deadline_type": DeadlineType.RELATIVE_TO_PERMIT,
        "deadline_days": 30,
        "priority": 10,
        "help_url": IRCC_EXTEND_PERMIT_URL,
    },
    {
        "title": "Maintain Valid Passport",
        "description": "Your passport must be valid for the duration of your study permit. Renew at least 6 months before expiry.",
        "category": ComplianceCategory.STUDY_PERMIT,
        "deadline_type": DeadlineType.ONE_TIME,
        "priority": 9,
    },
    {
        "title": "Report Change of Address to IRCC",
        "description": "You must report any change of address to IRCC within 30 days through your online account.",
        "category": ComplianceCategory.REPORTING,
        "deadline_type": DeadlineType.ONE_TIME,
        "priority": 7,
        "help_url": "https://www.canada.ca/en/immigration-refugees-citizenship/services/application/change-address.html",
    },
    # ENROLLMENT
    {
        "title": "Maintain Full-Time Enrollment",
        "description": "You must be enrolled as a full-time student at your DLI. Dropping below full-time without authorization violates your permit.",
        "category": ComplianceCategory.ENROLLMENT,
        "deadline_type": DeadlineType.RECURRING,
        "deadline_days": 120,  # Roughly each semester
        "priority": 10,
    },
    {
        "title": "Upload Current Enrollment Letter",
        "description": "Upload your enrollment verification letter for the current semester from your university registrar.",
        "category": ComplianceCategory.ENROLLMENT,
        "deadline_type": DeadlineType.RECURRING,
        "deadline_days": 120,
        "priority": 8,
    },
    # WORK AUTHORIZATION
    {
        "title": "Verify Off-Campus Work Eligibility",
        "description": "You can work up to 24 hours per week off-campus during academic sessions. Ensure you have a valid SIN.",
        "category": ComplianceCategory.WORK_AUTHORIZATION,
        "deadline_type": DeadlineType.ONE_TIME,
        "priority": 8,
        "help_url": "https://www.canada.ca/en/immigration-refugees-citizenship/services/study-canada/work/work-off-campus.html",
    },
    {
        "title": "Apply for Social Insurance Number (SIN)",
        "description": "You need a SIN to work in Canada. Apply at a Service Canada centre with your study permit.",
        "category": ComplianceCategory.WORK_AUTHORIZATION,
        "deadline_type": DeadlineType.ONE_TIME,
        "priority": 9,
        "help_url": "https://www.canada.ca/en/employment-social-development/services/sin/apply.html",
    },
    {
        "title": "Track Weekly Work Hours",
        "description": "Monitor your weekly work hours to stay under the 24-hour cap during academic sessions. Use the NorthStar work log.",
        "category": ComplianceCategory.WORK_AUTHORIZATION,
        "deadline_type": DeadlineType.RECURRING,
        "deadline_days": 7,
        "priority": 9,
    },
    # HEALTH INSURANCE
    {
        "title": "Enroll in Manitoba Health (MHSAL)",
        "description": "International students in Manitoba are eligible for provincial health coverage after a 6-month waiting period. Apply immediately upon arrival.",
        "category": ComplianceCategory.HEALTH_INSURANCE,
        "deadline_type": DeadlineType.ONE_TIME,
        "priority": 7,
        "help_url": "https://www.gov.mb.ca/health/mhsip/",
    },
    {
        "title": "Maintain Interim Health Insurance",
        "description": "Ensure you have private health insurance coverage during the 6-month MHSAL waiting period.",
        "category": ComplianceCategory.HEALTH_INSURANCE,
        "deadline_type": DeadlineType.FIXED_DATE,
        "deadline_days": 180,
        "priority": 8,
    },
    # TAXES
    {
        "title": "File Canadian Tax Return",
        "description": "International students must file a tax return by April 30 each year if they earned income. You may be eligible for GST/HST credit.",
        "category": ComplianceCategory.TAXES,
        "deadline_type": DeadlineType.FIXED_DATE,
        "deadline_days": 365,
        "priority": 6,
        "help_url": "https://www.canada.ca/en/revenue-agency/services/tax/international-non-residents/individuals-leaving-entering-canada-non-residents/newcomers-canada-immigrants.html",
    },
    # HOUSING
    {
        "title": "Review Manitoba Tenancy Rights",
        "description": "Familiarize yourself with the Residential Tenancies Act. Max security deposit is half month rent. Landlords need 3 months notice for rent increases.",
        "category": ComplianceCategory.HOUSING,
        "deadline_type": DeadlineType.ONE_TIME,
        "priority": 5,
        "help_url": "https://www.gov.mb.ca/cca/rtb/",
    },
]


def rule_slug(title: str) -> str:
    """Stable rule id derived from the title"""
    return re.sub(r"[^a-z0-9]", "-", title.lower())[:50]


def seed_rules(db: Session, rules: List[Dict[str, Any]] = None) -> Dict[str, int]:
    """
    Upsert the rule catalog. Safe to run repeatedly.

    Returns: {"created": 12, "updated": 0}
    """
    if rules is None:
        rules = DEFAULT_RULES

    results = {"created": 0, "updated": 0}

    for definition in rules:
        rule_id = rule_slug(definition["title"])
        values = {
            "title": definition["title"],
            "description": definition["description"],
            "category": definition["category"],
            "deadline_type": definition["deadline_type"],
            "deadline_days": definition.get("deadline_days"),
            "priority": definition.get("priority", 5),
            "is_active": definition.get("is_active", True),
            "help_url": definition.get("help_url"),
            "catalog_version": CATALOG_VERSION,
        }

        existing = db.query(ComplianceRule).filter(ComplianceRule.id == rule_id).first()
        if existing:
            for field, value in values.items():
                setattr(existing, field, value)
            results["updated"] += 1
        else:
            db.add(ComplianceRule(id=rule_id, **values))
            results["created"] += 1

    db.commit()
    logger.info(
        f"Rule catalog {CATALOG_VERSION} seeded: {results['created']} created, {results['updated']} updated"
    )
    return results


def get_active_rules(db: Session) -> List[ComplianceRule]:
    """Active rules, most urgent first"""
    return (
        db.query(ComplianceRule)
        .filter(ComplianceRule.is_active == True)
        .order_by(ComplianceRule.priority.desc(), ComplianceRule.id)
        .all()
    )
