# backend/tmsdb/scripts/seed_reference_data.py
"""
Load the reference data a fresh database needs: lookup tables, allowance
types and statuses, the role set and the default accounts.

Idempotent: each table is only filled while it is empty, and accounts are
matched by email. Run with `python -m tmsdb.scripts.seed_reference_data`.
"""

from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Type

from sqlalchemy.orm import Session

from tmsdb.database import WriteSessionLocal
from tmsdb.apps.accounts import services as account_services
from tmsdb.apps.accounts.models import RoleName
from tmsdb.apps.allowances import models as allowance_models
from tmsdb.apps.lookups import models as lookup_models

logger = logging.getLogger(__name__)


DEPARTMENTS = [
    ("Ministry of Health", "MOH", "Ministry of Health and Wellness"),
    ("Ministry of Education", "MOE", "Ministry of Education and Skills Development"),
    ("Ministry of Finance", "MOF", "Ministry of Finance and Economic Development"),
    ("Ministry of Agriculture", "MOA", "Ministry of Agriculture and Food Security"),
    ("Ministry of Transport", "MOT", "Ministry of Transport and Public Works"),
    ("Ministry of Local Government", "MLG", "Ministry of Local Government and Rural Development"),
    ("Ministry of Defence", "MOD", "Ministry of Defence, Justice and Security"),
    ("Ministry of Environment", "MEWT", "Ministry of Environment, Wildlife and Tourism"),
    ("Ministry of Trade", "MITI", "Ministry of Trade and Industry"),
    ("Ministry of Youth", "MYS", "Ministry of Youth Empowerment, Sport and Culture Development"),
]

FACILITIES = [
    ("Princess Marina Hospital", "PMH", "Gaborone", "Referral Hospital - Gaborone"),
    ("Nyangabgwe Referral Hospital", "NRH", "Francistown", "Referral Hospital - Francistown"),
    ("Scottish Livingstone Hospital", "SLH", "Molepolole", "Referral Hospital - Molepolole"),
    ("Sekgoma Memorial Hospital", "SMH", "Serowe", "District Hospital - Serowe"),
    ("Mahalapye District Hospital", "MDH", "Mahalapye", "District Hospital - Mahalapye"),
    ("Maun General Hospital", "MGH", "Maun", "District Hospital - Maun"),
    ("Kanye Seventh Day Adventist Hospital", "KSDAH", "Kanye", "Private Hospital - Kanye"),
    ("Bokamoso Private Hospital", "BPH", "Gaborone", "Private Hospital - Gaborone"),
    ("Deborah Retief Memorial Hospital", "DRMH", "Mochudi", "District Hospital - Mochudi"),
    ("Letsholathebe II Memorial Hospital", "LMH", "Maun", "District Hospital - Maun"),
]

DESIGNATIONS = [
    ("Medical Officer", "MO", "Senior", "Qualified medical doctor"),
    ("Senior Medical Officer", "SMO", "Senior", "Senior qualified medical doctor"),
    ("Consultant", "CONS", "Principal", "Medical specialist consultant"),
    ("Registered Nurse", "RN", "Junior", "Registered professional nurse"),
    ("Senior Registered Nurse", "SRN", "Senior", "Senior registered professional nurse"),
    ("Principal Registered Nurse", "PRN", "Principal", "Principal registered professional nurse"),
    ("Pharmacist", "PHARM", "Senior", "Qualified pharmacist"),
    ("Senior Pharmacist", "SPHARM", "Principal", "Senior qualified pharmacist"),
    ("Pharmacy Technician", "PTECH", "Junior", "Pharmacy technician"),
    ("Laboratory Technologist", "LABTECH", "Senior", "Medical laboratory technologist"),
    ("Radiographer", "RAD", "Senior", "Medical radiographer"),
    ("Physiotherapist", "PHYSIO", "Senior", "Qualified physiotherapist"),
    ("Dental Officer", "DO", "Senior", "Qualified dental officer"),
    ("Health Education Assistant", "HEA", "Junior", "Health education specialist"),
    ("Administrative Officer", "AO", "Junior", "Administrative support officer"),
]

SALARY_SCALES = [
    ("Scale A", "A", 2000, 4000, "Entry level positions - BWP 2,000 - BWP 4,000"),
    ("Scale B", "B", 4000, 6000, "Junior positions - BWP 4,000 - BWP 6,000"),
    ("Scale C", "C", 6000, 10000, "Mid-level positions - BWP 6,000 - BWP 10,000"),
    ("Scale D", "D", 10000, 15000, "Senior positions - BWP 10,000 - BWP 15,000"),
    ("Scale E", "E", 15000, 25000, "Principal positions - BWP 15,000 - BWP 25,000"),
    ("Scale F", "F", 25000, 35000, "Director positions - BWP 25,000 - BWP 35,000"),
    ("Scale G", "G", 35000, 50000, "Senior director positions - BWP 35,000 - BWP 50,000"),
    ("Specialist Scale", "SPEC", 20000, 60000, "Medical specialists - BWP 20,000 - BWP 60,000"),
    ("Consultant Scale", "CONS", 40000, 80000, "Medical consultants - BWP 40,000 - BWP 80,000"),
    ("Contract Scale", "CONTRACT", 0, 0, "Contract positions - Variable rates"),
]

SPONSORS = [
    ("Government of Botswana", "Government", "Ministry of Health", "training@gov.bw", "+267 3914464", "Government funded training"),
    ("World Health Organization", "International", "WHO Representative", "training@who.int", "+267 3900000", "WHO sponsored programs"),
    ("PEPFAR", "International", "PEPFAR Coordinator", "pepfar@usaid.gov", "+267 3950000", "President's Emergency Plan for AIDS Relief"),
    ("European Union", "International", "EU Delegation", "training@eeas.europa.eu", "+267 3940000", "European Union development programs"),
    ("African Development Bank", "International", "AfDB Representative", "training@afdb.org", "+267 3960000", "AfDB capacity building programs"),
    ("World Bank", "International", "World Bank Office", "training@worldbank.org", "+267 3970000", "World Bank development programs"),
    ("UNICEF", "International", "UNICEF Representative", "training@unicef.org", "+267 3930000", "United Nations Children's Fund"),
    ("UNDP", "International", "UNDP Representative", "training@undp.org", "+267 3950000", "United Nations Development Programme"),
    ("CDC Foundation", "International", "CDC Representative", "training@cdc.gov", "+267 3910000", "Centers for Disease Control Foundation"),
    ("Private Sponsorship", "Private", "Private Sponsor", "private@sponsor.com", "+267 0000000", "Privately funded training"),
    ("Self Sponsored", "Private", "Self", "self@funded.com", "+267 0000000", "Self-funded training"),
    ("Scholarship Programme", "Government", "Scholarship Office", "scholarships@gov.bw", "+267 3914464", "Merit-based scholarship programs"),
]

ALLOWANCE_TYPES = [
    ("Tuition Fee", "Fees paid to the training institution"),
    ("Book Allowance", "Books and study materials"),
    ("Subsistence Allowance", "Monthly living allowance while in training"),
    ("Accommodation", "Housing while away from the duty station"),
    ("Transport", "Travel to and from the training institution"),
]

ALLOWANCE_STATUSES = [
    ("Pending", "Captured, awaiting approval"),
    ("Approved", "Approved for payment"),
    ("Paid", "Payment made"),
    ("Rejected", "Not approved"),
]

DEFAULT_USERS: List[Dict] = [
    {
        "email": "admin@learning.com",
        "password": "Admin123!",
        "first_name": "System",
        "last_name": "Administrator",
        "date_of_birth": datetime(1990, 1, 1),
        "roles": (RoleName.ADMIN, RoleName.MANAGER),
    },
    {
        "email": "test@learning.com",
        "password": "Test123!",
        "first_name": "Test",
        "last_name": "User",
        "date_of_birth": datetime(1992, 5, 15),
        "roles": (RoleName.USER,),
    },
    {
        "email": "trainer@learning.com",
        "password": "Trainer123!",
        "first_name": "John",
        "last_name": "Trainer",
        "date_of_birth": datetime(1985, 8, 20),
        "roles": (RoleName.TRAINER, RoleName.USER),
    },
]


def _fill_if_empty(db: Session, model: Type, rows: List[Dict]) -> int:
    if db.query(model.pk).first() is not None:
        return 0
    for values in rows:
        row = model(**values)
        row.stamp_created()
        db.add(row)
    return len(rows)


def seed_lookups(db: Session) -> Dict[str, int]:
    """Insert reference rows into empty lookup tables; returns counts per table."""
    counts = {
        "departments": _fill_if_empty(
            db,
            lookup_models.Department,
            [dict(name=n, code=c, description=d) for n, c, d in DEPARTMENTS],
        ),
        "facilities": _fill_if_empty(
            db,
            lookup_models.Facility,
            [dict(name=n, code=c, location=loc, description=d) for n, c, loc, d in FACILITIES],
        ),
        "designations": _fill_if_empty(
            db,
            lookup_models.Designation,
            [dict(title=t, code=c, level=lvl, description=d) for t, c, lvl, d in DESIGNATIONS],
        ),
        "salary_scales": _fill_if_empty(
            db,
            lookup_models.SalaryScale,
            [
                dict(scale=s, grade=g, min_salary=Decimal(lo), max_salary=Decimal(hi), description=d)
                for s, g, lo, hi, d in SALARY_SCALES
            ],
        ),
        "sponsors": _fill_if_empty(
            db,
            lookup_models.Sponsor,
            [
                dict(name=n, type=t, contact_person=cp, email=e, phone=p, description=d)
                for n, t, cp, e, p, d in SPONSORS
            ],
        ),
        "allowance_types": _fill_if_empty(
            db,
            allowance_models.AllowanceType,
            [dict(name=n, description=d) for n, d in ALLOWANCE_TYPES],
        ),
        "allowance_statuses": _fill_if_empty(
            db,
            allowance_models.AllowanceStatus,
            [dict(name=n, description=d) for n, d in ALLOWANCE_STATUSES],
        ),
    }
    db.commit()
    return counts


def seed_roles_and_users(db: Session) -> List[str]:
    """Ensure every role exists and create missing default accounts; returns created emails."""
    account_services.ensure_roles(db, list(RoleName))
    db.commit()

    created = []
    for account in DEFAULT_USERS:
        if account_services.get_user_by_email(db, account["email"]) is not None:
            continue
        account_services.create_user(db, **account)
        created.append(account["email"])
    return created


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    db = WriteSessionLocal()
    try:
        counts = seed_lookups(db)
        created = seed_roles_and_users(db)
        logger.info("Reference data seeded", extra={"rows": counts, "users_created": created})
        print("[OK] Reference rows inserted:")
        for table, count in counts.items():
            print(f"  {table:<20} {count}")
        print(f"[OK] Accounts created: {', '.join(created) if created else 'none'}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
