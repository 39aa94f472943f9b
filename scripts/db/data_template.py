"""
Easily extendible template file for data templates
- Add new templates
- Compose them into DEFAULT_DATA_TEMPLATE

    Example: Seed only patients
        await seed_db(db_manager, {"patients": PATIENT_DATA_TEMPLATE}, records=100)

    Example: Seed both doctors and patients
        await seed_db(db_manager, DEFAULT_DATA_TEMPLATE, records=20)
"""

from datetime import date
from decimal import Decimal
from typing import Any

# Individual templates
PATIENT_DATA_TEMPLATE: dict[str, Any] = {
    "email_prefix": "patient",
    "email_domain": "bookmd.org",
    "first_name": "Pat",
    "last_name": "Patient",
    "phone": "555-0200",
    "date_of_birth": date(1990, 1, 1),
}

DOCTOR_DATA_TEMPLATE: dict[str, Any] = {
    "email_prefix": "doctor",
    "email_domain": "bookmd.org",
    "first_name": "Alex",
    "last_name": "Smith",
    "specializations": [
        "FamilyMedicine",
        "Cardiology",
        "Pediatrics",
        "Dermatology",
        "Neurology",
    ],
    "consultation_fee": Decimal("150.00"),
    "qualifications": ["MBBS", "MD"],
    "years_of_experience": 8,
}

# Combined default template
DEFAULT_DATA_TEMPLATE: dict[str, dict[str, Any]] = {
    "doctors": DOCTOR_DATA_TEMPLATE,
    "patients": PATIENT_DATA_TEMPLATE,
}

__all__ = [
    "DEFAULT_DATA_TEMPLATE",
    "DOCTOR_DATA_TEMPLATE",
    "PATIENT_DATA_TEMPLATE",
]
