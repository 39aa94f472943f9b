# app/db/models/medical_specialty.py
from enum import Enum


class SpecialtyCategory(str, Enum):
    PRIMARY_CARE = "Primary Care"
    SURGICAL = "Surgical Specialties"
    INTERNAL_MEDICINE = "Internal Medicine Subspecialties"
    DIAGNOSTIC = "Diagnostic Specialties"
    EMERGENCY_AND_CRITICAL_CARE = "Emergency and Critical Care"
    OBSTETRICS_AND_GYNECOLOGY = "Obstetrics and Gynecology"
    NEUROLOGICAL_AND_PSYCHIATRIC = "Neurological and Psychiatric Specialties"
    MUSCULOSKELETAL_AND_REHABILITATION = "Musculoskeletal and Rehabilitation"
    DERMATOLOGY_AND_EYE_CARE = "Dermatology and Eye Care"
    PUBLIC_HEALTH = "Public Health and Preventive Medicine"
    LABORATORY_AND_RESEARCH = "Laboratory and Research Specialties"
    DENTISTRY = "Dentistry and Oral Specialties"
    OTHER = "Other Specialties"


# Category by hundreds block of the specialty code
_CATEGORY_BY_BLOCK: dict[int, SpecialtyCategory] = {
    1: SpecialtyCategory.PRIMARY_CARE,
    2: SpecialtyCategory.SURGICAL,
    3: SpecialtyCategory.INTERNAL_MEDICINE,
    4: SpecialtyCategory.DIAGNOSTIC,
    5: SpecialtyCategory.EMERGENCY_AND_CRITICAL_CARE,
    6: SpecialtyCategory.OBSTETRICS_AND_GYNECOLOGY,
    7: SpecialtyCategory.NEUROLOGICAL_AND_PSYCHIATRIC,
    8: SpecialtyCategory.MUSCULOSKELETAL_AND_REHABILITATION,
    9: SpecialtyCategory.DERMATOLOGY_AND_EYE_CARE,
    10: SpecialtyCategory.PUBLIC_HEALTH,
    11: SpecialtyCategory.LABORATORY_AND_RESEARCH,
    12: SpecialtyCategory.DENTISTRY,
    13: SpecialtyCategory.OTHER,
}

_CODES: dict[str, int] = {
    # Primary Care
    "FamilyMedicine": 100,
    "InternalMedicine": 101,
    "Pediatrics": 102,
    "Geriatrics": 103,
    "GeneralPractice": 104,
    # Surgical
    "GeneralSurgery": 200,
    "CardiothoracicSurgery": 201,
    "Neurosurgery": 202,
    "OrthopedicSurgery": 203,
    "PlasticSurgery": 204,
    "Urology": 205,
    "VascularSurgery": 206,
    "ColorectalSurgery": 207,
    "Otolaryngology": 208,
    "TransplantSurgery": 209,
    "PediatricSurgery": 210,
    "TraumaSurgery": 211,
    # Internal Medicine Subspecialties
    "Cardiology": 300,
    "Endocrinology": 301,
    "Gastroenterology": 302,
    "Hematology": 303,
    "InfectiousDisease": 304,
    "Nephrology": 305,
    "Oncology": 306,
    "Pulmonology": 307,
    "Rheumatology": 308,
    "AllergyAndImmunology": 309,
    # Diagnostic
    "Pathology": 400,
    "Radiology": 401,
    "NuclearMedicine": 402,
    "DiagnosticImaging": 403,
    # Emergency and Critical Care
    "EmergencyMedicine": 500,
    "CriticalCareMedicine": 501,
    "Anesthesiology": 502,
    "PainMedicine": 503,
    # Obstetrics and Gynecology
    "ObstetricsAndGynecology": 600,
    "ReproductiveEndocrinology": 601,
    "MaternalFetalMedicine": 602,
    "GynecologicOncology": 603,
    "Urogynecology": 604,
    # Neurological and Psychiatric
    "Neurology": 700,
    "Psychiatry": 701,
    "ChildAndAdolescentPsychiatry": 702,
    "GeriatricPsychiatry": 703,
    "Neuropsychiatry": 704,
    # Musculoskeletal and Rehabilitation
    "PhysicalMedicineAndRehabilitation": 800,
    "SportsMedicine": 801,
    "OccupationalMedicine": 802,
    # Dermatology and Eye Care
    "Dermatology": 900,
    "Ophthalmology": 901,
    "Optometry": 902,
    # Public Health and Preventive Medicine
    "PreventiveMedicine": 1000,
    "PublicHealth": 1001,
    "OccupationalHealth": 1002,
    "AerospaceMedicine": 1003,
    # Laboratory and Research
    "MedicalGenetics": 1100,
    "MolecularMedicine": 1101,
    "ClinicalPharmacology": 1102,
    "LaboratoryMedicine": 1103,
    # Dentistry and Oral
    "Dentistry": 1200,
    "OralAndMaxillofacialSurgery": 1201,
    "Orthodontics": 1202,
    "Periodontics": 1203,
    "Endodontics": 1204,
    "Prosthodontics": 1205,
    "PediatricDentistry": 1206,
    # Other
    "PalliativeCare": 1300,
    "SleepMedicine": 1301,
    "AddictionMedicine": 1302,
    "HospitalMedicine": 1303,
    "ForensicMedicine": 1304,
    "TropicalMedicine": 1305,
    "Immunopathology": 1306,
    "NuclearRadiology": 1307,
}

# Closed set: member name == value, e.g. MedicalSpecialty.Cardiology.value == "Cardiology"
MedicalSpecialty = Enum(  # type: ignore[misc]
    "MedicalSpecialty",
    [(name, name) for name in _CODES],
    type=str,
    module=__name__,
)
MedicalSpecialty.__doc__ = "Closed enumeration of medical specialties a doctor can hold."


def specialty_code(specialty: "MedicalSpecialty") -> int:
    return _CODES[specialty.value]


def specialty_category(specialty: "MedicalSpecialty") -> SpecialtyCategory:
    return _CATEGORY_BY_BLOCK[specialty_code(specialty) // 100]


__all__ = [
    "MedicalSpecialty",
    "SpecialtyCategory",
    "specialty_code",
    "specialty_category",
]
