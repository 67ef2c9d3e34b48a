from decimal import Decimal

BUDGET_REQUEST_STATUSES = ("draft", "processing", "review", "approved", "rejected")

BUDGET_REQUEST_PRIORITIES = ("low", "medium", "high", "critical")

REVIEW_DECISION_STATUSES = frozenset({"approved", "rejected"})

MIN_FISCAL_YEAR = 2020
MAX_FISCAL_YEAR = 2050

TITLE_MAX_LENGTH = 200
TEXT_MAX_LENGTH = 2000

AMOUNT_TOLERANCE = Decimal("0.01")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

DEFAULT_DEPARTMENTS = [
    {
        "name": "Finance",
        "code": "FIN",
        "description": "Budget office and treasury operations",
        "head_name": "Dana Whitfield",
        "contact_email": "finance@example.gov",
        "contact_phone": "555-0100",
    },
    {
        "name": "Information Technology",
        "code": "IT",
        "description": "Shared infrastructure and application services",
        "head_name": "Marcus Ortega",
        "contact_email": "it@example.gov",
        "contact_phone": "555-0110",
    },
    {
        "name": "Public Works",
        "code": "PW",
        "description": "Roads, facilities and fleet maintenance",
        "head_name": "Priya Raman",
        "contact_email": "publicworks@example.gov",
        "contact_phone": None,
    },
]

DEFAULT_BUDGET_CATEGORIES = [
    {"name": "Capital Equipment", "code": "CAPEX", "description": "Durable equipment and hardware"},
    {"name": "Personnel", "code": "PERS", "description": "Salaries, overtime and contractors"},
    {"name": "Operations", "code": "OPS", "description": "Recurring operating expenses"},
    {"name": "Training", "code": "TRAIN", "description": "Courses, certifications and conferences"},
]
