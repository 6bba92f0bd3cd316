"""
Utility helper functions
"""
from datetime import date, datetime, timedelta
from decimal import Decimal, ROUND_HALF_UP
import os
import random
import re
import string

LT_MONTHS_GENITIVE = [
    "sausio", "vasario", "kovo", "balandžio", "gegužės", "birželio",
    "liepos", "rugpjūčio", "rugsėjo", "spalio", "lapkričio", "gruodžio",
]


def generate_case_number(year: int = None) -> str:
    """Case number shown to users, e.g. TD-2024-K3F9QZ"""
    year = year or datetime.utcnow().year
    suffix = "".join(random.choices(string.ascii_uppercase + string.digits, k=6))
    return f"TD-{year}-{suffix}"


def calculate_deadline(start: date, days: int) -> date:
    """Calendar-day deadline, no business-day adjustment"""
    if isinstance(start, datetime):
        start = start.date()
    return start + timedelta(days=days)


def format_date_lt(value) -> str:
    """2024 m. sausio 15 d."""
    if not value:
        return None
    return f"{value.year} m. {LT_MONTHS_GENITIVE[value.month - 1]} {value.day} d."


def format_currency(amount, currency_symbol: str = "€") -> str:
    """1 234,56 €"""
    quantized = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    whole, fraction = f"{quantized:.2f}".split(".")
    sign = ""
    if whole.startswith("-"):
        sign, whole = "-", whole[1:]
    groups = []
    while whole:
        groups.insert(0, whole[-3:])
        whole = whole[:-3]
    return f"{sign}{' '.join(groups)},{fraction} {currency_symbol}"


def safe_filename(name: str) -> str:
    """Strip directories and characters that are unsafe in storage keys"""
    base = os.path.basename((name or "").replace("\\", "/"))
    base = re.sub(r'[^\w.\- ]', '_', base).strip()
    return base or "file"
