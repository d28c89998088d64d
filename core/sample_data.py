"""
Synthetic invoices for a first run.

Only used when the store is empty and seeding is enabled. Pass a seeded
random.Random for reproducible data.
"""

import random
from datetime import date, timedelta
from decimal import Decimal

from core.derivation import compute_due_date
from core.models import ALLOWED_PAYMENT_TERMS, Invoice

SAMPLE_CUSTOMERS: tuple[tuple[str, str], ...] = (
    ("Rajesh Kumar", "Kumar Textiles Pvt Ltd"),
    ("Priya Sharma", "Sharma Manufacturing"),
    ("Amit Patel", "Patel Trading Co"),
    ("Sneha Reddy", "Reddy Steel Industries"),
    ("Vikram Singh", "Singh Exports Ltd"),
    ("Anita Desai", "Desai Garments"),
    ("Suresh Nair", "Nair Electronics"),
    ("Kavita Gupta", "Gupta Food Processing"),
    ("Rahul Verma", "Verma Logistics"),
    ("Deepa Iyer", "Iyer Pharmaceuticals"),
)

MAX_AGE_DAYS = 60
MIN_AMOUNT = 10_000
AMOUNT_SPREAD = 200_000
PAYMENT_JITTER_DAYS = 10


def generate_sample_invoices(today: date, rng: random.Random | None = None) -> list[Invoice]:
    """
    One invoice per sample customer, dated within the last 60 days.

    Roughly half are paid, within ten days either side of the due date.
    Ids run INV-<year>-001 upwards.
    """
    rng = rng or random.Random()
    invoices = []

    for seq, (customer_name, company_name) in enumerate(SAMPLE_CUSTOMERS, start=1):
        invoice_date = today - timedelta(days=rng.randrange(MAX_AGE_DAYS))
        payment_terms = rng.choice(ALLOWED_PAYMENT_TERMS)
        due_date = compute_due_date(invoice_date, payment_terms)

        payment_date = None
        if rng.random() > 0.5:
            offset = rng.randrange(2 * PAYMENT_JITTER_DAYS) - PAYMENT_JITTER_DAYS
            payment_date = due_date + timedelta(days=offset)

        invoices.append(Invoice(
            id=f"INV-{today.year}-{seq:03d}",
            customer_name=customer_name,
            company_name=company_name,
            amount=Decimal(rng.randrange(AMOUNT_SPREAD) + MIN_AMOUNT),
            invoice_date=invoice_date,
            payment_terms=payment_terms,
            due_date=due_date,
            payment_date=payment_date,
        ))

    return invoices
