"""
Deterministic demonstration dataset used when no transaction files are configured.
"""

from __future__ import annotations

from typing import List

import numpy as np

from salesdash.dates import MONTH_ABBR
from salesdash.models import Transaction

LOCATIONS = ("New York", "Los Angeles", "Chicago", "Houston", "Seattle")
CUSTOMERS = (
    "Acme Corp",
    "Globex",
    "Initech",
    "Umbrella",
    "Stark Industries",
    "Wayne Enterprises",
    "Hooli",
    "Vandelay Imports",
    "Soylent",
    "Tyrell",
    "Cyberdyne",
    "Wonka Industries",
)
# product -> (category, base unit price, base margin ratio)
PRODUCTS = {
    "Laptop": ("Electronics", 1200.0, 0.22),
    "Monitor": ("Electronics", 320.0, 0.28),
    "Desk": ("Furniture", 450.0, 0.35),
    "Chair": ("Furniture", 180.0, 0.40),
    "Paper": ("Office Supplies", 25.0, 0.55),
    "Toner": ("Office Supplies", 90.0, 0.48),
}
YEARS = (2022, 2023, 2024)


def generate_sample_transactions(seed: int = 7, rows_per_month: int = 12) -> List[Transaction]:
    rng = np.random.default_rng(seed)
    product_names = list(PRODUCTS)
    out: List[Transaction] = []
    for year in YEARS:
        for month_idx, month in enumerate(MONTH_ABBR):
            # Q4 lift so trends have some shape.
            season = 1.25 if month_idx >= 9 else 1.0
            for _ in range(rows_per_month):
                product = product_names[int(rng.integers(len(product_names)))]
                category, price, base_margin = PRODUCTS[product]
                units = int(rng.integers(1, 20))
                sales = round(units * price * season * float(rng.uniform(0.9, 1.1)), 2)
                margin_ratio = base_margin + float(rng.uniform(-0.05, 0.05))
                margin = round(sales * margin_ratio, 2)
                cost = round(sales - margin, 2)
                expenses = round(sales * float(rng.uniform(0.05, 0.2)), 2)
                profit = round(margin - expenses, 2)
                day = int(rng.integers(1, 29))
                out.append(
                    Transaction(
                        date=f"{day:02d}-{month}-{year}",
                        entity_name=CUSTOMERS[int(rng.integers(len(CUSTOMERS)))],
                        product=product,
                        category=category,
                        location=LOCATIONS[int(rng.integers(len(LOCATIONS)))],
                        sales=sales,
                        cost=cost,
                        margin=margin,
                        expenses=expenses,
                        profit=profit,
                        margin_percent=round(margin / sales, 4) if sales else 0.0,
                        profit_percent=round(profit / sales, 4) if sales else 0.0,
                    )
                )
    return out
