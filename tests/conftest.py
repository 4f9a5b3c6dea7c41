import pandas as pd
import pytest

from salesdash.models import records_to_frame
from tests.factories import make_row


@pytest.fixture
def two_records():
    return [
        make_row(),
        make_row(
            date="01-Feb-2023",
            location="LA",
            sales=200,
            cost=80,
            margin=120,
            profit=100,
            entityName="B",
            category="Y",
            expenses=20,
            product="P2",
        ),
    ]


@pytest.fixture
def two_frame(two_records) -> pd.DataFrame:
    return records_to_frame(two_records)


@pytest.fixture
def empty_frame() -> pd.DataFrame:
    return records_to_frame([])
