"""
Unit tests for document number formatting and sequencing.
"""

import datetime as dt

import pytest

from simplestore.db.base import SalesOrder
from simplestore.repositories.order_numbers import (
    format_order_number,
    next_order_number,
    next_sequence,
    number_stem,
    parse_sequence,
)

DAY = dt.date(2024, 3, 7)


def test_format_pads_sequence_to_three_digits():
    assert format_order_number("SO", DAY, 1) == "SO20240307001"
    assert format_order_number("RET", DAY, 42) == "RET20240307042"


def test_format_grows_past_999():
    assert format_order_number("PO", DAY, 1000) == "PO202403071000"


def test_parse_sequence_ignores_other_days_and_prefixes():
    stem = number_stem("SO", DAY)
    assert parse_sequence("SO20240307012", stem) == 12
    assert parse_sequence("SO20240306012", stem) is None
    assert parse_sequence("PO20240307012", stem) is None
    assert parse_sequence("SO20240307abc", stem) is None
    assert parse_sequence("", stem) is None


def test_next_sequence_uses_highest_existing_suffix():
    stem = number_stem("SO", DAY)
    existing = ["SO20240307001", "SO20240307005", "SO20240307003"]
    assert next_sequence(existing, stem) == 6


def test_next_sequence_starts_at_one():
    assert next_sequence([], number_stem("PO", DAY)) == 1


@pytest.mark.repositories
def test_next_order_number_reads_existing_numbers(db_session, catalogue):
    db_session.add_all(
        [
            SalesOrder(
                order_number="SO20240307001",
                customer_id=catalogue.customer_id,
                date=DAY,
                total_amount=0,
            ),
            SalesOrder(
                order_number="SO20240307004",
                customer_id=catalogue.customer_id,
                date=DAY,
                total_amount=0,
            ),
            SalesOrder(
                order_number="SO20240308009",
                customer_id=catalogue.customer_id,
                date=dt.date(2024, 3, 8),
                total_amount=0,
            ),
        ]
    )
    db_session.commit()

    number = next_order_number(db_session, SalesOrder.order_number, "SO", DAY)

    assert number == "SO20240307005"
