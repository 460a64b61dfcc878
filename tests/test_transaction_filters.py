"""Tests for owner-scoped ledger queries and the filter criteria."""
from datetime import datetime

import pytest
from pydantic import ValidationError

from app.crud.transaction import get_transaction_by_id, get_transactions_for_user
from app.models.transaction import TransactionType
from app.schemas.transaction import TransactionFilters


async def test_only_the_owners_rows_are_returned(db, user, other_user, add_transaction):
    mine = await add_transaction(description="Mine")
    await add_transaction(description="Theirs", owner=other_user)

    rows = await get_transactions_for_user(user.id, db)

    assert [tx.id for tx in rows] == [mine.id]


async def test_filters_cannot_widen_owner_scope(db, user, other_user, add_transaction):
    await add_transaction(description="Shared words", category="food", owner=other_user)

    rows = await get_transactions_for_user(
        user.id, db, TransactionFilters(category="food", search="shared")
    )

    assert rows == []


async def test_lookup_by_id_is_owner_scoped(db, user, other_user, add_transaction):
    theirs = await add_transaction(owner=other_user)

    assert await get_transaction_by_id(theirs.id, user.id, db) is None
    assert (await get_transaction_by_id(theirs.id, other_user.id, db)).id == theirs.id


async def test_most_recent_first_and_ties_keep_insertion_order(db, user, add_transaction):
    same_day = datetime(2024, 3, 10, 12, 0)
    first = await add_transaction(description="first", transaction_date=same_day)
    second = await add_transaction(description="second", transaction_date=same_day)
    newest = await add_transaction(description="newest", transaction_date=datetime(2024, 3, 11))
    oldest = await add_transaction(description="oldest", transaction_date=datetime(2024, 3, 1))

    rows = await get_transactions_for_user(user.id, db)

    assert [tx.id for tx in rows] == [newest.id, first.id, second.id, oldest.id]


async def test_criteria_are_combined_with_and(db, user, add_transaction):
    match = await add_transaction(category="food", type=TransactionType.expense)
    await add_transaction(category="food", type=TransactionType.income, description="Refund")
    await add_transaction(category="transport", type=TransactionType.expense)

    rows = await get_transactions_for_user(
        user.id, db, TransactionFilters(category="food", type=TransactionType.expense)
    )

    assert [tx.id for tx in rows] == [match.id]


async def test_search_matches_description_or_location_case_insensitively(db, user, add_transaction):
    by_description = await add_transaction(description="Coffee at Blue Bottle", transaction_date=datetime(2024, 3, 3))
    by_location = await add_transaction(description="Snack", location="blue lagoon", transaction_date=datetime(2024, 3, 2))
    await add_transaction(description="Rent", location="Home", transaction_date=datetime(2024, 3, 1))

    rows = await get_transactions_for_user(user.id, db, TransactionFilters(search="BLUE"))

    assert [tx.id for tx in rows] == [by_description.id, by_location.id]


async def test_search_treats_wildcards_literally(db, user, add_transaction):
    await add_transaction(description="Anything")
    literal = await add_transaction(description="50% off sale")

    rows = await get_transactions_for_user(user.id, db, TransactionFilters(search="%"))

    assert [tx.id for tx in rows] == [literal.id]


async def test_tags_match_any_requested_tag(db, user, add_transaction):
    work = await add_transaction(tags=["work", "travel"], transaction_date=datetime(2024, 3, 3))
    family = await add_transaction(tags=["family"], transaction_date=datetime(2024, 3, 2))
    await add_transaction(tags=["misc"], transaction_date=datetime(2024, 3, 1))
    await add_transaction(tags=None)

    rows = await get_transactions_for_user(user.id, db, TransactionFilters(tags=["travel", "family"]))

    assert [tx.id for tx in rows] == [work.id, family.id]


async def test_date_bounds_are_inclusive(db, user, add_transaction):
    start = datetime(2024, 3, 1)
    end = datetime(2024, 3, 31, 23, 59, 59)
    at_end = await add_transaction(transaction_date=end)
    at_start = await add_transaction(transaction_date=start)
    await add_transaction(transaction_date=datetime(2024, 2, 29, 23, 59, 59))
    await add_transaction(transaction_date=datetime(2024, 4, 1))

    rows = await get_transactions_for_user(user.id, db, TransactionFilters(start_date=start, end_date=end))

    assert [tx.id for tx in rows] == [at_end.id, at_start.id]


async def test_location_filter_is_a_substring_match(db, user, add_transaction):
    match = await add_transaction(location="Downtown Seattle")
    await add_transaction(location="Portland")

    rows = await get_transactions_for_user(user.id, db, TransactionFilters(location="seattle"))

    assert [tx.id for tx in rows] == [match.id]


async def test_repeating_a_query_gives_the_same_result(db, user, add_transaction):
    for day in (5, 1, 9, 1):
        await add_transaction(transaction_date=datetime(2024, 3, day))
    filters = TransactionFilters(category="food", start_date=datetime(2024, 3, 1))

    first = await get_transactions_for_user(user.id, db, filters)
    second = await get_transactions_for_user(user.id, db, filters)

    assert [tx.id for tx in first] == [tx.id for tx in second]
    assert len(first) == 4


def test_end_before_start_is_rejected():
    with pytest.raises(ValidationError):
        TransactionFilters(start_date=datetime(2024, 3, 2), end_date=datetime(2024, 3, 1))


def test_blank_criteria_impose_nothing():
    filters = TransactionFilters(category="  ", search="", tags=[" ", ""])

    assert filters.category is None
    assert filters.search is None
    assert filters.tags == []
