"""Repository and unit of work against an in-memory SQLite database."""

import asyncio
import logging
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from fakes import make_company
from fundable.db.init_db import init_db
from fundable.domains.companies.models import CentralIndexKey, IncomeRecord
from fundable.domains.companies.repositories import UnitOfWork


def _run(scenario):
    async def runner():
        engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
        await init_db(engine)
        sessions = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        try:
            await scenario(sessions)
        finally:
            await engine.dispose()

    asyncio.run(runner())


async def _store(sessions, *companies):
    async with sessions() as session:
        unit_of_work = UnitOfWork(session)
        async with unit_of_work.transaction("store companies"):
            for company in companies:
                await unit_of_work.companies.add(company)


def test_company_round_trips_with_records(five_year_income):
    async def scenario(sessions):
        await _store(sessions, make_company(320193, "Apple Inc.", five_year_income))

        async with sessions() as session:
            company = await UnitOfWork(session).companies.get_by_cik_with_records(CentralIndexKey(320193))

        assert company.cik == CentralIndexKey(320193)
        assert company.entity_name == "Apple Inc."
        assert [r.year for r in company.income_records] == [2018, 2019, 2020, 2021, 2022]
        assert company.income_records[-1].amount == Decimal("900000000")
        assert company.standard_fundable_amount is None

    _run(scenario)


def test_lookups_by_id_and_missing_rows():
    async def scenario(sessions):
        apple = make_company(320193, "Apple Inc.")
        await _store(sessions, apple)

        async with sessions() as session:
            repository = UnitOfWork(session).companies
            assert (await repository.get_by_id(apple.id)).entity_name == "Apple Inc."
            assert (await repository.get_by_id_with_records(apple.id)).income_records == ()
            assert await repository.get_by_cik(CentralIndexKey(1)) is None
            assert await repository.exists_by_cik(CentralIndexKey(320193))
            assert not await repository.exists_by_cik(CentralIndexKey(1))

    _run(scenario)


def test_duplicate_cik_is_rejected_at_commit():
    async def scenario(sessions):
        await _store(sessions, make_company(320193, "Apple Inc."))

        with pytest.raises(IntegrityError):
            await _store(sessions, make_company(320193, "Apple Again"))

        async with sessions() as session:
            companies = await UnitOfWork(session).companies.get_all_with_records()
        assert [c.entity_name for c in companies] == ["Apple Inc."]

    _run(scenario)


def test_failed_transaction_persists_nothing():
    async def scenario(sessions):
        async with sessions() as session:
            unit_of_work = UnitOfWork(session)
            with pytest.raises(RuntimeError):
                async with unit_of_work.transaction("doomed import"):
                    await unit_of_work.companies.add(make_company(1, "Alpha"))
                    raise RuntimeError("boom")
            assert not unit_of_work.is_active

        async with sessions() as session:
            assert not await UnitOfWork(session).companies.exists_by_cik(CentralIndexKey(1))

    _run(scenario)


def test_nested_begin_is_rejected():
    async def scenario(sessions):
        async with sessions() as session:
            unit_of_work = UnitOfWork(session)
            await unit_of_work.begin()
            with pytest.raises(RuntimeError):
                await unit_of_work.begin()
            await unit_of_work.rollback()

    _run(scenario)


def test_funding_queries_filter_and_order_by_name(five_year_income):
    async def scenario(sessions):
        companies = [
            make_company(1, "Tesla Inc", five_year_income),
            make_company(2, "apple inc", five_year_income),
            make_company(3, "Amazon.com Inc", five_year_income),
            make_company(4, "Alphabet Inc", {2022: Decimal("1")}),
            make_company(5, "Atlassian", five_year_income),
        ]
        for company in companies[:4]:
            company.calculate_fundable_amounts()
        await _store(sessions, *companies)

        async with sessions() as session:
            repository = UnitOfWork(session).companies
            eligible = await repository.get_eligible_for_funding()
            starting_with_a = await repository.get_by_name_starts_with("a")

        assert [c.entity_name for c in eligible] == ["Amazon.com Inc", "Tesla Inc", "apple inc"]
        assert sorted(c.entity_name for c in starting_with_a) == ["Amazon.com Inc", "apple inc"]

    _run(scenario)


def test_soft_deleted_company_is_hidden_but_still_holds_its_cik():
    async def scenario(sessions):
        apple = make_company(320193, "Apple Inc.")
        await _store(sessions, apple)

        async with sessions() as session:
            unit_of_work = UnitOfWork(session)
            async with unit_of_work.transaction("soft delete"):
                company = await unit_of_work.companies.get_by_id(apple.id)
                company.delete()

        async with sessions() as session:
            repository = UnitOfWork(session).companies
            assert await repository.get_by_id(apple.id) is None
            assert await repository.get_by_cik(CentralIndexKey(320193)) is None
            assert await repository.get_all_with_records() == []
            assert await repository.exists_by_cik(CentralIndexKey(320193))

    _run(scenario)


def test_delete_removes_company_and_its_records(five_year_income):
    async def scenario(sessions):
        apple = make_company(320193, "Apple Inc.", five_year_income)
        await _store(sessions, apple)

        async with sessions() as session:
            unit_of_work = UnitOfWork(session)
            async with unit_of_work.transaction("delete"):
                await unit_of_work.companies.delete(apple.id)

        async with sessions() as session:
            assert not await UnitOfWork(session).companies.exists_by_cik(CentralIndexKey(320193))
            remaining = await session.scalar(select(func.count()).select_from(IncomeRecord))
        assert remaining == 0

    _run(scenario)


def test_replaced_income_record_is_removed_from_the_database(five_year_income):
    async def scenario(sessions):
        apple = make_company(320193, "Apple Inc.", five_year_income)
        await _store(sessions, apple)

        async with sessions() as session:
            unit_of_work = UnitOfWork(session)
            company = await unit_of_work.companies.get_by_cik_with_records(CentralIndexKey(320193))
            async with unit_of_work.transaction("restate 2022"):
                company.add_income_record(IncomeRecord.create(
                    company.id, 2022, Decimal("950000000"), "10-K", None, date(2023, 11, 3), "restated"
                ))

        async with sessions() as session:
            company = await UnitOfWork(session).companies.get_by_cik_with_records(CentralIndexKey(320193))
            count = await session.scalar(select(func.count()).select_from(IncomeRecord))

        assert count == 5
        assert company.income_records[-1].accession_number == "restated"

    _run(scenario)


def test_commit_stamps_updated_at_on_modified_rows():
    async def scenario(sessions):
        apple = make_company(320193, "Apple Inc.")
        apple.updated_at = None
        await _store(sessions, apple)

        async with sessions() as session:
            unit_of_work = UnitOfWork(session)
            company = await unit_of_work.companies.get_by_id(apple.id)
            assert company.updated_at is None
            async with unit_of_work.transaction("direct edit"):
                company.entity_name = "Apple"

        async with sessions() as session:
            company = await UnitOfWork(session).companies.get_by_id(apple.id)
        assert company.entity_name == "Apple"
        assert company.updated_at is not None

    _run(scenario)


def test_amounts_near_the_column_limit_keep_their_cents():
    async def scenario(sessions):
        apple = make_company(320193, "Apple Inc.", {2022: Decimal("1234567890123456.78")})
        apple.standard_fundable_amount = Decimal("9999999999999999.99")
        apple.special_fundable_amount = Decimal("-0.01")
        await _store(sessions, apple)

        async with sessions() as session:
            company = await UnitOfWork(session).companies.get_by_cik_with_records(CentralIndexKey(320193))

        assert company.income_records[0].amount == Decimal("1234567890123456.78")
        assert company.standard_fundable_amount == Decimal("9999999999999999.99")
        assert company.special_fundable_amount == Decimal("-0.01")

    _run(scenario)


def test_failed_commit_is_logged_with_the_operation_name(caplog):
    async def scenario(sessions):
        await _store(sessions, make_company(320193, "Apple Inc."))

        async with sessions() as session:
            unit_of_work = UnitOfWork(session)
            with pytest.raises(IntegrityError):
                async with unit_of_work.transaction("import of CIK 320193"):
                    await unit_of_work.companies.add(make_company(320193, "Apple Again"))
            assert not unit_of_work.is_active

    with caplog.at_level(logging.ERROR, logger="fundable.domains.companies.repositories.unit_of_work"):
        _run(scenario)

    assert "Error in import of CIK 320193, rolling back" in caplog.text
