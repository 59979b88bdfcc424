import asyncio
from decimal import Decimal

import pytest

from fakes import FakeCompanyRepository, FakeUnitOfWork, make_company
from fundable.domains.companies.services import FundableAmountService
from fundable.domains.companies.models import Company
from fundable.shared.exceptions import CompanyNotFoundException, InsufficientIncomeDataException


def _service(companies):
    repository = FakeCompanyRepository(companies)
    unit_of_work = FakeUnitOfWork(repository)
    return FundableAmountService(repository, unit_of_work), unit_of_work


def _calculated(cik, name, income_by_year):
    company = make_company(cik, name, income_by_year)
    company.calculate_fundable_amounts()
    return company


def test_listing_numbers_eligible_companies_from_one(five_year_income):
    service, _ = _service([
        _calculated(1, "Tesla Inc", five_year_income),
        _calculated(2, "Apple Inc", five_year_income),
        _calculated(3, "Broke Co", {2022: Decimal("1")}),
        make_company(4, "Never Calculated"),
    ])

    listing = asyncio.run(service.get_fundable_companies())

    assert [(row.id, row.name) for row in listing] == [(1, "Apple Inc"), (2, "Tesla Inc")]
    assert listing[0].standard_fundable_amount == Decimal("193590000.00")
    assert listing[0].special_fundable_amount == Decimal("222628500.00")


def test_listing_by_letter_is_case_insensitive(five_year_income):
    service, _ = _service([
        _calculated(1, "Tesla Inc", five_year_income),
        _calculated(2, "apple inc", five_year_income),
        _calculated(3, "Amazon.com Inc", five_year_income),
    ])

    listing = asyncio.run(service.get_fundable_companies_by_letter("a"))

    assert [(row.id, row.name) for row in listing] == [(1, "Amazon.com Inc"), (2, "apple inc")]


@pytest.mark.parametrize("letter", ["1", "", "ab", "?"])
def test_listing_by_letter_rejects_non_letters(letter):
    service, _ = _service([])

    with pytest.raises(ValueError, match="Must be a letter."):
        asyncio.run(service.get_fundable_companies_by_letter(letter))


def test_calculate_one_company(five_year_income):
    tesla = make_company(1318605, "Tesla Inc", five_year_income)
    service, unit_of_work = _service([tesla])

    company = asyncio.run(service.calculate_fundable_amount(1318605))

    assert company is tesla
    assert company.standard_fundable_amount == Decimal("193590000.00")
    assert unit_of_work.commits == 1


def test_calculate_unknown_company():
    service, unit_of_work = _service([])

    with pytest.raises(CompanyNotFoundException):
        asyncio.run(service.calculate_fundable_amount(5))
    assert unit_of_work.commits == 0


def test_calculate_all_counts_every_company(five_year_income):
    companies = [
        make_company(1, "Tesla Inc", five_year_income),
        make_company(2, "Incomplete Co", {2022: Decimal("1")}),
    ]
    service, unit_of_work = _service(companies)

    processed_count = asyncio.run(service.calculate_all_fundable_amounts())

    assert processed_count == 2
    assert companies[0].standard_fundable_amount == Decimal("193590000.00")
    assert companies[1].standard_fundable_amount == Decimal("0")
    assert unit_of_work.commits == 1


def test_calculate_all_with_no_companies():
    service, unit_of_work = _service([])

    assert asyncio.run(service.calculate_all_fundable_amounts()) == 0
    assert unit_of_work.commits == 1


def _fail_calculation_for(monkeypatch, name, error):
    calculate = Company.calculate_fundable_amounts

    def calculate_or_fail(company):
        if company.entity_name == name:
            raise error
        calculate(company)

    monkeypatch.setattr(Company, "calculate_fundable_amounts", calculate_or_fail)


def test_calculate_all_skips_companies_with_insufficient_income_data(monkeypatch, five_year_income):
    companies = [
        make_company(1, "Tesla Inc", five_year_income),
        make_company(2, "Skipped Co", five_year_income),
        make_company(3, "Apple Inc", five_year_income),
    ]
    _fail_calculation_for(monkeypatch, "Skipped Co", InsufficientIncomeDataException(2, missing_years=[2019]))
    service, unit_of_work = _service(companies)

    processed_count = asyncio.run(service.calculate_all_fundable_amounts())

    assert processed_count == 2
    assert companies[1].standard_fundable_amount is None
    assert companies[2].standard_fundable_amount == Decimal("193590000.00")
    assert unit_of_work.commits == 1
    assert unit_of_work.rollbacks == 0


def test_calculate_all_rolls_back_on_unexpected_error(monkeypatch, five_year_income):
    companies = [
        make_company(1, "Tesla Inc", five_year_income),
        make_company(2, "Broken Co", five_year_income),
        make_company(3, "Apple Inc", five_year_income),
    ]
    _fail_calculation_for(monkeypatch, "Broken Co", RuntimeError("calculation failed"))
    service, unit_of_work = _service(companies)

    with pytest.raises(RuntimeError, match="calculation failed"):
        asyncio.run(service.calculate_all_fundable_amounts())

    assert unit_of_work.rollbacks == 1
    assert unit_of_work.commits == 0
    assert companies[2].standard_fundable_amount is None
