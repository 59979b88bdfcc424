import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Tuple

import click
from dotenv import load_dotenv

from fundable.config import PROJECT_ROOT, settings
from fundable.db.init_db import init_db
from fundable.db.session import AsyncSessionLocal
from fundable.domains.companies.clients import EdgarClient
from fundable.domains.companies.repositories import UnitOfWork
from fundable.domains.companies.services import CompanyService, FundableAmountService
from fundable.shared.exceptions import DomainException

# Load environment variables from .env file
load_dotenv(dotenv_path=PROJECT_ROOT / ".env")


@asynccontextmanager
async def service_scope() -> AsyncIterator[Tuple[CompanyService, FundableAmountService]]:
    """One database session and one SEC EDGAR client per command."""
    async with AsyncSessionLocal() as session, EdgarClient() as edgar_client:
        unit_of_work = UnitOfWork(session)
        yield (
            CompanyService(unit_of_work.companies, unit_of_work, edgar_client),
            FundableAmountService(unit_of_work.companies, unit_of_work),
        )


@click.group()
@click.option("--verbose", is_flag=True, help="Log at DEBUG level.")
def cli(verbose: bool):
    """CLI for importing companies and calculating fundable amounts."""
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')


@cli.command("init-db")
def init_db_command():
    """Creates the companies and income_records tables."""
    asyncio.run(init_db())
    click.echo("Database schema created.")


@cli.command("import-company")
@click.argument("cik", type=click.IntRange(min=1))
def import_company(cik: int):
    """
    Imports one company and its net income history from SEC EDGAR.
    CIK: SEC Central Index Key (e.g. 320193).
    """
    click.echo(f"Importing CIK {cik} from SEC EDGAR...")

    async def main():
        async with service_scope() as (company_service, _):
            company = await company_service.import_company(cik)
            click.echo(f"Imported {company.entity_name} with {len(company.income_records)} income records.")

    try:
        asyncio.run(main())
    except DomainException as e:
        raise click.ClickException(e.message)


@cli.command("batch-import")
@click.argument("ciks", nargs=-1, required=True, type=click.IntRange(min=1))
def batch_import(ciks: Tuple[int, ...]):
    """
    Imports several companies in one transaction. Existing and unknown CIKs are skipped.
    CIKS: A space-separated list of Central Index Keys.
    """
    click.echo(f"Starting batch import for: {', '.join(str(cik) for cik in ciks)}")

    async def main():
        async with service_scope() as (company_service, _):
            companies = await company_service.batch_import_companies(list(ciks))

        click.echo("\n--- Batch Import Summary ---")
        for company in companies:
            click.echo(f"  - {company.cik}: {company.entity_name}, Records: {len(company.income_records)}")
        click.echo(f"Imported {len(companies)} of {len(ciks)} companies.")

    asyncio.run(main())


@cli.command("calculate-all")
def calculate_all():
    """Recalculates the fundable amounts of every stored company."""

    async def main():
        async with service_scope() as (_, fundable_amount_service):
            processed_count = await fundable_amount_service.calculate_all_fundable_amounts()
            click.echo(f"Fundable amounts calculated for {processed_count} companies.")

    asyncio.run(main())


if __name__ == "__main__":
    cli()
