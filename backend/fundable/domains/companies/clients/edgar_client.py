"""
SEC EDGAR API Client

Fetches a company's name and its annual net income facts from data.sec.gov.
"""

# Standard library imports
import logging
from typing import Any, Dict, List, Optional

# Third-party imports
import httpx
from pydantic import TypeAdapter, ValidationError

# App imports
from fundable.config import get_settings
from ..models import CentralIndexKey, REQUIRED_YEARS
from ..models.edgar import EdgarCompanyData, EdgarFactEntry, EdgarIncomeData, EdgarSubmissions

logger = logging.getLogger(__name__)

ANNUAL_REPORT_FORM = "10-K"
NET_INCOME_CONCEPT = "NetIncomeLoss"

FactEntryListAdapter = TypeAdapter(List[EdgarFactEntry])


class EdgarClient:
    _client: httpx.AsyncClient

    def __init__(
        self,
        base_url: Optional[str] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.base_url = base_url or settings.edgar_base_url
        # SEC rejects requests without a descriptive User-Agent
        self.user_agent = user_agent or settings.edgar_user_agent
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout or settings.edgar_timeout_seconds,
            headers={"User-Agent": self.user_agent, "Accept": "application/json"},
            transport=transport,
        )

    async def close(self):
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def get_company_data(self, cik: int) -> Optional[EdgarCompanyData]:
        """
        Fetch the company name and 2018-2022 10-K net income for a CIK.

        Args:
            cik: Central Index Key

        Returns:
            EdgarCompanyData, or None if SEC EDGAR does not know the company or
            could not be reached. A company whose facts are unavailable is
            returned with no income records.
        """
        formatted_cik = CentralIndexKey.create(cik).to_formatted_string()
        submissions_url = f"submissions/CIK{formatted_cik}.json"

        try:
            logger.info(f"Fetching SEC data from: {self.base_url}{submissions_url}")
            response = await self._client.get(submissions_url)
            logger.info(f"SEC API Response for CIK {cik}: {response.status_code} {response.reason_phrase}")

            if response.is_error:
                logger.warning(
                    f"SEC API returned non-success status for CIK {cik}. "
                    f"Status: {response.status_code}, Body: {response.text[:500]}"
                )
                return None

            submissions = EdgarSubmissions.model_validate(response.json())
            if not submissions.name or not submissions.name.strip():
                logger.warning(f"SEC submissions for CIK {cik} carry no entity name")
                return None

            income_records = await self._get_income_records(cik, formatted_cik)
            return EdgarCompanyData(
                cik=cik,
                entity_name=submissions.name,
                income_records=income_records,
            )

        except httpx.HTTPError as e:
            logger.error(f"HTTP error while fetching data for CIK {cik}: {e}")
            return None
        except ValueError as e:
            # Invalid JSON or a submissions payload pydantic could not validate
            logger.error(f"Could not parse SEC data for CIK {cik}: {e}")
            return None

    async def _get_income_records(self, cik: int, formatted_cik: str) -> List[EdgarIncomeData]:
        facts_url = f"api/xbrl/companyfacts/CIK{formatted_cik}.json"
        logger.info(f"Fetching company facts from: {self.base_url}{facts_url}")

        response = await self._client.get(facts_url)
        logger.info(f"Company Facts Response for CIK {cik}: {response.status_code} {response.reason_phrase}")

        if response.is_error:
            logger.warning(f"Company facts request failed for CIK {cik}: {response.status_code}")
            return []

        try:
            raw_entries = self._net_income_entries(response.json())
            if raw_entries is None:
                logger.warning(f"No {NET_INCOME_CONCEPT} data found for CIK {cik}")
                return []
            entries = FactEntryListAdapter.validate_python(raw_entries)
        except (ValueError, ValidationError) as e:
            logger.error(f"Failed to parse company facts for CIK {cik}: {e}")
            return []

        logger.info(f"Found {len(entries)} {NET_INCOME_CONCEPT} records for CIK {cik}")
        records = select_annual_income(entries)
        logger.info(
            f"Filtered to {len(records)} income records "
            f"({min(REQUIRED_YEARS)}-{max(REQUIRED_YEARS)}, {ANNUAL_REPORT_FORM} only) for CIK {cik}"
        )
        return records

    @staticmethod
    def _net_income_entries(payload: Any) -> Optional[list]:
        node: Any = payload
        for key in ("facts", "us-gaap", NET_INCOME_CONCEPT, "units", "USD"):
            if not isinstance(node, dict) or key not in node:
                return None
            node = node[key]
        return node if isinstance(node, list) else None


def select_annual_income(entries: List[EdgarFactEntry]) -> List[EdgarIncomeData]:
    """
    Keep 10-K facts for the required fiscal years, one per year: the most
    recently filed one (later filings restate earlier values).
    """
    latest_by_year: Dict[int, EdgarFactEntry] = {}
    for entry in entries:
        if entry.fy is None or entry.fy not in REQUIRED_YEARS or entry.form != ANNUAL_REPORT_FORM:
            continue
        current = latest_by_year.get(entry.fy)
        if current is None or entry.filed > current.filed:
            latest_by_year[entry.fy] = entry

    return [
        EdgarIncomeData(
            year=year,
            amount=entry.val,
            form=entry.form,
            frame=entry.frame,
            filed_date=entry.filed,
            accession_number=entry.accn,
        )
        for year, entry in sorted(latest_by_year.items())
    ]


_edgar_client = None

def get_edgar_client() -> "EdgarClient":
    """Provides a singleton instance of the EdgarClient."""
    global _edgar_client
    if _edgar_client is None:
        _edgar_client = EdgarClient()
    return _edgar_client
