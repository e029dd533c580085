"""
Sheet Source - Fetches the trip plan as CSV from a public spreadsheet.
"""
import logging
from typing import Optional

import httpx

from ..config import settings
from ..errors import SourceUnavailable

logger = logging.getLogger(__name__)


def sheet_csv_url(sheet_id: str) -> str:
    return settings.sheet_export_url.format(sheet_id=sheet_id)


async def fetch_sheet_csv(sheet_id: str, client: Optional[httpx.AsyncClient] = None) -> str:
    """
    Download a sheet's CSV export.

    Args:
        sheet_id: Spreadsheet identifier
        client: Optional httpx client (for testing with mocks)

    Returns:
        The CSV text

    Raises:
        SourceUnavailable: On network errors, 404 or any other non-success status
    """
    if not sheet_id or not sheet_id.strip():
        raise SourceUnavailable("No sheet ID given.")

    url = sheet_csv_url(sheet_id.strip())

    close_client = False
    if client is None:
        client = httpx.AsyncClient(timeout=settings.http_timeout_seconds, follow_redirects=True)
        close_client = True

    try:
        response = await client.get(url)
    except httpx.HTTPError as e:
        logger.error(f"Sheet fetch error: {e}")
        raise SourceUnavailable(f"Failed to fetch sheet: {e}") from e
    finally:
        if close_client:
            await client.aclose()

    if response.status_code == 404:
        raise SourceUnavailable("Sheet not found. Check the ID and ensure it is public.")
    if not response.is_success:
        raise SourceUnavailable(f"Failed to fetch sheet: {response.reason_phrase}")

    logger.info(f"Fetched sheet {sheet_id} ({len(response.text)} chars)")
    return response.text
