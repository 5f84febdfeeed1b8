import logging
from typing import List

from fastapi import APIRouter, HTTPException

from engine.errors import InvalidFilingStatus, InvalidInputError
from schemas.tax import BracketTableResponse, FilingStatusOption, TaxRequest, TaxResponse
from services.tax_service import bracket_table_service, list_filing_statuses, run_tax_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/calculate-tax", response_model=TaxResponse)
async def calculate_tax_endpoint(params: TaxRequest):
    """
    Compute the tax owed for a filing status and gross income.
    """
    try:
        return run_tax_service(params)
    except InvalidInputError as e:
        logger.warning("Rejected tax request: %s", e)
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Tax calculation failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/filing-statuses", response_model=List[FilingStatusOption])
async def filing_statuses_endpoint():
    """Selectable filing statuses (menu values 1-5)"""
    return list_filing_statuses()


@router.get("/brackets/{filing_status}", response_model=BracketTableResponse)
async def brackets_endpoint(filing_status: str):
    try:
        return bracket_table_service(filing_status)
    except InvalidFilingStatus as e:
        raise HTTPException(status_code=404, detail=str(e))
