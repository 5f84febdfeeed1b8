from typing import List, Optional, Union
from pydantic import BaseModel, Field, StrictInt, StrictStr, field_validator

from engine.brackets import FilingStatus
from engine.errors import InvalidFilingStatus


class TaxRequest(BaseModel):
    """Filing status selector (1-5, name or code) and gross income"""
    filing_status: Union[StrictInt, StrictStr]
    gross_income: float = Field(ge=0, allow_inf_nan=False)
    include_breakdown: bool = True

    @field_validator('filing_status')
    @classmethod
    def check_filing_status(cls, v):
        try:
            return int(FilingStatus.parse(v))
        except InvalidFilingStatus as e:
            raise ValueError(str(e))


class FilingStatusOption(BaseModel):
    value: int
    code: str
    name: str
    label: str


class BracketRow(BaseModel):
    Lower: float
    Upper: Optional[float]
    Rate: float


class TaxResponse(BaseModel):
    success: bool = True
    tax_year: int
    filing_status: int
    filing_status_label: str
    gross_income: float
    tax: float
    formatted_tax: str
    formatted_income: str
    marginal_rate: float
    effective_rate: float
    message: str
    breakdown: Optional[dict] = None


class BracketTableResponse(BaseModel):
    tax_year: int
    filing_status: int
    filing_status_label: str
    brackets: List[BracketRow]
