"""Income tax estimation package."""

from services.taxes.brackets import BracketTable, TaxBracket
from services.taxes.calculator import compute_tax
from services.taxes.errors import (
    ErrorCode,
    InvalidConfiguration,
    InvalidInput,
    TableNotFound,
    TaxEstimatorError,
)
from services.taxes.loader import BracketRepository, TableKey, load_bracket_table
from services.taxes.service import TaxEstimatorService
from services.taxes.types import BracketShare, EstimateRequest, TaxEstimate, TaxSummary

__all__ = [
    "BracketRepository",
    "BracketShare",
    "BracketTable",
    "ErrorCode",
    "EstimateRequest",
    "InvalidConfiguration",
    "InvalidInput",
    "TableKey",
    "TableNotFound",
    "TaxBracket",
    "TaxEstimate",
    "TaxEstimatorError",
    "TaxEstimatorService",
    "TaxSummary",
    "compute_tax",
    "load_bracket_table",
]
