"""
Module 01 - Schemas
File: __init__.py

Purpose: Export the public API for the schemas module.
This is the main entry point for other modules to import schema definitions.
"""

# Error models and exceptions
from .errors import (
    AmountOverflowException,
    DistributorError,
    DistributorException,
    DuplicateClaimError,
    DuplicateClaimException,
    EmptyInputError,
    EmptyInputException,
    ErrorCodes,
    ExcessiveClaimError,
    ExcessiveClaimException,
    InsufficientBalanceException,
    InvalidAmountError,
    InvalidAmountException,
    InvalidProofError,
    InvalidProofException,
    LeafNotFoundException,
    NotFoundError,
    NothingToClaimError,
    NothingToClaimException,
    TransferFailedException,
    UnauthorizedException,
)

# Input entries
from .entries import UINT256_MAX, Entry

__all__ = [
    # Errors
    "AmountOverflowException",
    "DistributorError",
    "DistributorException",
    "DuplicateClaimError",
    "DuplicateClaimException",
    "EmptyInputError",
    "EmptyInputException",
    "ErrorCodes",
    "ExcessiveClaimError",
    "ExcessiveClaimException",
    "InsufficientBalanceException",
    "InvalidAmountError",
    "InvalidAmountException",
    "InvalidProofError",
    "InvalidProofException",
    "LeafNotFoundException",
    "NotFoundError",
    "NothingToClaimError",
    "NothingToClaimException",
    "TransferFailedException",
    "UnauthorizedException",
    # Entries
    "UINT256_MAX",
    "Entry",
]
