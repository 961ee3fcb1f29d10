"""
Module 01 - Schemas
File: errors.py

Purpose: Standard error taxonomy for tree construction, aggregation and
redemption. Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Tree Construction Errors
    EMPTY_INPUT = "EMPTY_INPUT"
    LEAF_NOT_FOUND = "LEAF_NOT_FOUND"

    # Aggregation Errors
    INVALID_AMOUNT = "INVALID_AMOUNT"
    DUPLICATE_CLAIM = "DUPLICATE_CLAIM"
    AMOUNT_OVERFLOW = "AMOUNT_OVERFLOW"

    # Redemption Errors
    INVALID_PROOF = "INVALID_PROOF"
    EXCESSIVE_CLAIM = "EXCESSIVE_CLAIM"
    NOTHING_TO_CLAIM = "NOTHING_TO_CLAIM"
    TRANSFER_FAILED = "TRANSFER_FAILED"
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    UNAUTHORIZED = "UNAUTHORIZED"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class DistributorError(BaseModel):
    """
    Base error model for structured error communication.

    Used for passing errors across the API boundary without exceptions,
    enabling structured error handling and serialization.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.INVALID_PROOF],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "DistributorException":
        """Convert this error model to a raised exception."""
        return DistributorException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class DistributorException(Exception):
    """
    Base exception for all distributor errors.

    This exception carries structured error information and can be
    converted to/from DistributorError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "DISTRIBUTOR_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> DistributorError:
        """Convert this exception to a DistributorError model."""
        return DistributorError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class EmptyInputException(DistributorException):
    """Exception raised when a tree is built over zero leaves."""

    def __init__(self, message: str = "Cannot build a Merkle tree over zero leaves") -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.EMPTY_INPUT,
        )


class LeafNotFoundException(DistributorException):
    """Exception raised when a proof is requested for a leaf that is not in the tree."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.LEAF_NOT_FOUND,
            details=details,
        )


class InvalidAmountException(DistributorException):
    """Exception raised when an entry amount is zero or outside uint256."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_AMOUNT,
            details=details,
        )


class DuplicateClaimException(DistributorException):
    """Exception raised when a (token, account) pair appears twice in one batch."""

    def __init__(
        self,
        message: str,
        token: str | None = None,
        account: str | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if token:
            details["token"] = token
        if account:
            details["account"] = account
        super().__init__(
            message=message,
            code=ErrorCodes.DUPLICATE_CLAIM,
            details=details,
        )


class AmountOverflowException(DistributorException, OverflowError):
    """Exception raised when a summed amount exceeds the uint256 range."""

    def __init__(
        self,
        message: str,
        token: str | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if token:
            details["token"] = token
        super().__init__(
            message=message,
            code=ErrorCodes.AMOUNT_OVERFLOW,
            details=details,
        )


class InvalidProofException(DistributorException):
    """Exception raised when a Merkle proof does not recompute the published root."""

    def __init__(
        self,
        message: str = "Invalid proof.",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_PROOF,
            details=details,
        )


class ExcessiveClaimException(DistributorException):
    """Exception raised when the cumulative amount is below what was already paid."""

    def __init__(
        self,
        message: str,
        cumulative_amount: int | None = None,
        claimed: int | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if cumulative_amount is not None:
            details["cumulative_amount"] = cumulative_amount
        if claimed is not None:
            details["claimed"] = claimed
        super().__init__(
            message=message,
            code=ErrorCodes.EXCESSIVE_CLAIM,
            details=details,
        )


class NothingToClaimException(DistributorException):
    """Exception raised when a claim has no delta to pay."""

    def __init__(self, message: str = "Nothing to claim.") -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.NOTHING_TO_CLAIM,
        )


class TransferFailedException(DistributorException):
    """
    Exception raised when the token transfer for a claim fails.

    The claimed counter is only written after a successful transfer, so it
    is unchanged when this is raised and resubmitting the same claim is safe.
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.TRANSFER_FAILED,
            details=details,
            retryable=True,
        )


class InsufficientBalanceException(DistributorException):
    """Exception raised by a ledger when the sender cannot cover a transfer."""

    def __init__(
        self,
        message: str = "transfer amount exceeds balance",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INSUFFICIENT_BALANCE,
            details=details,
        )


class UnauthorizedException(DistributorException):
    """Exception raised when a non-operator tries to replace the root."""

    def __init__(self, message: str = "Caller is not the operator.") -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.UNAUTHORIZED,
        )


# Glossary names
EmptyInputError = EmptyInputException
NotFoundError = LeafNotFoundException
InvalidAmountError = InvalidAmountException
DuplicateClaimError = DuplicateClaimException
InvalidProofError = InvalidProofException
ExcessiveClaimError = ExcessiveClaimException
NothingToClaimError = NothingToClaimException
