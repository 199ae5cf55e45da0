from __future__ import annotations

from enum import Enum


class LedgerErrorCode(str, Enum):
    NOT_INITIALIZED = "not_initialized"
    CONSTRAINT_VIOLATION = "constraint_violation"
    NOT_FOUND = "not_found"
    STORE_FAULT = "store_fault"
    NOTHING_TO_UPDATE = "nothing_to_update"


class LedgerError(Exception):
    code: LedgerErrorCode = LedgerErrorCode.STORE_FAULT


class NotInitializedError(LedgerError):
    code = LedgerErrorCode.NOT_INITIALIZED

    def __init__(self) -> None:
        super().__init__("Ledger store is not initialized")


class ConstraintViolationError(LedgerError):
    code = LedgerErrorCode.CONSTRAINT_VIOLATION


class StoreFaultError(LedgerError):
    code = LedgerErrorCode.STORE_FAULT
