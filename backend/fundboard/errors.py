from typing import List, Optional


class FundboardError(Exception):
    """Base error; rendered as ``{"error": message}`` with ``status_code``."""
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        return {"error": self.message}


class ValidationError(FundboardError):
    status_code = 400


class ConflictError(FundboardError):
    status_code = 409

    def __init__(self, conflicts: List[int], message: str = "numbers already taken"):
        super().__init__(message)
        self.conflicts = list(conflicts)

    def to_dict(self) -> dict:
        return {"error": self.message, "conflicts": self.conflicts}


class AuthError(FundboardError):
    status_code = 401

    def __init__(self, message: str = "unauthorized"):
        super().__init__(message)


class StoreError(FundboardError):
    status_code = 500

    def __init__(self, message: str = "server_error"):
        super().__init__(message)
