from typing import Optional

CONNECTION_NOT_FOUND = "Connection Doesn't Exist"
TRANSACTION_NOT_FOUND = "Connection or Transaction Doesn't Exist"


class LeaseDBError(Exception): ...


class ConfigurationError(LeaseDBError): ...


class AcquisitionError(LeaseDBError):
    """Raised when a connection cannot be obtained from the pool"""


class TransactionError(LeaseDBError):
    """Raised when begin/commit is called in the wrong state"""


class ResourceError(LeaseDBError):
    """Raised when an operation needs a leased connection but has none"""


class QueryError(LeaseDBError):
    """Driver-reported query failure.

    The ``code`` is what retry policies match against.
    """

    def __init__(self, code: Optional[str], message: str = "") -> None:
        self.code = code
        self.message = message
        super().__init__(f"[{code}] {message}" if code else message)
