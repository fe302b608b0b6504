from __future__ import annotations

import logging
from typing import Any, List, Optional

from leasedb.base.interface import BaseConnection
from leasedb.exception import QueryError
from leasedb.policy import QueryRequest, RetryPolicy

logger = logging.getLogger(__name__)


def error_code(error: BaseException) -> Optional[str]:
    """Classifier used to match an error against retry codes"""
    if isinstance(error, QueryError):
        return error.code
    code = getattr(error, "code", None)
    return code if isinstance(code, str) else None


class RetryingExecutor:
    """Run queries on a leased connection, retrying on matching error codes.

    A failure is retried when its code is in
    ``policy.retry_error_codes | request.extra_retry_codes`` and the number of
    retries so far is *less than or equal to* ``policy.max_retry_count``. A
    statement that keeps failing with a retryable code is therefore attempted
    ``max_retry_count + 2`` times before its last error is raised. With
    ``max_retry_count=2``:

    ```
    attempt 1 fails -> retry 1
    attempt 2 fails -> retry 2
    attempt 3 fails -> retry 3
    attempt 4 fails -> raised
    ```

    Retries always reuse the same connection. Whether a statement is safe to
    issue again is up to the caller.
    """

    def __init__(self, policy: RetryPolicy) -> None:
        self.policy = policy

    async def execute(
        self, connection: BaseConnection, request: QueryRequest
    ) -> List[Any]:
        retry_codes = self.policy.retry_codes_for(request)
        attempt = 0
        while True:
            try:
                return await connection.query(request.text, request.params)
            except Exception as e:
                code = error_code(e)
                if (
                    code is None
                    or code not in retry_codes
                    or attempt > self.policy.max_retry_count
                ):
                    raise
                attempt += 1
                logger.warning(
                    "Query failed with %s, retrying (%d/%d)",
                    code,
                    attempt,
                    self.policy.max_retry_count + 1,
                )
