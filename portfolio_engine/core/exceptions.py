"""
Engine exceptions.

Only the store adapters raise these; the services catch them at their
public boundary and degrade to an empty result.
"""


class PortfolioEngineError(Exception):
    """Base class for all engine errors"""


class StoreError(PortfolioEngineError):
    """The backing store failed to answer a read"""

    def __init__(self, operation: str, cause: Exception = None):
        self.operation = operation
        self.cause = cause
        message = f"Store operation '{operation}' failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class StoreNotConfiguredError(PortfolioEngineError):
    """The selected store backend is missing its connection settings"""
