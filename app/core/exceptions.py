"""
Error taxonomy shared by the services and the HTTP layer.

NotFound and validation problems are raised as HTTPException directly in the
routes; the classes here cover failures that originate below the routing layer.
"""


class ExpenseTrackerError(Exception):
    """Base class for application errors"""


class UnsupportedCurrencyError(ExpenseTrackerError, ValueError):
    """Conversion requested for a currency code missing from the rate table"""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Unsupported currency: {code}")


class AdvisorError(ExpenseTrackerError):
    """The AI advisor backend failed or returned something unusable"""


class RateSourceError(ExpenseTrackerError):
    """The exchange rate source could not be refreshed"""
