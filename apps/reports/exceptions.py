"""
Domain exceptions for the reports app.

Exception Hierarchy:
    ReportsServiceError (base)
    ├── InvalidPeriodError
    └── InvalidDateRangeError
"""


class ReportsServiceError(Exception):
    """
    Base exception for all report errors.

    Views catch it to answer with a 400:

        try:
            data = ReportQueries.sales_report(start_date=start, end_date=end)
        except ReportsServiceError as e:
            return Response({'error': str(e)}, status=400)
    """

    pass


class InvalidPeriodError(ReportsServiceError):
    """
    Raised when a month is not in YYYY-MM format.

    Example:
        raise InvalidPeriodError("Invalid month '2025-13'. Use YYYY-MM")
    """

    pass


class InvalidDateRangeError(ReportsServiceError):
    """Raised when the start date is after the end date."""

    pass
