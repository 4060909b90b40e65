"""
Domain exceptions for reports.

Exception Hierarchy:
    ReportServiceError (base)
    ├── InvalidReportTypeError
    └── InvalidPeriodError
"""


class ReportServiceError(Exception):
    """
    Base exception for all report errors.

        try:
            data = ReportQueries.build(context, 'weekly', 2025, 1)
        except ReportServiceError as e:
            return Response({'error': str(e)}, status=400)
    """

    pass


class InvalidReportTypeError(ReportServiceError):
    """
    Raised for an unknown report type.

    Valid types are: monthly, yearly, category, vendor, item.
    """

    pass


class InvalidPeriodError(ReportServiceError):
    """Raised when a period is not a valid YYYY-MM month."""

    pass
