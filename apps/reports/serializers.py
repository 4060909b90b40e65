"""
Query-parameter serializers for report endpoints.

Responses are plain dicts from ReportQueries and are documented with
inline schemas in views.py.
"""

from django.utils import timezone
from rest_framework import serializers

from apps.accounts.models import Language


class PeriodQuerySerializer(serializers.Serializer):
    """
    Validate report query parameters.

    Query Parameters:
        period (str): Month in YYYY-MM format; defaults to the current month
        lang (str): 'en' or 'ar'; defaults to the user's preferred language
        apartment (str): Narrow a system admin's report to one apartment

    Note:
        ``period`` is split into ``year`` and ``month`` integers.
    """

    period = serializers.RegexField(
        regex=r'^\d{4}-(0[1-9]|1[0-2])$',
        required=False,
        allow_blank=True,
        help_text='Month period in YYYY-MM format',
        error_messages={'invalid': 'Invalid period format. Use YYYY-MM'},
    )
    lang = serializers.ChoiceField(choices=Language.choices, required=False)
    apartment = serializers.CharField(max_length=50, required=False, allow_blank=True)

    def validate(self, attrs):
        period = attrs.get('period')
        if period:
            year, month = period.split('-')
            attrs['year'], attrs['month'] = int(year), int(month)
        else:
            today = timezone.localdate()
            attrs['year'], attrs['month'] = today.year, today.month
        return attrs


class ErrorSerializer(serializers.Serializer):
    """Standard error response serializer."""
    error = serializers.CharField()
