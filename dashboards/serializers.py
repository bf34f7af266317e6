"""
Dashboard Serializers

Validation of the statistics query parameters.
"""

from django.conf import settings
from django.utils import timezone
from rest_framework import serializers

from .services.date_ranges import DateRange, utc_date


class StatsQuerySerializer(serializers.Serializer):
    """
    ``?from=YYYY-MM-DD&to=YYYY-MM-DD``

    ``validated_data['date_range']`` is a DateRange, or None when neither
    bound was given.
    """

    def get_fields(self):
        # "from" is a keyword, so the fields cannot be class attributes
        fields = super().get_fields()
        fields['from'] = serializers.DateField(required=False)
        fields['to'] = serializers.DateField(required=False)
        return fields

    def validate(self, attrs):
        start = attrs.get('from')
        end = attrs.get('to')

        if start is None and end is None:
            attrs['date_range'] = None
            return attrs

        today = utc_date(timezone.now())
        if end is not None and (start or today) > end:
            raise serializers.ValidationError({
                'to': 'The end of the range must not be before its start.'
            })

        date_range = DateRange.from_bounds(start, end, today=today)
        if date_range.day_count > settings.STATS_MAX_RANGE_DAYS:
            raise serializers.ValidationError({
                'to': f'The range cannot exceed {settings.STATS_MAX_RANGE_DAYS} days.'
            })

        attrs['date_range'] = date_range
        return attrs
