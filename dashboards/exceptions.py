"""
Dashboard exceptions.
"""

from rest_framework import exceptions, status


UNAUTHORIZED_CODE = 'unauthorized-error'


class StatsFetchError(exceptions.APIException):
    """A statistics report could not be computed"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Unable to compute dashboard statistics'
    default_code = 'stats-fetch-error'


class StatsAuthorizationError(exceptions.PermissionDenied):
    """Caller's role does not match the requested dashboard"""
    default_detail = 'You are not allowed to view these statistics'
    default_code = UNAUTHORIZED_CODE
