from rest_framework.exceptions import ValidationError
from rest_framework.views import exception_handler


def _first_message(detail):
    if isinstance(detail, dict):
        for value in detail.values():
            return _first_message(value)
        return 'Invalid request'
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else 'Invalid request'
    return str(detail)


def api_exception_handler(exc, context):
    """DRF's handler, with the message exposed under "error" as the booking API reports it."""
    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, ValidationError):
        response.data = {'error': _first_message(response.data), 'details': response.data}
    elif isinstance(response.data, dict) and 'detail' in response.data:
        response.data = {'error': str(response.data['detail'])}
    return response
