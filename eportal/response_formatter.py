"""
Standardized API responses.

Every response body follows:
{
    "status": "success" | "error",
    "message": "string message or empty",
    "data": {...} | [] | null
}
"""
from rest_framework.renderers import JSONRenderer
from rest_framework.views import exception_handler


def custom_exception_handler(exc, context):
    """Run DRF's handler, then wrap its payload in the error envelope."""
    response = exception_handler(exc, context)

    if response is not None:
        response.data = format_error_response(response.data)

    return response


def format_error_response(errors):
    """
    Flatten DRF error payloads into a single message.

    - {"detail": "message"} -> "message"
    - {"field": ["error1", "error2"]} -> "field: error1, error2"
    - ["error1", "error2"] -> "error1, error2"
    """
    if isinstance(errors, dict):
        message = ""
        field_messages = []
        for field, field_errors in errors.items():
            if field == 'detail':
                message = str(field_errors)
            else:
                field_messages.append(f"{field}: {_flatten(field_errors)}")
        if field_messages:
            message = "; ".join(([message] if message else []) + field_messages)
    elif isinstance(errors, list):
        message = ", ".join(str(e) for e in errors)
    else:
        message = str(errors)

    return {
        "status": "error",
        "message": message,
        "data": None
    }


def _flatten(value):
    if isinstance(value, list):
        return ", ".join(_flatten(v) for v in value)
    if isinstance(value, dict):
        return "; ".join(f"{k}: {_flatten(v)}" for k, v in value.items())
    return str(value)


class StandardizedJSONRenderer(JSONRenderer):
    """Wrap every response that isn't already enveloped."""

    def render(self, data, accepted_media_type=None, renderer_context=None):
        response = renderer_context.get('response') if renderer_context else None

        # 204 No Content has no body
        if response is not None and response.status_code == 204:
            return b''

        if response is not None and not self.is_already_formatted(data):
            if response.status_code >= 400:
                data = format_error_response(data)
            else:
                data = self.format_success_response(data)

        return super().render(data, accepted_media_type, renderer_context)

    def is_already_formatted(self, data):
        return isinstance(data, dict) and {'status', 'message', 'data'} <= data.keys()

    def format_success_response(self, data):
        if isinstance(data, dict) and 'detail' in data:
            return {"status": "success", "message": str(data['detail']), "data": None}
        if data is None or (isinstance(data, dict) and not data):
            return {"status": "success", "message": "", "data": None}
        return {"status": "success", "message": "", "data": data}
