"""
Authorization gates for function-based API views.

Stack them below @api_view so they see the DRF request (with the
authenticated user) and their Responses get rendered:

    @api_view(['GET'])
    @require_permission('view', 'results')
    def list_results(request):
        ...
"""
from functools import wraps

from rest_framework import status
from rest_framework.response import Response

from .catalog import permission_key
from .services import get_request_evaluator, get_request_role_names, user_can_perform_action

METHOD_ACTIONS = {
    'GET': 'view',
    'HEAD': 'view',
    'OPTIONS': 'view',
    'POST': 'create',
    'PUT': 'update',
    'PATCH': 'update',
    'DELETE': 'delete',
}


def _get_action_from_method(http_method):
    return METHOD_ACTIONS.get(http_method, 'view')


def _unauthenticated():
    return Response({'error': 'Authentication required'}, status=status.HTTP_401_UNAUTHORIZED)


def _resolve_pairs(request, pairs):
    """Fill in the HTTP-method action wherever a pair leaves it as None."""
    method_action = _get_action_from_method(request.method)
    return [(action or method_action, resource) for action, resource in pairs]


def _first_grant(request, pairs):
    """
    Evaluate pairs in order for the request's user.

    Returns:
        (granted, reasons) where reasons holds one denial reason per pair
    """
    role_names = get_request_role_names(request)
    evaluator = get_request_evaluator(request) if role_names else None
    reasons = []
    for action, resource in pairs:
        allowed, reason = user_can_perform_action(
            request.user, action, resource, role_names=role_names, evaluator=evaluator
        )
        if allowed:
            return True, []
        reasons.append(reason)
    return False, reasons


def require_permission(action, resource):
    """
    Allow the view only if the caller may perform `action` on `resource`.

    Args:
        action: action identifier, or None to derive it from the HTTP method
            (GET -> view, POST -> create, PUT/PATCH -> update, DELETE -> delete)
        resource: resource identifier (e.g., 'courses')

    Usage:
        @api_view(['GET', 'POST'])
        @require_permission(None, 'courses')
        def courses_handler(request):
            # GET needs view:courses, POST needs create:courses
            ...
    """
    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            if not request.user.is_authenticated:
                return _unauthenticated()

            [(needed_action, needed_resource)] = _resolve_pairs(request, [(action, resource)])
            granted, reasons = _first_grant(request, [(needed_action, needed_resource)])
            if granted:
                return view_func(request, *args, **kwargs)

            return Response(
                {
                    'error': 'Permission denied',
                    'detail': reasons[0],
                    'required_permission': {
                        'action': needed_action,
                        'resource': needed_resource,
                    },
                },
                status=status.HTTP_403_FORBIDDEN
            )

        wrapper.rbac_action = action
        wrapper.rbac_resource = resource
        return wrapper
    return decorator


def require_any_permission(*action_resource_pairs):
    """
    Allow the view if the caller holds at least one of the given pairs.

    Usage:
        @api_view(['GET'])
        @require_any_permission(('view', 'results'), ('view', 'transcripts'))
        def academic_records(request):
            ...
    """
    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            if not request.user.is_authenticated:
                return _unauthenticated()

            pairs = _resolve_pairs(request, action_resource_pairs)
            granted, reasons = _first_grant(request, pairs)
            if granted:
                return view_func(request, *args, **kwargs)

            return Response(
                {
                    'error': 'Permission denied',
                    'detail': 'None of the accepted permissions is granted',
                    'required_permissions': [
                        {'action': a, 'resource': r} for a, r in pairs
                    ],
                    'reasons': [
                        f"{permission_key(a, r)}: {reason}" for (a, r), reason in zip(pairs, reasons)
                    ],
                },
                status=status.HTTP_403_FORBIDDEN
            )

        wrapper.rbac_pairs = action_resource_pairs
        return wrapper
    return decorator
