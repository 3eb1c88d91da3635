"""
Page-number pagination for function-based list views.

A paginated body is already in the standard envelope, so the renderer
passes it through untouched:
{
    "status": "success",
    "message": "",
    "data": {"count": ..., "next": ..., "previous": ..., "results": [...]}
}
"""
from functools import wraps

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class PortalPagination(PageNumberPagination):
    """
    Query Parameters:
    - page: Page number (default: 1)
    - page_size: Items per page (default: 20, max: 100)
    """
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100

    def get_paginated_response(self, data):
        return Response({
            'status': 'success',
            'message': '',
            'data': {
                'count': self.page.paginator.count,
                'next': self.get_next_link(),
                'previous': self.get_previous_link(),
                'results': data,
            }
        })


def paginate_response(request, response):
    """Return a paginated copy of a list GET response, else the response itself."""
    if request.method != 'GET' or not isinstance(response, Response):
        return response
    if not isinstance(response.data, list):
        return response

    paginator = PortalPagination()
    page = paginator.paginate_queryset(response.data, request)
    if page is None:
        return response
    return paginator.get_paginated_response(page)


def auto_paginate(view_func):
    """
    Paginate whatever list a GET view returns. Detail payloads and
    other methods pass through.

        @api_view(['GET'])
        @auto_paginate
        def role_list(request):
            return Response(RoleListSerializer(roles, many=True).data)
    """
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        return paginate_response(request, view_func(request, *args, **kwargs))
    return wrapper
