from rest_framework.pagination import PageNumberPagination


class DefaultPagination(PageNumberPagination):
    """
    Queue pages hold ten submissions, matching the operator dashboards.
    """

    page_size = 10
    page_size_query_param = "page_size"
    max_page_size = 100
