from rest_framework.pagination import PageNumberPagination


class ProductListPagination(PageNumberPagination):
    page_size = 20
    # ?limit= overrides the page size
    page_size_query_param = "limit"
    max_page_size = 100
