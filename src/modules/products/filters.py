import django_filters

from modules.products.models import Product


class ProductFilter(django_filters.FilterSet):
    name = django_filters.CharFilter(field_name="name", lookup_expr="icontains")
    sku = django_filters.CharFilter(field_name="sku", lookup_expr="iexact")
    category = django_filters.UUIDFilter(field_name="category_id")
    category_slug = django_filters.CharFilter(
        field_name="category__slug", lookup_expr="iexact"
    )
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")
    featured = django_filters.BooleanFilter(field_name="is_featured")
    in_stock = django_filters.BooleanFilter(method="filter_in_stock")
    status = django_filters.CharFilter(field_name="status", lookup_expr="iexact")
    tag = django_filters.CharFilter(method="filter_tag")

    class Meta:
        model = Product
        fields = [
            "name",
            "sku",
            "category",
            "category_slug",
            "min_price",
            "max_price",
            "featured",
            "in_stock",
            "status",
            "tag",
        ]

    def filter_in_stock(self, queryset, name, value):
        if value:
            return queryset.filter(stock_quantity__gt=0)
        return queryset.filter(stock_quantity=0)

    def filter_tag(self, queryset, name, value):
        tag = value.strip().lower()
        return queryset.filter(tags__icontains=f'"{tag}"')
