import django_filters

from modules.products.models import Product, ProductCategory


class ProductFilter(django_filters.FilterSet):
    name = django_filters.CharFilter(field_name="name", lookup_expr="icontains")
    category = django_filters.ChoiceFilter(choices=ProductCategory.choices)
    subcategory = django_filters.CharFilter(field_name="subcategory", lookup_expr="iexact")
    brand = django_filters.CharFilter(field_name="brand", lookup_expr="iexact")
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")
    featured = django_filters.BooleanFilter(field_name="is_featured")
    seller = django_filters.NumberFilter(field_name="seller_id")

    class Meta:
        model = Product
        fields = [
            "name",
            "category",
            "subcategory",
            "brand",
            "min_price",
            "max_price",
            "featured",
            "seller",
        ]
