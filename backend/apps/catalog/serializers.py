from rest_framework import serializers


class VariantReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    sku = serializers.CharField(allow_null=True)
    size = serializers.CharField(allow_blank=True)
    color = serializers.CharField(allow_blank=True)
    quantity = serializers.IntegerField()
    mrp_price = serializers.CharField()
    rsp_price = serializers.CharField()
    discount_percentage = serializers.IntegerField()


class ProductReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    name = serializers.CharField()
    sku = serializers.CharField()
    description = serializers.CharField(allow_blank=True)
    image = serializers.CharField(allow_blank=True)
    price = serializers.CharField()
    stock_quantity = serializers.IntegerField()
    is_active = serializers.BooleanField()
    mrp = serializers.CharField()
    rsp = serializers.CharField()
    discount_pct = serializers.IntegerField()
    in_stock = serializers.BooleanField()
    sizes = serializers.ListField(child=serializers.CharField())
    colors = serializers.ListField(child=serializers.CharField())
    variants = VariantReadSerializer(many=True)


class VariantWriteSerializer(serializers.Serializer):
    sku = serializers.CharField(max_length=64, required=False, allow_blank=True, allow_null=True)
    size = serializers.CharField(max_length=32, required=False, allow_blank=True)
    color = serializers.CharField(max_length=32, required=False, allow_blank=True)
    quantity = serializers.IntegerField(min_value=0)
    mrp_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    rsp_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    discount_percentage = serializers.IntegerField(min_value=0, max_value=100, required=False)

    def validate(self, attrs):
        mrp, rsp = attrs.get("mrp_price"), attrs.get("rsp_price")
        if mrp and rsp and rsp > mrp:
            raise serializers.ValidationError("rsp_price cannot exceed mrp_price.")
        return attrs


class ProductWriteSerializer(serializers.Serializer):
    # id is server-assigned
    name = serializers.CharField(max_length=255)
    sku = serializers.CharField(max_length=64)
    description = serializers.CharField(required=False, allow_blank=True)
    image = serializers.CharField(required=False, allow_blank=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    stock_quantity = serializers.IntegerField(min_value=0, required=False)
    is_active = serializers.BooleanField(required=False)
    variants = VariantWriteSerializer(many=True, required=False)


class VariantStockSerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=0)
