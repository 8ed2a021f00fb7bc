from rest_framework import serializers


class WishlistItemReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    product_id = serializers.IntegerField()
    name = serializers.CharField()
    image = serializers.CharField(allow_blank=True)
    mrp = serializers.CharField()
    rsp = serializers.CharField()
    discount_pct = serializers.IntegerField()
    in_stock = serializers.BooleanField()
    is_seen = serializers.BooleanField()
    added_at = serializers.CharField(allow_null=True)


class WishlistReadSerializer(serializers.Serializer):
    user_id = serializers.IntegerField()
    items = WishlistItemReadSerializer(many=True)
    count = serializers.IntegerField()
    unseen_count = serializers.IntegerField()


class WishlistMembershipSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    in_wishlist = serializers.BooleanField()


class WishlistAddSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(min_value=1)
