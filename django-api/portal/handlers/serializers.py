"""Serializers for request validation and domain model responses."""

from decimal import ROUND_HALF_UP

from rest_framework import serializers

from portal.domain import Role, Season, UserStatus

MONEY = {"max_digits": 12, "decimal_places": 2, "rounding": ROUND_HALF_UP}
RATE = {"max_digits": 5, "decimal_places": 4}


class CapabilitiesSerializer(serializers.Serializer):
    """Serializer for UserCapabilities domain model."""

    id = serializers.CharField()
    email = serializers.EmailField()
    name = serializers.CharField()
    commission_rate = serializers.DecimalField(**RATE)
    can_reserve = serializers.BooleanField()
    can_access_mural = serializers.BooleanField()
    can_access_exchange = serializers.BooleanField()
    is_internal = serializers.BooleanField()
    is_admin = serializers.BooleanField()
    agency_name = serializers.CharField(allow_null=True)


class ProjectedPricesSerializer(serializers.Serializer):
    """Sale and net prices for one season; net columns are hidden for internal callers."""

    sale_adult = serializers.DecimalField(**MONEY)
    net_adult = serializers.DecimalField(**MONEY)
    sale_child = serializers.DecimalField(**MONEY)
    net_child = serializers.DecimalField(**MONEY)
    sale_infant = serializers.DecimalField(**MONEY)
    net_infant = serializers.DecimalField(**MONEY)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if self.context.get("hide_net"):
            for key in ("net_adult", "net_child", "net_infant"):
                data.pop(key)
        return data


class AgencyProductSerializer(serializers.Serializer):
    """Serializer for AgencyProduct domain model."""

    id = serializers.CharField()
    destination = serializers.CharField()
    name = serializers.CharField()
    category = serializers.CharField(source="product.category")
    subcategory = serializers.CharField(source="product.subcategory")
    season_label = serializers.CharField(source="product.season_label")
    pickup = serializers.CharField(source="product.pickup")
    return_time = serializers.CharField(source="product.return_time")
    eligible_days = serializers.ListField(
        source="product.eligible_days", child=serializers.CharField()
    )
    duration = serializers.CharField(source="product.duration")
    extra_fees = serializers.CharField(source="product.extra_fees")
    restrictions = serializers.CharField(source="product.restrictions")
    summary = serializers.CharField(source="product.summary")
    media_url = serializers.CharField(source="product.media_url")
    summer = ProjectedPricesSerializer()
    winter = ProjectedPricesSerializer()


class CartItemInputSerializer(serializers.Serializer):
    product_id = serializers.CharField()
    season = serializers.ChoiceField(choices=[s.value for s in Season])
    adults = serializers.IntegerField(min_value=0, default=0)
    children = serializers.IntegerField(min_value=0, default=0)
    infants = serializers.IntegerField(min_value=0, default=0)


class CartQuoteInputSerializer(serializers.Serializer):
    items = CartItemInputSerializer(many=True, allow_empty=True)


class CartLineSerializer(serializers.Serializer):
    product_id = serializers.CharField()
    product_name = serializers.CharField()
    destination = serializers.CharField()
    sale_adult = serializers.DecimalField(**MONEY)
    sale_child = serializers.DecimalField(**MONEY)
    sale_infant = serializers.DecimalField(**MONEY)
    adults = serializers.IntegerField(source="adults.value")
    children = serializers.IntegerField(source="children.value")
    infants = serializers.IntegerField(source="infants.value")
    subtotal = serializers.DecimalField(**MONEY)


class CartTotalsSerializer(serializers.Serializer):
    total = serializers.DecimalField(**MONEY)
    commission = serializers.DecimalField(**MONEY)
    net = serializers.DecimalField(**MONEY)

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if self.context.get("hide_net"):
            data["commission"] = None
            data["net"] = None
        return data


class ReservationInputSerializer(serializers.Serializer):
    product_id = serializers.CharField()
    season = serializers.ChoiceField(choices=[s.value for s in Season])
    travel_date = serializers.DateField()
    adults = serializers.IntegerField(min_value=0, default=0)
    children = serializers.IntegerField(min_value=0, default=0)
    infants = serializers.IntegerField(min_value=0, default=0)
    pax_names = serializers.CharField(allow_blank=True, default="")


class NoticeSerializer(serializers.Serializer):
    id = serializers.CharField()
    title = serializers.CharField()
    summary = serializers.CharField()
    content = serializers.CharField()
    category = serializers.CharField()
    priority = serializers.CharField(source="priority.value")
    impact = serializers.CharField()
    destination = serializers.CharField()
    published_at = serializers.DateTimeField()
    is_pinned = serializers.BooleanField()
    requires_confirmation = serializers.BooleanField()


class ReadLogSerializer(serializers.Serializer):
    notice_id = serializers.CharField()
    confirmed_at = serializers.DateTimeField()


class ReaderSerializer(serializers.Serializer):
    user_name = serializers.CharField()
    confirmed_at = serializers.DateTimeField()
    agency_name = serializers.CharField()


class RequestedUserSerializer(serializers.Serializer):
    name = serializers.CharField()
    email = serializers.EmailField()
    phone = serializers.CharField(allow_blank=True, default="")


class AgencyRegistrationSerializer(serializers.Serializer):
    name = serializers.CharField()
    legal_name = serializers.CharField()
    cnpj = serializers.CharField()
    cadastur = serializers.CharField(allow_blank=True, default="")
    address = serializers.CharField(allow_blank=True, default="")
    responsible_name = serializers.CharField(allow_blank=True, default="")
    responsible_phone = serializers.CharField(allow_blank=True, default="")
    instagram = serializers.CharField(allow_blank=True, default="")
    bank_details = serializers.CharField(allow_blank=True, default="")
    requested_users = RequestedUserSerializer(many=True, default=list)


class AgencySerializer(serializers.Serializer):
    """Serializer for AgencyRecord domain model."""

    id = serializers.CharField()
    name = serializers.CharField()
    legal_name = serializers.CharField()
    cnpj = serializers.CharField()
    commission_rate = serializers.DecimalField(**RATE)
    status = serializers.CharField(source="status.value")
    requested_users = RequestedUserSerializer(many=True)
    created_at = serializers.DateTimeField(allow_null=True)


class CommissionInputSerializer(serializers.Serializer):
    commission_rate = serializers.DecimalField(**RATE)


class UserSerializer(serializers.Serializer):
    """Serializer for UserRecord domain model."""

    id = serializers.CharField()
    email = serializers.EmailField()
    name = serializers.CharField()
    role = serializers.CharField(source="role.value")
    status = serializers.CharField(source="status.value")
    agency_id = serializers.CharField(allow_null=True)
    flag_reserva = serializers.BooleanField()
    flag_mural = serializers.BooleanField()
    flag_exchange = serializers.BooleanField()
    allowed_destinations = serializers.ListField(child=serializers.CharField())


class UserCreateSerializer(serializers.Serializer):
    email = serializers.EmailField()
    name = serializers.CharField(allow_blank=True, default="")
    role = serializers.ChoiceField(
        choices=[r.value for r in Role], default=Role.PARTNER_AGENCY.value
    )
    agency_id = serializers.CharField(allow_null=True, required=False, default=None)
    flag_reserva = serializers.BooleanField(default=False)
    flag_mural = serializers.BooleanField(default=False)
    flag_exchange = serializers.BooleanField(default=False)
    allowed_destinations = serializers.ListField(
        child=serializers.CharField(), default=list
    )


class UserAccessSerializer(serializers.Serializer):
    name = serializers.CharField(required=False)
    role = serializers.ChoiceField(choices=[r.value for r in Role], required=False)
    status = serializers.ChoiceField(
        choices=[s.value for s in UserStatus], required=False
    )
    agency_id = serializers.CharField(allow_blank=True, required=False)
    flag_reserva = serializers.BooleanField(required=False)
    flag_mural = serializers.BooleanField(required=False)
    flag_exchange = serializers.BooleanField(required=False)
    allowed_destinations = serializers.ListField(
        child=serializers.CharField(), required=False
    )
