from django.contrib import admin

from portal.models import Agency, Notice, NoticeReadLog, PortalUser, Reservation, Tour


class PortalUserInline(admin.TabularInline):
    model = PortalUser
    extra = 0
    fields = ["email", "name", "role", "status", "flag_reserva", "flag_mural", "flag_exchange"]


@admin.register(Agency)
class AgencyAdmin(admin.ModelAdmin):
    list_display = ["name", "cnpj", "status", "commission_rate", "created_at"]
    list_filter = ["status"]
    search_fields = ["name", "legal_name", "cnpj"]
    inlines = [PortalUserInline]


@admin.register(PortalUser)
class PortalUserAdmin(admin.ModelAdmin):
    list_display = ["email", "name", "role", "status", "agency"]
    list_filter = ["role", "status", "agency"]
    search_fields = ["email", "name"]


@admin.register(Tour)
class TourAdmin(admin.ModelAdmin):
    list_display = ["name", "destination", "category", "summer_adult", "winter_adult"]
    list_filter = ["destination"]
    search_fields = ["name", "destination"]


@admin.register(Notice)
class NoticeAdmin(admin.ModelAdmin):
    list_display = ["title", "priority", "is_pinned", "is_active", "published_at"]
    list_filter = ["priority", "is_active"]


@admin.register(NoticeReadLog)
class NoticeReadLogAdmin(admin.ModelAdmin):
    list_display = ["notice", "user", "agency_name", "confirmed_at"]
    list_filter = ["notice"]


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = ["product_name", "agent_email", "travel_date", "status", "total_amount"]
    list_filter = ["status"]
