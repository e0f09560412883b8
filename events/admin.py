from django.contrib import admin

from events.models import Event, Registration


class RegistrationInline(admin.TabularInline):
    model = Registration
    extra = 0
    fields = ["user", "status", "notes", "registered_at"]
    readonly_fields = ["user", "status", "registered_at"]
    can_delete = False

    def has_add_permission(self, request, obj=None) -> bool:
        return False


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "status", "start_date", "capacity", "registered_count"]
    list_filter = ["status", "is_featured"]
    search_fields = ["title", "location"]
    readonly_fields = ["registered_count", "status"]
    inlines = [RegistrationInline]


@admin.register(Registration)
class RegistrationAdmin(admin.ModelAdmin):
    list_display = ["event", "user", "status", "registered_at"]
    list_filter = ["status", "event"]
    # Status changes must go through the service so the ledger stays in sync.
    readonly_fields = ["event", "user", "status", "registered_at", "updated_at"]

    def has_delete_permission(self, request, obj=None) -> bool:
        return False

    def has_add_permission(self, request) -> bool:
        return False
