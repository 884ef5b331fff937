from django.contrib import admin

from .models import Allotment, AllotmentRun, AllotmentState


class AllotmentInline(admin.TabularInline):
    model = Allotment
    extra = 0
    can_delete = False
    fields = ['roll_no', 'course_code', 'outcome', 'rank', 'level', 'reason']
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(AllotmentRun)
class AllotmentRunAdmin(admin.ModelAdmin):
    """Runs are written by the engine only; the admin is a read-only history."""
    list_display = ['id', 'created_at', 'students_processed', 'total_allotted',
                    'total_waitlisted', 'duration_ms', 'created_by', 'superseded_at']
    list_filter = ['created_at']
    readonly_fields = ['created_at', 'completed_at', 'superseded_at', 'students_processed',
                       'total_allotted', 'total_waitlisted', 'duration_ms', 'warnings', 'created_by']
    inlines = [AllotmentInline]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(Allotment)
class AllotmentAdmin(admin.ModelAdmin):
    list_display = ['run', 'roll_no', 'course_code', 'outcome', 'rank', 'level', 'reason']
    list_filter = ['outcome', 'reason', 'run']
    search_fields = ['roll_no', 'course_code']
    list_select_related = ['run']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(AllotmentState)
class AllotmentStateAdmin(admin.ModelAdmin):
    list_display = ['current_run', 'published', 'published_at', 'running', 'lock_acquired_at', 'updated_at']
    readonly_fields = ['current_run', 'published', 'published_at', 'running', 'lock_acquired_at', 'updated_at']

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
