from django.contrib import admin
from .models import Preference


@admin.register(Preference)
class PreferenceAdmin(admin.ModelAdmin):
    list_display = ['get_roll_no', 'rank', 'course', 'updated_at']
    list_filter = ['course__course_type', 'course']
    search_fields = ['student__roll_no', 'course__course_code']
    list_select_related = ['student', 'course']
    ordering = ['student__roll_no', 'rank']

    def get_roll_no(self, obj):
        return obj.student.roll_no
    get_roll_no.short_description = 'Roll No'
