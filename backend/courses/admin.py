from django.contrib import admin
from .models import Course, ElectiveSlot


class CourseInline(admin.TabularInline):
    model = Course
    extra = 0
    fields = ['course_code', 'course_name', 'capacity', 'status']
    show_change_link = True


@admin.register(ElectiveSlot)
class ElectiveSlotAdmin(admin.ModelAdmin):
    list_display = ['name', 'max_choices', 'course_count']
    search_fields = ['name']
    inlines = [CourseInline]

    def course_count(self, obj):
        return obj.courses.count()
    course_count.short_description = 'Courses'


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ['course_code', 'course_name', 'credits', 'capacity', 'course_type',
                    'elective_slot', 'semester', 'status']
    list_filter = ['course_type', 'status', 'elective_slot', 'semester']
    search_fields = ['course_code', 'course_name', 'faculty']
    list_select_related = ['elective_slot']
    ordering = ['course_code']
