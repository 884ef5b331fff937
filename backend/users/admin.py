from django.contrib import admin
from django import forms
from .models import User, Role, UserRoles, Student


class UserRoleInline(admin.TabularInline):
    """Inline for managing user roles with proper auditing."""
    model = UserRoles
    extra = 0
    fields = ['role', 'is_active', 'assigned_at', 'disabled_at']
    readonly_fields = ['assigned_at', 'disabled_at']

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('role').order_by('-assigned_at')


class UserAdminForm(forms.ModelForm):
    role = forms.ModelChoiceField(
        queryset=Role.objects.all().order_by('role_name'),
        required=False,
        help_text="Select a role for this user. Leave empty to keep the current role.",
    )

    class Meta:
        model = User
        fields = ['username', 'email', 'first_name', 'last_name', 'is_active', 'is_staff']

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if self.instance and self.instance.pk:
            current_role = self.instance.get_active_role()
            if current_role:
                self.fields['role'].initial = current_role


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    form = UserAdminForm
    inlines = [UserRoleInline]
    list_display = ['username', 'email', 'first_name', 'last_name', 'is_active', 'is_staff', 'get_role']
    list_filter = ['is_active', 'is_staff', 'created_at']
    search_fields = ['username', 'email', 'first_name', 'last_name']
    ordering = ['username']

    def get_role(self, obj):
        return obj.get_active_role_name() or '-'
    get_role.short_description = 'Role'

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        role = form.cleaned_data.get('role')
        if role and role != obj.get_active_role():
            obj.assign_role(role.role_name)


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    list_display = ['role_name', 'description', 'created_at']
    search_fields = ['role_name']


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ['roll_no', 'get_name', 'cgpa', 'department', 'status', 'created_at']
    list_filter = ['status', 'department']
    search_fields = ['roll_no', 'user__username', 'user__first_name', 'user__last_name', 'user__email']
    list_select_related = ['user']
    actions = ['approve_students', 'reject_students']

    def get_name(self, obj):
        return obj.user.get_full_name()
    get_name.short_description = 'Name'

    @admin.action(description="Approve selected students")
    def approve_students(self, request, queryset):
        updated = queryset.update(status=Student.STATUS_ACTIVE)
        self.message_user(request, f"{updated} student(s) approved.")

    @admin.action(description="Reject selected students")
    def reject_students(self, request, queryset):
        updated = queryset.update(status=Student.STATUS_REJECTED)
        self.message_user(request, f"{updated} student(s) rejected.")
