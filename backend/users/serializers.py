#backend/users/serializers.py
from rest_framework import serializers
from .models import User, Student


class StudentProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = Student
        fields = ['roll_no', 'cgpa', 'department', 'status']
        read_only_fields = fields


class UserSerializer(serializers.ModelSerializer):
    """Serializer for User model (read)."""
    full_name = serializers.SerializerMethodField()
    role_name = serializers.SerializerMethodField()
    student = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id',
            'username', 'email',
            'first_name', 'last_name', 'full_name', 'role_name',
            'is_active', 'student',
        ]
        read_only_fields = fields

    def get_full_name(self, obj):
        return obj.get_full_name()

    def get_role_name(self, obj):
        return obj.get_active_role_name()

    def get_student(self, obj):
        profile = getattr(obj, 'student', None)
        return StudentProfileSerializer(profile).data if profile else None


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField(help_text="Username or student roll number")
    password = serializers.CharField(write_only=True, help_text="User's password")
