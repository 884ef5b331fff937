# backend/users/models.py
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models, transaction
from django.utils import timezone
import logging

logger = logging.getLogger(__name__)

ROLE_ADMIN = "Admin"
ROLE_STUDENT = "Student"
ESSENTIAL_ROLES = (ROLE_ADMIN, ROLE_STUDENT)


class UserManager(BaseUserManager):
    """
    Users log in with a username (students use their roll number). Every new
    user gets exactly one active role, Student unless told otherwise.
    """

    def create_user(self, username, password=None, role_name=None, **extra_fields):
        if not username:
            raise ValueError("The username field must be set")
        extra_fields.setdefault('is_active', True)
        role_name = role_name or ROLE_STUDENT

        with transaction.atomic():
            user = self.model(username=username.strip(), **extra_fields)
            if password:
                user.set_password(password)
            else:
                user.set_unusable_password()
            user.save(using=self._db)
            self.switch_role(user, role_name)
        logger.info("Created user %s with role %s", user.username, role_name)
        return user

    def create_superuser(self, username, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        if not extra_fields['is_staff']:
            raise ValueError('Superuser must have is_staff=True.')
        return self.create_user(username, password, role_name=ROLE_ADMIN, **extra_fields)

    def switch_role(self, user, role_name):
        """Make ``role_name`` the user's only active role.

        Admin and Student are created on first use; any other role must
        already exist.
        """
        role = Role.objects.filter(role_name=role_name).first()
        if role is None:
            if role_name not in ESSENTIAL_ROLES:
                raise ValueError(f"Role '{role_name}' does not exist and is not an essential role")
            role = Role.objects.create(role_name=role_name, description=f'{role_name} role')

        with transaction.atomic():
            for link in user.role_links.filter(is_active=True).exclude(role=role):
                link.disable()
            if not user.role_links.filter(role=role, is_active=True).exists():
                UserRoles.objects.create(user=user, role=role)
        return role


class User(AbstractBaseUser):
    """
    Portal account. Admins and students share this table; the active role
    decides which endpoints they reach, and students also own a ``Student``
    profile.
    """
    username = models.CharField(max_length=150, unique=True)
    email = models.EmailField(null=True, blank=True)
    first_name = models.CharField(max_length=150, blank=True)
    last_name = models.CharField(max_length=150, blank=True)
    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'username'
    REQUIRED_FIELDS = []

    class Meta:
        verbose_name = 'User'
        verbose_name_plural = 'Users'

    def __str__(self):
        return self.username

    def get_full_name(self):
        return " ".join(p for p in (self.first_name, self.last_name) if p) or self.username

    def get_short_name(self):
        return self.first_name or self.username

    # no PermissionsMixin: the admin site only needs these two
    def has_perm(self, perm, obj=None):
        return self.is_staff

    def has_module_perms(self, app_label):
        return self.is_staff

    def get_active_role(self):
        link = self.role_links.filter(is_active=True).select_related('role').first()
        return link.role if link else None

    def get_active_role_name(self):
        role = self.get_active_role()
        return role.role_name if role else None

    def assign_role(self, role_name):
        return User.objects.switch_role(self, role_name)

    def has_role(self, role_name):
        return self.role_links.filter(is_active=True, role__role_name=role_name).exists()

    @property
    def is_admin(self):
        return self.is_staff or self.has_role(ROLE_ADMIN)


class Role(models.Model):
    """Named role; the portal uses Admin and Student."""
    role_name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Role'
        verbose_name_plural = 'Roles'

    def __str__(self):
        return self.role_name


class UserRoles(models.Model):
    """
    Role assignment history. At most one row per user is active; switching
    roles disables the old row instead of deleting it.
    """
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name='role_links')
    role = models.ForeignKey(Role, on_delete=models.CASCADE, related_name='user_links')
    assigned_at = models.DateTimeField(default=timezone.now)
    is_active = models.BooleanField(default=True)
    disabled_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ['-assigned_at']
        verbose_name = 'User Role'
        verbose_name_plural = 'User Roles'

    def __str__(self):
        state = "active" if self.is_active else "disabled"
        return f"{self.user.username}: {self.role.role_name} ({state})"

    def disable(self):
        self.is_active = False
        self.disabled_at = timezone.now()
        self.save(update_fields=['is_active', 'disabled_at'])


class Student(models.Model):
    """
    Student profile. Only ``active`` students take part in an allotment run;
    ``pending`` students wait for admin approval, ``rejected`` ones never do.
    """

    STATUS_PENDING = 'pending'
    STATUS_ACTIVE = 'active'
    STATUS_REJECTED = 'rejected'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending approval'),
        (STATUS_ACTIVE, 'Active'),
        (STATUS_REJECTED, 'Rejected'),
    ]

    user = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        related_name='student',
    )
    roll_no = models.CharField(
        max_length=32,
        unique=True,
        help_text="University roll number (e.g., 21CS1042)"
    )
    cgpa = models.DecimalField(
        max_digits=4,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0), MaxValueValidator(10)],
        help_text="Merit score; empty CGPA ranks after every graded student"
    )
    department = models.CharField(max_length=100, blank=True)
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING,
    )
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['roll_no']
        verbose_name = 'Student'
        verbose_name_plural = 'Students'

    def __str__(self):
        return f"{self.roll_no} ({self.get_status_display()})"

    def clean(self):
        if self.roll_no:
            self.roll_no = self.roll_no.upper().strip()

    @property
    def is_active_student(self):
        return self.status == self.STATUS_ACTIVE
