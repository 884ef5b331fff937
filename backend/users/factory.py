"""
Factory classes for generating test data using Factory Boy and Faker.
"""
from decimal import Decimal

import factory
from factory.django import DjangoModelFactory
from django.contrib.auth import get_user_model
from users.models import Role, UserRoles, Student, ROLE_ADMIN, ROLE_STUDENT

User = get_user_model()


class RoleFactory(DjangoModelFactory):
    """Factory for creating Role instances."""

    class Meta:
        model = Role
        django_get_or_create = ('role_name',)

    role_name = factory.Sequence(lambda n: f"Role_{n}")
    description = factory.Faker('sentence', nb_words=6)


class UserFactory(DjangoModelFactory):
    """Factory for creating User instances."""

    class Meta:
        model = User
        skip_postgeneration_save = True

    username = factory.Sequence(lambda n: f"user{n}")
    email = factory.Faker('email')
    first_name = factory.Faker('first_name')
    last_name = factory.Faker('last_name')
    is_active = True
    is_staff = False

    @factory.post_generation
    def password(self, create, extracted, **kwargs):
        if not create:
            return
        self.set_password(extracted or 'defaultpass123')
        self.save()


def _give_role(user, role_name):
    role, _ = Role.objects.get_or_create(
        role_name=role_name,
        defaults={'description': f'{role_name} role'}
    )
    UserRoles.objects.create(user=user, role=role)


class AdminUserFactory(UserFactory):
    """Admin users: staff flag plus the Admin role."""

    is_staff = True

    @factory.post_generation
    def roles(self, create, extracted, **kwargs):
        if not create:
            return
        _give_role(self, ROLE_ADMIN)


class StudentUserFactory(UserFactory):
    """Users holding the Student role; pair with StudentFactory for a profile."""

    @factory.post_generation
    def roles(self, create, extracted, **kwargs):
        if not create:
            return
        _give_role(self, ROLE_STUDENT)


class StudentFactory(DjangoModelFactory):
    """Active student with a Student-role user and a CGPA."""

    class Meta:
        model = Student

    user = factory.SubFactory(StudentUserFactory)
    roll_no = factory.Sequence(lambda n: f"21CS{n:04d}")
    cgpa = factory.LazyFunction(lambda: Decimal("7.50"))
    department = "Computer Science"
    status = Student.STATUS_ACTIVE
