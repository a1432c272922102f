# utils/tests/factories.py

"""Small builders shared by the app test suites."""

from datetime import date

from django.contrib.auth.models import User

from accounts.models import UserProfile
from core.config import CenterConfig
from students.models import Student

PASSWORD = 'pass12345'


def make_user(username, role=UserProfile.ROLE_TEACHER, **extra):
    user = User.objects.create_user(username=username, email=f"{username}@example.com", password=PASSWORD, **extra)
    UserProfile.objects.create(user=user, role=role)
    return user


def make_student(first_name='Amina', last_name='Njoya', class_level='Form 1', parent=None, **extra):
    data = {
        'date_of_birth': date(2010, 5, 17),
        'gender': 'Female',
        'parent_user': parent,
    }
    data.update(extra)
    return Student.objects.create(first_name=first_name, last_name=last_name, class_level=class_level, **data)


def make_config(**overrides):
    return CenterConfig(**overrides)
