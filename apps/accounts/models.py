# accounts/models.py

from django.contrib.auth.models import User
from django.core.validators import RegexValidator
from django.db import models
import logging

from utils.models import BaseModel

logger = logging.getLogger(__name__)


# =============================================================================
# VALIDATORS
# =============================================================================

phone_validator = RegexValidator(
    regex=r'^\+?[\d\s-]{6,20}$',
    message="Phone number may only contain digits, spaces, dashes and a leading '+'."
)


# =============================================================================
# USER PROFILE MODEL
# =============================================================================

class UserProfile(BaseModel):
    """Role and contact details for an EduTrack user"""

    ROLE_ADMIN = 'admin'
    ROLE_TEACHER = 'teacher'
    ROLE_PARENT = 'parent'

    USER_ROLES = [
        (ROLE_ADMIN, 'Administrator'),
        (ROLE_TEACHER, 'Teacher'),
        (ROLE_PARENT, 'Parent'),
    ]

    STATUS_CHOICES = [
        ('active', 'Active'),
        ('inactive', 'Inactive'),
    ]

    # -------------------------------------------------------------------------
    # CORE RELATIONSHIPS
    # -------------------------------------------------------------------------

    user = models.OneToOneField(
        User,
        on_delete=models.CASCADE,
        related_name='profile'
    )
    role = models.CharField(
        "Role",
        max_length=20,
        choices=USER_ROLES,
        default=ROLE_TEACHER,
        db_index=True
    )

    # -------------------------------------------------------------------------
    # CONTACT
    # -------------------------------------------------------------------------

    phone = models.CharField(
        "Phone Number",
        max_length=20,
        blank=True,
        default='',
        validators=[phone_validator]
    )
    status = models.CharField(
        "Status",
        max_length=10,
        choices=STATUS_CHOICES,
        default='active'
    )

    class Meta:
        verbose_name = 'User Profile'
        verbose_name_plural = 'User Profiles'
        ordering = ['user__username']

    def __str__(self):
        return f"{self.user.username} - {self.get_role_display()}"

    # -------------------------------------------------------------------------
    # PERMISSION HELPER METHODS
    # -------------------------------------------------------------------------

    def is_admin_user(self):
        """Check if user has admin privileges"""
        return self.role == self.ROLE_ADMIN or self.user.is_superuser

    def is_teacher(self):
        return self.role == self.ROLE_TEACHER

    def is_parent(self):
        return self.role == self.ROLE_PARENT

    def can_manage_finances(self):
        """Billing records and payment entries are admin-only"""
        return self.is_admin_user()

    def can_manage_academics(self):
        """Attendance and grades can be written by admins and teachers"""
        return self.is_admin_user() or self.is_teacher()

    def can_manage_students(self):
        return self.is_admin_user()

    def is_active_profile(self):
        return self.status == 'active' and self.user.is_active

    # -------------------------------------------------------------------------
    # PROPERTIES
    # -------------------------------------------------------------------------

    @property
    def full_name(self):
        """Get user's full name"""
        return self.user.get_full_name() or self.user.username

    def to_dict(self):
        return {
            'id': self.user.pk,
            'username': self.user.username,
            'email': self.user.email,
            'full_name': self.full_name,
            'role': self.role,
            'phone': self.phone,
            'status': self.status,
        }


# =============================================================================
# HELPERS
# =============================================================================

def get_user_profile(user):
    """
    Return the profile of a user, creating one on first access.

    Superusers get the admin role; everybody else starts as a teacher.
    """
    try:
        return user.profile
    except UserProfile.DoesNotExist:
        role = UserProfile.ROLE_ADMIN if user.is_superuser else UserProfile.ROLE_TEACHER
        profile, created = UserProfile.objects.get_or_create(user=user, defaults={'role': role})
        if created:
            logger.info(f"Created {role} profile for user {user.username}")
        return profile


def get_user_role(user):
    if user is None or not user.is_authenticated:
        return None
    return get_user_profile(user).role
