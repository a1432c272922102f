# accounts/admin.py

from django.contrib import admin
from django.contrib import messages
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.models import User
from django.utils.html import format_html
import logging

from .models import UserProfile

logger = logging.getLogger(__name__)


# =============================================================================
# INLINE ADMINS
# =============================================================================

class UserProfileInline(admin.StackedInline):
    """Inline admin for UserProfile"""
    model = UserProfile
    can_delete = False
    verbose_name_plural = 'Profile Information'
    fields = ('role', 'phone', 'status')


# =============================================================================
# CUSTOM USER ADMIN
# =============================================================================

class CustomUserAdmin(BaseUserAdmin):
    """User admin with the EduTrack role inline"""

    inlines = (UserProfileInline,)

    list_display = (
        'username', 'email', 'get_full_name_display',
        'get_role', 'is_active', 'is_staff',
    )

    list_filter = ('is_active', 'is_staff', 'is_superuser', 'profile__role')

    search_fields = ('username', 'email', 'first_name', 'last_name', 'profile__phone')

    ordering = ('-date_joined',)

    # -------------------------------------------------------------------------
    # CUSTOM DISPLAY METHODS
    # -------------------------------------------------------------------------

    def get_full_name_display(self, obj):
        full_name = obj.get_full_name()
        return full_name if full_name else '-'
    get_full_name_display.short_description = 'Full Name'

    def get_role(self, obj):
        """Display role with color coding"""
        try:
            profile = obj.profile
        except UserProfile.DoesNotExist:
            return '-'
        role_colors = {
            UserProfile.ROLE_ADMIN: '#e74c3c',
            UserProfile.ROLE_TEACHER: '#3498db',
            UserProfile.ROLE_PARENT: '#27ae60',
        }
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            role_colors.get(profile.role, '#95a5a6'),
            profile.get_role_display()
        )
    get_role.short_description = 'Role'
    get_role.admin_order_field = 'profile__role'

    # -------------------------------------------------------------------------
    # ACTIONS
    # -------------------------------------------------------------------------

    actions = ['activate_users', 'deactivate_users']

    def activate_users(self, request, queryset):
        updated = queryset.update(is_active=True)
        self.message_user(request, f'{updated} user(s) successfully activated.', messages.SUCCESS)
    activate_users.short_description = 'Activate selected users'

    def deactivate_users(self, request, queryset):
        updated = queryset.exclude(pk=request.user.pk).update(is_active=False)
        self.message_user(request, f'{updated} user(s) deactivated.', messages.WARNING)
    deactivate_users.short_description = 'Deactivate selected users'


admin.site.unregister(User)
admin.site.register(User, CustomUserAdmin)


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ('user', 'role', 'phone', 'status', 'updated_at')
    list_filter = ('role', 'status')
    search_fields = ('user__username', 'user__email', 'phone')
    readonly_fields = ('created_at', 'updated_at', 'created_by_id', 'updated_by_id')
