# utils/models.py

"""
Base model for EduTrack records with audit trail fields.

Key Features:
- UUID primary keys
- created_at / updated_at timestamps
- Who created / last updated a record (from the request audit context)
- Change reason tracking
"""

from django.db import models
from django.utils import timezone
import uuid
import logging

logger = logging.getLogger(__name__)


# =============================================================================
# BASE MODEL
# =============================================================================

class BaseModel(models.Model):
    """
    Abstract base model with audit trail capabilities.

    Features:
    - Automatic user tracking (who created/updated)
    - IP address tracking (where operations came from)
    - Change reason tracking (why changes were made)

    The user and IP are read from utils.context, which is populated by
    AuditContextMiddleware for the duration of a request. Outside a
    request (shell, management commands, tests) the fields stay empty
    unless a RequestContext block is used.
    """

    # Core identification
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # Timestamps
    created_at = models.DateTimeField("Created At", db_index=True, editable=False)
    updated_at = models.DateTimeField("Updated At", db_index=True, editable=False)

    # User tracking - CharField so records survive user deletion
    created_by_id = models.CharField(
        "Created By ID",
        max_length=50,
        null=True,
        blank=True,
        db_index=True,
        help_text="ID of user who created this record"
    )
    updated_by_id = models.CharField(
        "Updated By ID",
        max_length=50,
        null=True,
        blank=True,
        db_index=True,
        help_text="ID of user who last updated this record"
    )

    # IP tracking
    created_from_ip = models.GenericIPAddressField("Created From IP", null=True, blank=True)
    updated_from_ip = models.GenericIPAddressField("Updated From IP", null=True, blank=True)

    # Change reason tracking
    change_reason = models.CharField(
        "Change Reason",
        max_length=255,
        blank=True,
        null=True,
        help_text="Explanation for why this change was made"
    )

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        """
        Override save to:
        1. Set timestamps
        2. Populate audit trail fields (created_by, updated_by, IPs)
        """
        from utils.context import get_request_context

        is_new = self._state.adding
        now = timezone.now()

        # -------------------------------------------------------------------------
        # TIMESTAMPS
        # -------------------------------------------------------------------------
        if is_new:
            if not self.created_at:
                self.created_at = now
            if not self.updated_at:
                self.updated_at = now
        else:
            self.updated_at = now

        # -------------------------------------------------------------------------
        # AUDIT FIELDS FROM REQUEST CONTEXT
        # -------------------------------------------------------------------------
        context = get_request_context()

        if context:
            user = context.get('user')
            ip_address = context.get('ip_address')

            if is_new:
                if user and not self.created_by_id:
                    self.created_by_id = str(user.pk)
                if ip_address and not self.created_from_ip:
                    self.created_from_ip = ip_address

            if user:
                self.updated_by_id = str(user.pk)
            if ip_address:
                self.updated_from_ip = ip_address

        # update_fields saves must also write the refreshed timestamp
        update_fields = kwargs.get('update_fields')
        if update_fields is not None:
            kwargs['update_fields'] = set(update_fields) | {'updated_at', 'updated_by_id', 'updated_from_ip'}

        return super().save(*args, **kwargs)

    # -------------------------------------------------------------------------
    # AUDIT TRAIL HELPER METHODS
    # -------------------------------------------------------------------------

    def get_created_by(self):
        """
        Get the user who created this record.

        Returns:
            User object or None
        """
        return self._get_user(self.created_by_id)

    def get_updated_by(self):
        """Get the user who last updated this record"""
        return self._get_user(self.updated_by_id)

    @staticmethod
    def _get_user(user_id):
        if not user_id:
            return None
        from django.contrib.auth import get_user_model
        User = get_user_model()
        try:
            return User.objects.get(pk=user_id)
        except (User.DoesNotExist, ValueError):
            logger.debug(f"Audit user {user_id} no longer exists")
            return None

    def set_change_reason(self, reason):
        """
        Set the reason for the next save.

        Example:
            record.set_change_reason("Corrected total after fee review")
            record.save()
        """
        self.change_reason = reason
        return self
