# students/forms.py

"""
Student create/update form.

Views feed it the decoded JSON body (merged over the current instance
values for partial updates); class levels are checked against the
center configuration the view passes in.
"""

from django import forms
from django.contrib.auth import get_user_model
import logging

from .models import Student

User = get_user_model()
logger = logging.getLogger(__name__)


# =============================================================================
# STUDENT FORM
# =============================================================================

class StudentForm(forms.ModelForm):
    """
    Usage:
        form = StudentForm(data, config=config)
        if form.is_valid():
            student = form.save()
    """

    class Meta:
        model = Student
        fields = [
            'first_name',
            'last_name',
            'date_of_birth',
            'gender',
            'class_level',
            'enrollment_date',
            'status',
            'address',
            'notes',
            'parent_user',
            'parent_name',
            'parent_phone',
            'parent_email',
        ]

    def __init__(self, *args, config=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.config = config
        self.fields['parent_user'].queryset = User.objects.filter(profile__role='parent')
        self.fields['parent_user'].required = False
        self.fields['enrollment_date'].required = False

    def clean_first_name(self):
        return self.cleaned_data['first_name'].strip()

    def clean_last_name(self):
        return self.cleaned_data['last_name'].strip()

    def clean_class_level(self):
        class_level = self.cleaned_data['class_level'].strip()
        if self.config is not None and not self.config.is_known_class_level(class_level):
            raise forms.ValidationError(
                f"Unknown class level '{class_level}'. "
                f"Choose one of: {', '.join(self.config.class_levels)}"
            )
        return class_level

    def clean_enrollment_date(self):
        value = self.cleaned_data.get('enrollment_date')
        if value is None:
            if self.instance.pk and self.instance.enrollment_date:
                return self.instance.enrollment_date
            from core.utils import get_center_today
            return get_center_today()
        return value
