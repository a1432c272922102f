# academics/forms.py

"""
Forms for grades and attendance marks.
Both take the center configuration so subjects can be checked.
"""

from django import forms
import logging

from students.models import Student
from .models import Attendance, Grade

logger = logging.getLogger(__name__)


# =============================================================================
# GRADE FORM
# =============================================================================

class GradeForm(forms.ModelForm):

    class Meta:
        model = Grade
        fields = [
            'student',
            'subject',
            'test_name',
            'test_date',
            'test_type',
            'score',
            'max_score',
            'notes',
        ]

    def __init__(self, *args, config=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.config = config
        self.fields['test_type'].required = False
        self.fields['max_score'].required = False

    def clean_subject(self):
        subject = self.cleaned_data['subject'].strip()
        if self.config is not None and not self.config.is_known_subject(subject):
            raise forms.ValidationError(
                f"Unknown subject '{subject}'. Choose one of: {', '.join(self.config.subjects)}"
            )
        return subject

    def clean_test_type(self):
        return self.cleaned_data.get('test_type') or 'exam'

    def clean_max_score(self):
        value = self.cleaned_data.get('max_score')
        return value if value is not None else Grade._meta.get_field('max_score').default

    def clean(self):
        cleaned_data = super().clean()
        score = cleaned_data.get('score')
        max_score = cleaned_data.get('max_score')
        if score is not None and max_score is not None and score > max_score:
            self.add_error('score', "Score cannot exceed the maximum score")
        return cleaned_data


# =============================================================================
# ATTENDANCE FORM
# =============================================================================

class AttendanceMarkForm(forms.Form):
    """One attendance mark: student, date, status"""

    student = forms.ModelChoiceField(queryset=Student.objects.all())
    date = forms.DateField()
    status = forms.ChoiceField(choices=Attendance.STATUS_CHOICES)
    notes = forms.CharField(max_length=255, required=False)
