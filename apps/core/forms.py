# core/forms.py

from django import forms

from .models import CenterSettings


class CenterSettingsForm(forms.ModelForm):
    """Full or partial update of the center settings (model clean() runs too)."""

    class Meta:
        model = CenterSettings
        fields = [
            'center_name',
            'center_email',
            'center_phone',
            'center_address',
            'country',
            'subjects',
            'class_levels',
            'academic_year',
            'grading_scale',
            'passing_grade',
            'currency',
            'default_payment_amount',
            'receipt_prefix',
            'date_format',
            'language',
        ]

    def clean_receipt_prefix(self):
        return (self.cleaned_data.get('receipt_prefix') or '').strip().upper()

    def clean_currency(self):
        return (self.cleaned_data.get('currency') or '').strip().upper()
