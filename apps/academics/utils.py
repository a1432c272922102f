# academics/utils.py
"""
Utility functions for academics app
Grade display conversions
"""

from decimal import Decimal
import logging

logger = logging.getLogger(__name__)


# =============================================================================
# GRADE CONVERSIONS
# =============================================================================

# (minimum percentage, letter, GPA points), highest band first
GRADE_BANDS = [
    (Decimal('90'), 'A', Decimal('4.0')),
    (Decimal('80'), 'B', Decimal('3.0')),
    (Decimal('70'), 'C', Decimal('2.0')),
    (Decimal('60'), 'D', Decimal('1.0')),
    (Decimal('0'), 'F', Decimal('0.0')),
]


def letter_grade(percentage):
    """
    Convert a percentage to a letter grade.

    Example:
        >>> letter_grade(Decimal('85'))
        'B'
    """
    percentage = Decimal(str(percentage or 0))
    for minimum, letter, _ in GRADE_BANDS:
        if percentage >= minimum:
            return letter
    return 'F'


def gpa_points(percentage):
    """Convert a percentage to GPA points on a 4.0 scale"""
    percentage = Decimal(str(percentage or 0))
    for minimum, _, points in GRADE_BANDS:
        if percentage >= minimum:
            return points
    return Decimal('0.0')


def display_grade(percentage, grading_scale):
    """
    Render a percentage according to the center's grading scale.

    Returns:
        str: '85.00%', 'B' or '3.0'
    """
    if grading_scale == 'letter':
        return letter_grade(percentage)
    if grading_scale == 'gpa':
        return str(gpa_points(percentage))
    return f"{Decimal(str(percentage or 0)):.2f}%"
