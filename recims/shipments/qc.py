"""
QC evaluation against a category's acceptance criteria
"""
from collections.abc import Mapping
from decimal import Decimal

from recims.inventory.units import to_decimal


def _criteria_value(criteria, key):
    value = criteria.get(key) if isinstance(criteria, Mapping) else getattr(criteria, key, None)
    return to_decimal(value)


def _percent(value):
    """Render a threshold the way it was entered: 95.00 -> 95, 2.50 -> 2.5"""
    return format(Decimal(value).normalize(), 'f')


def evaluate_inspection(data, criteria):
    """
    Return ``(overall_result, pass_criteria_met, fail_criteria)``.

    Without matching criteria an inspection passes with no findings.
    """
    if criteria is None:
        return 'pass', [], []

    passed = []
    failed = []

    purity = to_decimal(data.get('measured_purity_percent'))
    min_purity = _criteria_value(criteria, 'min_purity_percent')
    if purity is not None and min_purity is not None:
        if purity >= min_purity:
            passed.append('Purity requirements met')
        else:
            failed.append(f'Purity below minimum ({_percent(min_purity)}%)')

    contamination = to_decimal(data.get('measured_contamination_percent'))
    max_contamination = _criteria_value(criteria, 'max_contamination_percent')
    if contamination is not None and max_contamination is not None:
        if contamination <= max_contamination:
            passed.append('Contamination within limits')
        else:
            failed.append(f'Contamination exceeds limit ({_percent(max_contamination)}%)')

    moisture = to_decimal(data.get('measured_moisture_percent'))
    max_moisture = _criteria_value(criteria, 'max_moisture_percent')
    if moisture is not None and max_moisture is not None:
        if moisture <= max_moisture:
            passed.append('Moisture within limits')
        else:
            failed.append(f'Moisture exceeds limit ({_percent(max_moisture)}%)')

    if not data.get('visual_inspection_pass'):
        failed.append('Visual inspection failed')
    else:
        passed.append('Visual inspection passed')

    lab_required = criteria.get('lab_testing_required') if isinstance(criteria, Mapping) \
        else getattr(criteria, 'lab_testing_required', False)
    if lab_required and data.get('lab_test_pass') is False:
        failed.append('Lab test failed')

    return ('fail' if failed else 'pass'), passed, failed
