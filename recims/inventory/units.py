"""
Weight and volume conversions

All values are Decimals rounded half-up to two places, so a kg/lbs pair
converted back and forth stays within 0.01.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

LBS_PER_KG = Decimal('2.20462')
KG_PER_LB = Decimal('0.453592')
LBS_PER_TON = Decimal('2000')
KG_PER_TONNE = Decimal('1000')
LBS_PER_TONNE = Decimal('2204.62')
KG_PER_TON = Decimal('907.185')
CUBIC_FEET_PER_YARD = Decimal('27')
CUBIC_FEET_PER_METER = Decimal('35.3147')
CUBIC_METERS_PER_FOOT = Decimal('0.0283168')

TWO_PLACES = Decimal('0.01')

WEIGHT_UNITS = ('kg', 'lbs', 'tonnes', 'tons')
VOLUME_UNITS = {
    'cubic_feet': Decimal('1'),
    'cubic_yards': CUBIC_FEET_PER_YARD,
    'cubic_meters': CUBIC_FEET_PER_METER,
}


def to_decimal(value, default=None):
    """Parse numbers and numeric strings; anything else gives ``default``"""
    if value is None or value == '':
        return default
    if isinstance(value, Decimal):
        return value
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return default
    if not result.is_finite():
        return default
    return result


def round_weight(value):
    if value is None:
        return None
    return to_decimal(value, Decimal('0')).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def kg_to_lbs(kg):
    if kg is None:
        return None
    return round_weight(to_decimal(kg, Decimal('0')) * LBS_PER_KG)


def lbs_to_kg(lbs):
    if lbs is None:
        return None
    return round_weight(to_decimal(lbs, Decimal('0')) * KG_PER_LB)


def normalize_weight(unit, quantity_kg=None, quantity_lbs=None):
    """
    Return ``(kg, lbs)`` for an entry in ``unit``.

    ``tonnes`` reads the amount from ``quantity_kg`` and ``tons`` (short tons)
    from ``quantity_lbs``, matching how the entry form collects them.
    """
    unit = (unit or '').strip().lower()
    if unit == 'kg':
        kg = to_decimal(quantity_kg, Decimal('0'))
        lbs = kg * LBS_PER_KG
    elif unit == 'lbs':
        lbs = to_decimal(quantity_lbs, Decimal('0'))
        kg = lbs * KG_PER_LB
    elif unit == 'tonnes':
        kg = to_decimal(quantity_kg, Decimal('0')) * KG_PER_TONNE
        lbs = kg * LBS_PER_KG
    elif unit == 'tons':
        lbs = to_decimal(quantity_lbs, Decimal('0')) * LBS_PER_TON
        kg = lbs * KG_PER_LB
    else:
        raise ValueError(f"Unknown unit of measure: {unit!r}")
    return round_weight(kg), round_weight(lbs)


def line_weight(quantity, uom):
    """(kg, lbs) of a sales line quantity in its unit; unknown units count as zero"""
    qty = to_decimal(quantity, Decimal('0'))
    uom = (uom or '').strip().lower()
    if uom == 'kg':
        return qty, qty * LBS_PER_KG
    if uom == 'lbs':
        return qty / LBS_PER_KG, qty
    if uom == 'tonnes':
        return qty * KG_PER_TONNE, qty * LBS_PER_TONNE
    if uom == 'tons':
        return qty * KG_PER_TON, qty * LBS_PER_TON
    return Decimal('0'), Decimal('0')


def convert_volume(value, from_unit, to_unit):
    """Convert between cubic feet/yards/meters via cubic feet"""
    number = to_decimal(value)
    if number is None or number == 0:
        return None
    if from_unit not in VOLUME_UNITS or to_unit not in VOLUME_UNITS:
        raise ValueError(f"Unknown volume unit: {from_unit!r} -> {to_unit!r}")
    cubic_feet = number * VOLUME_UNITS[from_unit]
    return (cubic_feet / VOLUME_UNITS[to_unit]).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
