"""
US/CA address, currency and country validation for customers and vendors

validate_party returns a {field: message} map; an empty map means valid.
"""
import re

US_STATE_RE = re.compile(
    r'^(A[LKZR]|C[AOT]|D[CE]|F[LM]|G[AU]|H[I]|I[ADLN]|K[SY]|L[A]|M[ADEHINOPST]'
    r'|N[CDEHJMVY]|O[HKR]|P[A]|R[I]|S[CD]|T[NX]|UT|V[AIT]|W[AIVY])$'
)
CA_PROVINCES = {'AB', 'BC', 'MB', 'NB', 'NL', 'NS', 'NT', 'NU', 'ON', 'PE', 'QC', 'SK', 'YT'}
US_ZIP_RE = re.compile(r'^[0-9]{5}(-[0-9]{4})?$')
CA_POSTAL_RE = re.compile(r'^[ABCEGHJ-NPRSTVXY][0-9][ABCEGHJ-NPRSTV-Z][ ]?[0-9][ABCEGHJ-NPRSTV-Z][0-9]$', re.IGNORECASE)

COUNTRY_CURRENCY = {'US': 'USD', 'CA': 'CAD'}

# kind -> (secondary address prefix, its label, whether billing country is always checked)
PARTY_KINDS = {
    'customer': ('ship', 'Shipping', True),
    'vendor': ('remit', 'Remittance', False),
}


def _text(values, key):
    value = values.get(key)
    return '' if value is None else str(value)


def validate_address(values, prefix, errors):
    """Region and postal code checks for one address block"""
    country = _text(values, f'{prefix}_country_code')
    region = _text(values, f'{prefix}_region')
    postal = _text(values, f'{prefix}_postal_code')

    if country == 'US':
        if region and not US_STATE_RE.match(region):
            errors[f'{prefix}_region'] = 'Use a valid 2-letter US state code.'
        if postal and not US_ZIP_RE.match(postal):
            errors[f'{prefix}_postal_code'] = 'ZIP must be ##### or #####-####.'
    elif country == 'CA':
        if region and region.upper() not in CA_PROVINCES:
            errors[f'{prefix}_region'] = 'Use a valid Canadian province/territory code.'
        if postal and not CA_POSTAL_RE.match(postal):
            errors[f'{prefix}_postal_code'] = 'Postal code must be like M5V 3L9 (space optional).'
    return errors


def validate_party(values, kind='customer'):
    errors = {}
    second_prefix, second_label, bill_always_checked = PARTY_KINDS[kind]
    noun = 'Canadian' if _text(values, 'country') == 'CA' else 'US'
    plural = f'{kind}s'

    if not _text(values, 'display_name').strip():
        errors['display_name'] = 'Display name is required'

    country = _text(values, 'country')
    currency = _text(values, 'currency')
    expected_currency = COUNTRY_CURRENCY.get(country)
    if expected_currency and currency != expected_currency:
        errors['currency'] = f'Currency must be {expected_currency} for {noun} {plural}.'

    bill_country = _text(values, 'bill_country_code')
    if (bill_always_checked or bill_country) and bill_country != country:
        errors['bill_country_code'] = f'Billing country must equal {kind} country.'

    second_country = _text(values, f'{second_prefix}_country_code')
    if second_country and second_country != country:
        errors[f'{second_prefix}_country_code'] = f'{second_label} country must equal {kind} country or be empty.'

    validate_address(values, 'bill', errors)
    validate_address(values, second_prefix, errors)
    return errors


def format_address(party, prefix='bill'):
    """'line1, line2, City, RG POSTAL, CC' from the non-empty parts"""
    def part(name):
        return (getattr(party, f'{prefix}_{name}', '') or '').strip()

    region_postal = ' '.join(p for p in (part('region'), part('postal_code')) if p)
    pieces = [part('line1'), part('line2'), part('line3'), part('city'), region_postal, part('country_code')]
    return ', '.join(p for p in pieces if p)
