"""
Canadian sales tax by place of supply, and the flat US fallback.

Amounts are Decimal and rounded half-up to cents after every tax line,
so per-type totals add up to what is printed on the order.
"""
from decimal import Decimal, ROUND_HALF_UP

from recims.inventory.units import to_decimal

CENTS = Decimal('0.01')
ZERO = Decimal('0.00')

GST_RATE = Decimal('0.05')
QST_RATE = Decimal('0.09975')
HST_PROVINCES = {
    'ON': Decimal('0.13'),
    'NB': Decimal('0.15'),
    'NS': Decimal('0.15'),
    'PE': Decimal('0.15'),
    'NL': Decimal('0.15'),
}
GST_ONLY_PROVINCES = ('AB', 'NT', 'NU', 'YT')
PST_PROVINCES = {
    'BC': Decimal('0.07'),
    'SK': Decimal('0.06'),
    'MB': Decimal('0.07'),
}
TAX_TYPES = ('GST', 'HST', 'PST', 'QST')
NON_TAXABLE_CATEGORIES = ('labor', 'exempt')
US_DEFAULT_RATE = Decimal('0.08')


def round2(value):
    return to_decimal(value, ZERO).quantize(CENTS, rounding=ROUND_HALF_UP)


def is_category_taxable(category):
    return (category or 'tangible_goods') not in NON_TAXABLE_CATEGORIES


def province_rates(province):
    """[(name, rate), ...] for a province code; unknown or blank gives no taxes"""
    if not province:
        return []
    prov = province.strip().upper()
    if prov in HST_PROVINCES:
        return [('HST', HST_PROVINCES[prov])]
    if prov in GST_ONLY_PROVINCES:
        return [('GST', GST_RATE)]
    if prov == 'QC':
        return [('GST', GST_RATE), ('QST', QST_RATE)]
    if prov in PST_PROVINCES:
        return [('GST', GST_RATE), ('PST', PST_PROVINCES[prov])]
    return []


def line_net(line):
    gross = to_decimal(line.get('quantity_ordered'), ZERO) * to_decimal(line.get('unit_price'), ZERO)
    return max(ZERO, gross - to_decimal(line.get('discount_amount'), ZERO))


def _apply(basis, rates, tax_by_type):
    taxes = []
    if basis > 0:
        for name, rate in rates:
            amount = round2(basis * rate)
            taxes.append({'name': name, 'rate': rate, 'amount': amount})
            tax_by_type[name] = round2(tax_by_type[name] + amount)
    return taxes, round2(sum((t['amount'] for t in taxes), ZERO))


def calculate_canada_sales_tax(province, lines, shipping_amount=0, customer_exempt=False):
    """
    Tax each order line and the shipping charge at the ship-to province's rates.

    ``lines`` are dicts with ``quantity_ordered``, ``unit_price``,
    ``discount_amount``, ``product_tax_category`` and ``sku_snapshot``.
    """
    shipping_amount = to_decimal(shipping_amount, ZERO)
    rates = [] if customer_exempt else province_rates(province)
    tax_by_type = {name: ZERO for name in TAX_TYPES}
    subtotal = ZERO

    per_line = []
    for line in lines:
        net = line_net(line)
        basis = net if rates and is_category_taxable(line.get('product_tax_category')) else ZERO
        taxes, line_tax = _apply(basis, rates, tax_by_type)
        subtotal += net
        per_line.append({
            'sku': line.get('sku_snapshot') or line.get('sku') or '',
            'basis': round2(basis if rates else net),
            'taxes': taxes,
            'line_tax_total': line_tax,
            'line_total_with_tax': round2(net + line_tax),
        })

    shipping = None
    if shipping_amount > 0:
        basis = shipping_amount if is_category_taxable('shipping') else ZERO
        taxes, shipping_tax = _apply(basis, rates, tax_by_type)
        shipping = {
            'basis': round2(shipping_amount),
            'taxes': taxes,
            'tax_total': shipping_tax,
            'total_with_tax': round2(shipping_amount + shipping_tax),
        }
        subtotal += shipping_amount

    total_tax = round2(sum(tax_by_type.values(), ZERO))
    return {
        'per_line': per_line,
        'shipping': shipping,
        'totals': {
            'tax_by_type': tax_by_type,
            'total_tax': total_tax,
            'subtotal': round2(subtotal),
            'grand_total': round2(subtotal + total_tax),
        },
    }


def calculate_us_tax(subtotal, rate=US_DEFAULT_RATE):
    subtotal = round2(subtotal)
    tax = round2(subtotal * to_decimal(rate, US_DEFAULT_RATE))
    return {'subtotal': subtotal, 'tax': tax, 'total': round2(subtotal + tax)}


def jsonable(value):
    """Decimals to floats, recursively, for JSON columns"""
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, dict):
        return {k: jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [jsonable(v) for v in value]
    return value
