"""
Entity names, loose filtering, sorting and limits for the generic record API.

Filtering compares values the way the web client always has: numbers match
their string form, booleans match "true"/"false", and null matches only
null or a missing field.
"""
import json
import re

ENTITY_NAME_PATTERN = re.compile(r'^[a-z0-9_]+$')
RESERVED_PARAMS = ('sort', 'limit', 'q', 'format')


class QueryError(ValueError):
    pass


def normalize_entity_name(value):
    if not value:
        return ''
    return value.replace('-', '_').lower()


def compact_entity_name(value):
    return normalize_entity_name(value).replace('_', '')


def is_valid_entity_name(value):
    return bool(value) and bool(ENTITY_NAME_PATTERN.match(value))


def _number_text(value):
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _boolean_text(value):
    normalized = value.strip().lower()
    if normalized == 'true':
        return True
    if normalized == 'false':
        return False
    return None


def values_equal(left, right):
    if left is None or right is None:
        return left is None and right is None
    if isinstance(left, bool) and isinstance(right, str):
        return _boolean_text(right) is left
    if isinstance(left, str) and isinstance(right, bool):
        return _boolean_text(left) is right
    if isinstance(left, bool) or isinstance(right, bool):
        return left is right
    if isinstance(left, (int, float)) and isinstance(right, str):
        return _number_text(left) == right
    if isinstance(left, str) and isinstance(right, (int, float)):
        return left == _number_text(right)
    if left == right:
        return True
    return str(left) == str(right)


def matches(record, filters):
    """True when every filter matches; a list filter matches any of its candidates"""
    for key, expected in filters.items():
        actual = record.get(key)
        if isinstance(expected, list):
            if not any(values_equal(actual, candidate) for candidate in expected):
                return False
        elif not values_equal(actual, expected):
            return False
    return True


def decode_value(raw):
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        return raw


def filters_from_params(params):
    """
    Build the filter dict from query parameters.

    ``q`` carries a whole JSON filter object; every other non-reserved
    parameter is one equality filter.
    """
    filters = {}
    raw_q = params.get('q')
    if raw_q:
        decoded = decode_value(raw_q)
        if not isinstance(decoded, dict):
            raise QueryError('q must be a JSON object')
        filters.update(decoded)
    for key in params.keys():
        if key in RESERVED_PARAMS:
            continue
        values = params.getlist(key) if hasattr(params, 'getlist') else [params[key]]
        decoded = [decode_value(v) for v in values]
        filters[key] = decoded[0] if len(decoded) == 1 else decoded
    return filters


def parse_limit(raw):
    if raw in (None, ''):
        return None
    try:
        limit = int(raw)
    except (TypeError, ValueError):
        raise QueryError('limit must be a positive integer')
    if limit <= 0:
        raise QueryError('limit must be a positive integer')
    return limit


def _sort_key(value):
    if isinstance(value, bool):
        return (0, int(value))
    if isinstance(value, (int, float)):
        return (0, value)
    if isinstance(value, str):
        return (1, value)
    return (2, json.dumps(value, sort_keys=True, default=str))


def sort_records(records, sort):
    """Sort on one field; ``-field`` sorts descending. Missing values always go last"""
    if not sort:
        return records
    descending = sort.startswith('-')
    field = sort[1:] if descending else sort
    present = [r for r in records if r.get(field) is not None]
    missing = [r for r in records if r.get(field) is None]
    present.sort(key=lambda r: _sort_key(r.get(field)), reverse=descending)
    return present + missing


def apply_query(records, filters=None, sort=None, limit=None):
    """Filter, sort and limit already-scoped records"""
    if filters:
        records = [r for r in records if matches(r, filters)]
    records = sort_records(records, sort)
    if limit is not None:
        records = records[:limit]
    return records
