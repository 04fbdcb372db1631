import json

from sqlalchemy import String, Text, TypeDecorator


class EnumValue(TypeDecorator):
    """Store enum values (e.g. "pending") instead of member names."""
    impl = String
    cache_ok = True

    def __init__(self, enum_class, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.enum_class = enum_class

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        if isinstance(value, self.enum_class):
            return value.value
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        return self.enum_class(value)


def decode_list(value, max_depth=3):
    """Decode a stored array value into a Python list.

    Accepts the canonical single JSON encoding as well as what older rows
    contain: doubly encoded JSON, a bare string (one URL) and NULL.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)

    data = value
    for _ in range(max_depth):
        if not isinstance(data, str):
            break
        stripped = data.strip()
        if not stripped:
            return []
        try:
            data = json.loads(stripped)
        except ValueError:
            return [data]

    if data is None:
        return []
    if isinstance(data, list):
        return data
    return [data]


class JSONList(TypeDecorator):
    """Text column holding a JSON array, encoded exactly once on write."""
    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return json.dumps(decode_list(value), ensure_ascii=False)

    def process_result_value(self, value, dialect):
        return decode_list(value)
