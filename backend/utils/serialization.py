
from enum import Enum
from datetime import datetime, date
from sqlalchemy.inspection import inspect

HIDDEN_FIELDS = {"password_hash"}


def to_dict(model_instance, include_relationships=False, exclude=()):
    output = {}
    mapper = inspect(model_instance.__class__)

    for column in mapper.columns:
        key = column.key
        if key in HIDDEN_FIELDS or key in exclude:
            continue

        value = getattr(model_instance, key)
        if isinstance(value, Enum):
            output[key] = value.value
        elif isinstance(value, (datetime, date)):
            output[key] = value.isoformat()
        else:
            output[key] = value

    if include_relationships:
        for rel in mapper.relationships:
            if rel.key in exclude:
                continue
            rel_value = getattr(model_instance, rel.key)
            if rel_value is None:
                output[rel.key] = None
            elif isinstance(rel_value, list):
                output[rel.key] = [to_dict(item) for item in rel_value]
            else:
                output[rel.key] = to_dict(rel_value)

    return output
