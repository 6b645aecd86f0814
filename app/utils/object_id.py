from bson import ObjectId
from bson.errors import InvalidId


def parse_object_id(value: str, label: str = "document") -> ObjectId:
    """Turn a path/body id into an ObjectId, raising ValueError on malformed input"""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise ValueError(f"Invalid {label} id: {value}")
