import uuid
from typing import Union

from showxpress.core.exceptions import NotFoundError


def parse_id(value: Union[str, uuid.UUID], resource: str) -> uuid.UUID:
    """Coerce a path/body id to UUID; a malformed id cannot exist, so it is a NotFound."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise NotFoundError(resource, str(value))
