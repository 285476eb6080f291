"""Lenient annotated field types shared by the snapshot and remote-row schemas.

Every type is total: malformed input is coerced to a default instead of
failing validation.
"""

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator

from atelier.domain.coercion import (
    to_epoch_ms,
    to_number,
    to_optional_number,
    to_quantity,
    to_text,
)


def _optional_text(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _list_or_empty(value: Any) -> Any:
    # Entries that are not objects are dropped so one bad element never
    # invalidates its siblings.
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, (dict, BaseModel))]


def _dict_or_empty(value: Any) -> Any:
    return value if isinstance(value, (dict, BaseModel)) else {}


Number = Annotated[float, BeforeValidator(to_number)]
OptionalNumber = Annotated[float | None, BeforeValidator(to_optional_number)]
Quantity = Annotated[int, BeforeValidator(to_quantity)]
Text = Annotated[str, BeforeValidator(to_text)]
OptionalText = Annotated[str | None, BeforeValidator(_optional_text)]
Timestamp = Annotated[int, BeforeValidator(to_epoch_ms)]
LenientList = BeforeValidator(_list_or_empty)
LenientObject = BeforeValidator(_dict_or_empty)
