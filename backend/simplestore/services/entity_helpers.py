"""Build and patch domain entities, surfacing rule violations as HTTP 400."""

import dataclasses
from typing import Any, Dict, Type, TypeVar

from simplestore.core.validation import ValidationError

T = TypeVar("T")


def build_entity(entity_cls: Type[T], **values: Any) -> T:
    try:
        return entity_cls(**values)
    except ValueError as e:
        raise ValidationError(str(e))


def apply_changes(entity: T, changes: Dict[str, Any]) -> T:
    """Return a copy of ``entity`` with ``changes`` applied and re-validated."""
    if not changes:
        return entity
    try:
        return dataclasses.replace(entity, **changes)
    except ValueError as e:
        raise ValidationError(str(e))
