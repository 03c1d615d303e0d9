"""Path-addressed updates over the immutable resume record.

A path is a sequence of field names and list indices, e.g.
``["experience", 2, "description", 0]``. Field names may be given in
snake_case or in the camelCase used by upstream JSON; indices may be ints or
digit strings. Updates never mutate: they rebuild only the nodes along the
path and share every other branch with the original record.
"""

from __future__ import annotations

import typing
from typing import Any, Sequence, Union

from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from resume_studio.errors import InvalidPathError
from resume_studio.layout.contract import SKILL_SEPARATOR, SKILL_SPLIT_GLYPH
from resume_studio.models.resume import ResumeRecord

FieldPath = tuple[Union[str, int], ...]


def normalize_path(path: Sequence[str | int]) -> FieldPath:
    """Convert digit strings to ints and camelCase names to snake_case."""
    steps: list[str | int] = []
    for step in path:
        if isinstance(step, bool):
            raise InvalidPathError(tuple(path), f"unsupported step {step!r}")
        if isinstance(step, int):
            steps.append(step)
        elif isinstance(step, str) and step.isdigit():
            steps.append(int(step))
        elif isinstance(step, str):
            steps.append(step)
        else:
            raise InvalidPathError(tuple(path), f"unsupported step {step!r}")
    return tuple(steps)


def _field_name(model: type[BaseModel], step: str | int, full: FieldPath) -> str:
    if isinstance(step, str):
        for name in model.model_fields:
            if step == name or step == to_camel(name):
                return name
    raise InvalidPathError(full, f"{model.__name__} has no field {step!r}")


def _index(step: str | int, size: int, full: FieldPath) -> int:
    if not isinstance(step, int):
        raise InvalidPathError(full, f"expected a list index, got {step!r}")
    if not 0 <= step < size:
        raise InvalidPathError(full, f"index {step} out of range for length {size}")
    return step


def get_at(record: ResumeRecord, path: Sequence[str | int]) -> Any:
    """Read the value a path points at."""
    full = normalize_path(path)
    node: Any = record
    for step in full:
        if isinstance(node, BaseModel):
            node = getattr(node, _field_name(type(node), step, full))
        elif isinstance(node, tuple):
            node = node[_index(step, len(node), full)]
        else:
            raise InvalidPathError(full, f"cannot descend into {type(node).__name__}")
    return node


def apply_update(record: ResumeRecord, path: Sequence[str | int], value: Any) -> ResumeRecord:
    """Return a new record with ``value`` placed at ``path``.

    Applying the same ``(path, value)`` twice yields a record equal to
    applying it once.
    """
    full = normalize_path(path)
    if not full:
        raise InvalidPathError(full, "path is empty")
    return _set(record, type(record), full, value, full)


def _set(node: Any, annotation: Any, rest: FieldPath, value: Any, full: FieldPath) -> Any:
    head, tail = rest[0], rest[1:]

    if isinstance(node, BaseModel):
        model = type(node)
        name = _field_name(model, head, full)
        if not tail:
            return _replace_field(node, name, value, full)
        child = getattr(node, name)
        new_child = _set(child, model.model_fields[name].annotation, tail, value, full)
        if new_child is child:
            return node
        return node.model_copy(update={name: new_child})

    if isinstance(node, tuple):
        index = _index(head, len(node), full)
        item_type = typing.get_args(annotation)[0]
        if tail:
            new_item = _set(node[index], item_type, tail, value, full)
        else:
            try:
                new_item = TypeAdapter(item_type).validate_python(value)
            except ValidationError as exc:
                raise InvalidPathError(full, _first_error(exc)) from exc
        if new_item == node[index]:
            return node
        return node[:index] + (new_item,) + node[index + 1:]

    raise InvalidPathError(full, f"cannot descend into {type(node).__name__}")


def _replace_field(node: BaseModel, name: str, value: Any, full: FieldPath) -> BaseModel:
    if getattr(node, name) == value:
        return node
    data = {field: getattr(node, field) for field in type(node).model_fields}
    data[name] = value
    # Validation keeps the model's coercions (None -> empty) on edited values
    try:
        return type(node).model_validate(data)
    except ValidationError as exc:
        raise InvalidPathError(full, _first_error(exc)) from exc


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    return errors[0]["msg"] if errors else str(exc)


def join_skills(skills: Sequence[str]) -> str:
    return SKILL_SEPARATOR.join(skills)


def split_skills(text: str) -> tuple[str, ...]:
    """Re-split an edited skills line on the bullet glyph.

    Lossy by nature: item order and spelling are whatever the user retyped,
    surrounding whitespace is trimmed and empty items are dropped.
    """
    return tuple(item.strip() for item in text.split(SKILL_SPLIT_GLYPH) if item.strip())
