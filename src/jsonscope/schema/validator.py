"""Schema validation: type checks, container rules, primitive constraints."""

from __future__ import annotations

import json
import logging
import math
import re
from fractions import Fraction
from typing import Any

from jsonscope.models.errors import SchemaViolation, ViolationKind
from jsonscope.models.schema import SchemaNode, SchemaType
from jsonscope.parser.locator import ROOT_PATH

logger = logging.getLogger("jsonscope.schema")


def json_type_name(value: Any) -> str:
    """Name of the JSON type of a decoded value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_integer(value: Any) -> bool:
    if not _is_number(value):
        return False
    return isinstance(value, int) or (math.isfinite(value) and value.is_integer())


def _type_matches(expected: SchemaType, value: Any) -> bool:
    if expected == SchemaType.NUMBER:
        return _is_number(value)
    if expected == SchemaType.INTEGER:
        return _is_integer(value)
    return json_type_name(value) == expected


def _strict_equal(left: Any, right: Any) -> bool:
    """Deep equality without bool/number coercion (``True`` never equals ``1``)."""
    if _is_number(left) and _is_number(right):
        return left == right
    if isinstance(left, list) and isinstance(right, list):
        return len(left) == len(right) and all(
            _strict_equal(a, b) for a, b in zip(left, right)
        )
    if isinstance(left, dict) and isinstance(right, dict):
        return left.keys() == right.keys() and all(
            _strict_equal(value, right[key]) for key, value in left.items()
        )
    return type(left) is type(right) and left == right


def _normalize(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, dict):
        return {key: _normalize(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_normalize(item) for item in value]
    return value


def canonical_form(value: Any) -> str:
    """Serialization used for ``uniqueItems``: key-sorted, compact, 1.0 == 1."""
    return json.dumps(
        _normalize(value), sort_keys=True, separators=(",", ":"), ensure_ascii=False
    )


def _exact(number: int | float) -> Fraction:
    # repr gives the shortest decimal form, so 0.1 becomes 1/10.
    return Fraction(number) if isinstance(number, int) else Fraction(repr(number))


def _is_multiple(value: int | float, divisor: int | float) -> bool:
    if isinstance(value, int) and isinstance(divisor, int):
        return value % divisor == 0
    try:
        quotient = value / divisor
    except OverflowError:
        return _exact(value) % _exact(divisor) == 0
    if not math.isfinite(quotient):
        return _exact(value) % _exact(divisor) == 0
    return math.isclose(quotient, round(quotient), rel_tol=0.0, abs_tol=1e-9)


def _display(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


class SchemaValidator:
    """Validates decoded JSON values against a SchemaNode.

    Every violation is collected; only a type mismatch stops the checks below
    the node where it happened.  Paths are slash-delimited from ``root``.
    """

    def __init__(self, check_additional_properties: bool = False) -> None:
        self.check_additional_properties = check_additional_properties

    def validate(
        self, instance: Any, schema: SchemaNode | dict[str, Any]
    ) -> list[SchemaViolation]:
        node = SchemaNode.coerce(schema)
        errors: list[SchemaViolation] = []
        self._validate(instance, node, ROOT_PATH, errors)
        return errors

    def validate_many(
        self, instances: list[Any], schema: SchemaNode | dict[str, Any]
    ) -> list[SchemaViolation]:
        """Validate each instance independently and flatten the results.

        With more than one instance, messages are prefixed with the 1-based
        document number and ``document`` holds the 0-based index.
        """
        node = SchemaNode.coerce(schema)
        numbered = len(instances) > 1
        errors: list[SchemaViolation] = []
        for index, instance in enumerate(instances):
            found: list[SchemaViolation] = []
            self._validate(instance, node, ROOT_PATH, found)
            if numbered:
                found = [
                    v.model_copy(
                        update={
                            "message": f"[document {index + 1}] {v.message}",
                            "document": index,
                        }
                    )
                    for v in found
                ]
            errors.extend(found)
        return errors

    # -- traversal -----------------------------------------------------------

    def _validate(
        self,
        instance: Any,
        schema: SchemaNode,
        path: str,
        errors: list[SchemaViolation],
    ) -> None:
        if schema.type is not None and not _type_matches(schema.type, instance):
            self._report(
                errors,
                f"Type mismatch at '{path}': expected '{schema.type}', "
                f"got '{json_type_name(instance)}'.",
                path,
                schema,
            )
            return

        # Containers first; primitive rules never apply to them.
        if isinstance(instance, dict):
            self._validate_object(instance, schema, path, errors)
        elif isinstance(instance, list):
            self._validate_array(instance, schema, path, errors)
        elif isinstance(instance, str):
            self._validate_string(instance, schema, path, errors)
        elif _is_number(instance):
            self._validate_number(instance, schema, path, errors)

        if schema.enum is not None and not any(
            _strict_equal(instance, option) for option in schema.enum
        ):
            allowed = ", ".join(_display(option) for option in schema.enum)
            self._report(
                errors,
                f"Value not allowed at '{path}': '{_display(instance)}' is not one "
                f"of the allowed values ({allowed}).",
                path,
                schema,
            )

    def _validate_object(
        self,
        instance: dict[str, Any],
        schema: SchemaNode,
        path: str,
        errors: list[SchemaViolation],
    ) -> None:
        count = len(instance)
        if schema.min_properties is not None and count < schema.min_properties:
            self._report(
                errors,
                f"Too few properties at '{path}': found {count}, "
                f"minimum is {schema.min_properties}.",
                path,
                schema,
            )
        if schema.max_properties is not None and count > schema.max_properties:
            self._report(
                errors,
                f"Too many properties at '{path}': found {count}, "
                f"maximum is {schema.max_properties}.",
                path,
                schema,
            )

        properties = schema.properties or {}
        for name in schema.required:
            if name in instance:
                continue
            property_schema = properties.get(name)
            label = "Missing required field"
            if property_schema is not None:
                if property_schema.type == SchemaType.OBJECT:
                    label = "Missing required object"
                elif property_schema.type == SchemaType.ARRAY:
                    label = "Missing required array"
            self._report(
                errors,
                f"{label} at '{path}': '{name}'.",
                path,
                property_schema,
                ViolationKind.MISSING_PROPERTY,
            )

        if self.check_additional_properties and schema.properties is not None:
            for key in instance:
                if key not in properties:
                    self._report(
                        errors,
                        f"Additional property at '{path}/{key}'.",
                        f"{path}/{key}",
                        None,
                        ViolationKind.ADDITIONAL_PROPERTY,
                    )

        for key, value in instance.items():
            property_schema = properties.get(key)
            if property_schema is not None:
                self._validate(value, property_schema, f"{path}/{key}", errors)

    def _validate_array(
        self,
        instance: list[Any],
        schema: SchemaNode,
        path: str,
        errors: list[SchemaViolation],
    ) -> None:
        length = len(instance)
        if schema.min_items is not None and length < schema.min_items:
            self._report(
                errors,
                f"Too few items at '{path}': found {length}, minimum is {schema.min_items}.",
                path,
                schema,
            )
        if schema.max_items is not None and length > schema.max_items:
            self._report(
                errors,
                f"Too many items at '{path}': found {length}, maximum is {schema.max_items}.",
                path,
                schema,
            )
        if schema.unique_items:
            forms = [canonical_form(item) for item in instance]
            if len(set(forms)) != len(forms):
                self._report(
                    errors,
                    f"Duplicate items at '{path}': the array must not contain "
                    f"duplicate items.",
                    path,
                    schema,
                )
        if schema.items is not None:
            for index, item in enumerate(instance):
                self._validate(item, schema.items, f"{path}/{index}", errors)

    def _validate_string(
        self,
        instance: str,
        schema: SchemaNode,
        path: str,
        errors: list[SchemaViolation],
    ) -> None:
        length = len(instance)
        if schema.min_length is not None and length < schema.min_length:
            self._report(
                errors,
                f"String too short at '{path}': length is {length}, "
                f"minimum is {schema.min_length}.",
                path,
                schema,
            )
        if schema.max_length is not None and length > schema.max_length:
            self._report(
                errors,
                f"String too long at '{path}': length is {length}, "
                f"maximum is {schema.max_length}.",
                path,
                schema,
            )
        if schema.pattern:
            try:
                regex = re.compile(schema.pattern)
            except re.error as exc:
                logger.warning(
                    "Invalid regex pattern in schema at path '%s': %s (%s)",
                    path,
                    schema.pattern,
                    exc,
                )
            else:
                if regex.search(instance) is None:
                    self._report(
                        errors,
                        f"Pattern mismatch at '{path}': '{instance}' does not match "
                        f"'{schema.pattern}'.",
                        path,
                        schema,
                    )

    def _validate_number(
        self,
        instance: int | float,
        schema: SchemaNode,
        path: str,
        errors: list[SchemaViolation],
    ) -> None:
        if schema.minimum is not None and instance < schema.minimum:
            self._report(
                errors,
                f"Value too small at '{path}': {instance} is below the minimum "
                f"of {schema.minimum}.",
                path,
                schema,
            )
        if schema.maximum is not None and instance > schema.maximum:
            self._report(
                errors,
                f"Value too large at '{path}': {instance} is above the maximum "
                f"of {schema.maximum}.",
                path,
                schema,
            )
        if schema.exclusive_minimum is not None and instance <= schema.exclusive_minimum:
            self._report(
                errors,
                f"Value too small at '{path}': {instance} must be greater than "
                f"{schema.exclusive_minimum}.",
                path,
                schema,
            )
        if schema.exclusive_maximum is not None and instance >= schema.exclusive_maximum:
            self._report(
                errors,
                f"Value too large at '{path}': {instance} must be less than "
                f"{schema.exclusive_maximum}.",
                path,
                schema,
            )
        if schema.multiple_of is not None:
            if schema.multiple_of <= 0:
                logger.warning(
                    "Invalid multipleOf in schema at path '%s': %s",
                    path,
                    schema.multiple_of,
                )
            elif not _is_multiple(instance, schema.multiple_of):
                self._report(
                    errors,
                    f"Value not a multiple at '{path}': {instance} is not a "
                    f"multiple of {schema.multiple_of}.",
                    path,
                    schema,
                )

    @staticmethod
    def _report(
        errors: list[SchemaViolation],
        message: str,
        path: str,
        schema: SchemaNode | None,
        kind: ViolationKind = ViolationKind.INVALID_VALUE,
    ) -> None:
        if schema is not None and schema.description:
            message = f"{message} (description: {schema.description})"
        errors.append(SchemaViolation(path=path, message=message, kind=kind))


def validate(
    instance: Any,
    schema: SchemaNode | dict[str, Any],
    check_additional_properties: bool = False,
) -> list[SchemaViolation]:
    """Validate one decoded value; see ``SchemaValidator``."""
    return SchemaValidator(check_additional_properties).validate(instance, schema)


def validate_many(
    instances: list[Any],
    schema: SchemaNode | dict[str, Any],
    check_additional_properties: bool = False,
) -> list[SchemaViolation]:
    """Validate several decoded values against one schema."""
    return SchemaValidator(check_additional_properties).validate_many(instances, schema)
