# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Request validation helpers using Pydantic models.
"""

from flask import request
from typing import Type, TypeVar, Mapping, Any
from pydantic import BaseModel, ValidationError
from opentelemetry import trace
import logging

from .error_handler import ValidationException, format_validation_errors

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_data(model_class: Type[ModelT], data: Mapping[str, Any]) -> ModelT:
    """
    Validate a mapping against a Pydantic model.

    Raises:
        ValidationException: With per-field errors when validation fails
    """
    try:
        return model_class.model_validate(data)
    except ValidationError as e:
        errors = format_validation_errors(e)
        logger.info(
            "Request validation failed",
            extra={"model": model_class.__name__, "path": request.path, "errors": errors}
        )
        raise ValidationException("Request validation failed", errors)


def parse_json_body(model_class: Type[ModelT]) -> ModelT:
    """
    Parse and validate the JSON request body.

    Args:
        model_class: Pydantic model class for validation

    Returns:
        Validated model instance

    Raises:
        ValidationException: If the body is missing, not JSON or invalid
    """
    with tracer.start_as_current_span("validation.validate_json_body") as span:
        span.set_attributes({
            "validation.model": model_class.__name__,
            "http.method": request.method,
            "http.path": request.path
        })

        json_data = request.get_json(silent=True)
        if not isinstance(json_data, dict):
            span.set_attribute("validation.result", "invalid_json")
            raise ValidationException("Request body must be a JSON object", [{
                "field": "body",
                "message": "Expected a JSON object",
                "type": "json_error"
            }])

        validated = validate_data(model_class, json_data)
        span.set_attribute("validation.result", "success")
        return validated


def parse_query(model_class: Type[ModelT]) -> ModelT:
    """Validate query string arguments against a Pydantic model."""
    return validate_data(model_class, request.args.to_dict())
