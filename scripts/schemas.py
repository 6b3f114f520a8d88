#!/usr/bin/env python
# Loads the record JSON schemas and reports validation errors

import json
import logging
import re

from jsonschema import Draft7Validator, FormatChecker
from jsonschema.exceptions import SchemaError
from jsonschema.validators import validator_for

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^\S+@\S+\.\S+$")


class SchemaLoadError(Exception):
    """Raised when a schema file can't be read or isn't a valid JSON schema"""


def build_format_checker():
    checker = FormatChecker()

    # multi-line strings in the record forms use the `text` format
    @checker.checks("text")
    def is_text(instance):
        return True

    # email validation isn't critical for us, a very basic check is enough
    @checker.checks("idn-email")
    def is_idn_email(instance):
        if not isinstance(instance, str):
            return True
        return EMAIL_RE.match(instance) is not None

    return checker


def load_schema(filepath):
    """Reads a schema file and compiles a validator for it"""
    try:
        with open(filepath, "r", encoding="utf8") as f:
            schema = json.load(f)
    except (OSError, ValueError) as e:
        raise SchemaLoadError(f"Can't load schema {filepath}: {e}") from e

    cls = validator_for(schema, default=Draft7Validator)
    try:
        cls.check_schema(schema)
    except SchemaError as e:
        raise SchemaLoadError(f"Invalid schema {filepath}: {e.message}") from e
    logger.debug("Loaded schema %s (%s)", filepath, cls.__name__)
    return cls(schema, format_checker=build_format_checker())


def error_details(error):
    return {
        "path": "/" + "/".join(str(p) for p in error.absolute_path),
        "schema_path": "/".join(str(p) for p in error.absolute_schema_path),
        "keyword": error.validator,
        "message": error.message,
    }


def schema_errors(validator, record):
    """Returns a list of error details, empty if the record is valid"""
    errors = sorted(validator.iter_errors(record), key=lambda e: [str(p) for p in e.absolute_path])
    return [error_details(e) for e in errors]
