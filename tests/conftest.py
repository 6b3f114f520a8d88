"""Pytest configuration and shared fixtures"""

import os
import json
import sys
import tempfile
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "scripts"))

from countries import CityLookup, CountryMatcher
from record_checks import RecordChecker


SAMPLE_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "slug": {"type": "string"},
        "name": {"type": "string"},
        "address": {"type": "string", "format": "text"},
        "email": {"type": "string", "format": "idn-email"},
        "quality": {"type": "string", "enum": ["verified", "tested", "imported"]},
        "request-language": {"type": "string"},
        "custom-access-template": {"type": "string"},
        "required-elements": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {"type": {"type": "string"}},
                "required": ["type"],
            },
        },
    },
    "required": ["slug", "name", "address"],
}


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield tmpdir


@pytest.fixture
def sample_record():
    """A company record that passes every check"""
    return {
        "slug": "acme",
        "name": "Acme",
        "address": "Musterstr. 1\n10115 Berlin\nGermany",
        "email": "privacy@acme.example",
    }


@pytest.fixture
def scenario_record():
    """Record with a duplicated name, no country and no `name` element"""
    return {
        "slug": "acme",
        "name": "Acme",
        "address": "Acme\nMusterstr. 1\nBerlin",
        "required-elements": [{"type": "email"}],
        "quality": "tested",
    }


@pytest.fixture
def sample_schema_file(temp_dir):
    schema_dir = os.path.join(temp_dir, "schemas")
    os.makedirs(schema_dir, exist_ok=True)
    filepath = os.path.join(schema_dir, "schema.json")
    with open(filepath, "w", encoding="utf8") as f:
        json.dump(SAMPLE_SCHEMA, f)
    return filepath


@pytest.fixture
def sample_templates():
    return {"en": {"sepa", "no-id"}, "de": {"sepa", "no-id", "bank"}}


@pytest.fixture(scope="session")
def country_matcher():
    return CountryMatcher()


@pytest.fixture
def city_lookup():
    return CityLookup({"Berlin": "DE", "Amsterdam": "NL", "Paris": "FR"})


@pytest.fixture
def checker(sample_templates, country_matcher, city_lookup):
    return RecordChecker(sample_templates, country_matcher, city_lookup)


@pytest.fixture
def write_record(temp_dir):
    """Writes raw content to <temp_dir>/<filename> and returns the path"""

    def _write(filename, content, directory=None):
        directory = directory or temp_dir
        os.makedirs(directory, exist_ok=True)
        filepath = os.path.join(directory, filename)
        with open(filepath, "w", encoding="utf8", newline="\n") as f:
            f.write(content)
        return filepath

    return _write
