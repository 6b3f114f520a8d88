# Shared constants for the record validation scripts

import os

_SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
_REPO_ROOT = os.path.dirname(_SCRIPT_DIR)

COMPANIES_DIR = os.path.join(_REPO_ROOT, "companies")
AUTHORITIES_DIR = os.path.join(_REPO_ROOT, "supervisory-authorities")
TEMPLATES_DIR = os.path.join(_REPO_ROOT, "templates")
COMPANIES_SCHEMA = os.path.join(_REPO_ROOT, "schema.json")
AUTHORITIES_SCHEMA = os.path.join(_REPO_ROOT, "schema-supervisory-authorities.json")
COUNTRY_LANGUAGES_FILE = os.path.join(_SCRIPT_DIR, "data", "country_languages.yaml")

TEMPLATE_EXT = ".txt"
DEFAULT_LANGUAGE = "en"
ADDRESS_LINE_SEPARATOR = "\n"

TEMPLATE_FIELDS = [
    "custom-access-template",
    "custom-erasure-template",
    "custom-rectification-template",
    "custom-objection-template",
]

# Countries whose address line we spell differently from the ISO name.
COUNTRY_NAME_VARIATIONS = {
    "US": "United States of America",
    "NL": "The Netherlands",
    "SG": "Republic of Singapore",
}

REF_REQUIRED_ELEMENTS = "https://github.com/datenanfragen/data#required-elements"
REF_TEMPLATE_LANGUAGE = "https://github.com/datenanfragen/data/issues/1120"
REF_QUALITY_TESTED = "https://github.com/datenanfragen/data/issues/811"
COUNTRIES_SOURCE = "https://pypi.org/project/pycountry/"

ERROR = "error"
AUTOFIX = "autofix"
