#!/usr/bin/env python
# Heuristic checks for company records that the JSON schema can't express

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from constants import (
    ADDRESS_LINE_SEPARATOR,
    AUTOFIX,
    COUNTRIES_SOURCE,
    DEFAULT_LANGUAGE,
    ERROR,
    REF_QUALITY_TESTED,
    REF_REQUIRED_ELEMENTS,
    REF_TEMPLATE_LANGUAGE,
    TEMPLATE_FIELDS,
)
from countries import extract_city
from template_catalog import is_template_available

logger = logging.getLogger(__name__)


@dataclass
class Finding:
    """A problem found in a record file, or a fix applied to it"""
    kind: str
    msg: str
    ref: Optional[str] = None
    error: Any = None

    def details(self) -> Dict[str, Any]:
        """Everything besides the message, for printing"""
        out = {"type": self.kind}
        if self.ref is not None:
            out["ref"] = self.ref
        if self.error is not None:
            out["error"] = self.error
        return out


def error(msg, ref=None, detail=None) -> Finding:
    return Finding(ERROR, msg, ref=ref, error=detail)


def autofix(msg) -> Finding:
    return Finding(AUTOFIX, msg)


@dataclass
class CheckResult:
    errors: List[Finding] = field(default_factory=list)
    autofixes: List[Finding] = field(default_factory=list)
    fixed: Optional[Dict[str, Any]] = None

    @property
    def findings(self) -> List[Finding]:
        return self.autofixes + self.errors


class RecordChecker:
    """Runs the record checks in order.

    `templates` is the catalog from template_catalog.build_template_catalog,
    `matcher` a countries.CountryMatcher and `cities` a countries.CityLookup
    (or None to never guess a missing country).

    In autofix mode the fixes accumulate on one deep copy of the record. The
    address fixes work on a snapshot of the lines of that copy, so a later
    fix sees the lines as the previous fix left them: lines are trimmed
    before the duplicate name is removed, and the country is appended last.
    Errors are always reported against the original record.
    """

    def __init__(self, templates, matcher, cities=None):
        self.templates = templates
        self.matcher = matcher
        self.cities = cities

    def check(self, record, autofix_requested=False) -> CheckResult:
        result = CheckResult()
        if autofix_requested:
            result.fixed = copy.deepcopy(record)

        self.check_required_elements(record, result)
        self.check_custom_templates(record, result)
        self.check_quality(record, result)
        self.check_whitespace(record, result)
        if isinstance(record.get("address"), str):
            self.check_address(record, result)
        return result

    def check_required_elements(self, record, result):
        elements = record.get("required-elements")
        # other shapes are reported by the schema check
        if not elements or not isinstance(elements, list):
            return
        if not any(isinstance(el, dict) and el.get("type") == "name" for el in elements):
            result.errors.append(
                error("Record has required elements but no 'name' element.", ref=REF_REQUIRED_ELEMENTS)
            )

    def check_custom_templates(self, record, result):
        # Without a `request-language` the template has to exist in English at least.
        lang = record.get("request-language")
        for prop in TEMPLATE_FIELDS:
            template = record.get(prop)
            if not template or not isinstance(template, str):
                continue
            if lang:
                if not isinstance(lang, str) or not is_template_available(self.templates, lang, template):
                    result.errors.append(
                        error(
                            f"Record specifies '{prop}' of '{template}' but that isn't available "
                            f"for 'request-language' of '{lang}'."
                        )
                    )
            elif not is_template_available(self.templates, DEFAULT_LANGUAGE, template):
                result.errors.append(
                    error(
                        f"Record specifies '{prop}' of '{template}' but that isn't available in English.",
                        ref=REF_TEMPLATE_LANGUAGE,
                    )
                )

    def check_quality(self, record, result):
        if record.get("quality") == "tested" and record.get("required-elements") is None:
            result.errors.append(
                error(
                    "Record has `quality` of `tested` but doesn't specify `required-elements`.",
                    ref=REF_QUALITY_TESTED,
                )
            )

    def check_whitespace(self, record, result):
        for key, value in record.items():
            if isinstance(value, str) and value != value.strip():
                result.errors.append(
                    error(f"Seems like `{key}` isn't trimmed, i.e. it contains leading or trailing whitespace.")
                )
                if result.fixed is not None:
                    result.fixed[key] = value.strip()
                    result.autofixes.append(autofix(f"trimmed {key}"))

    def check_address(self, record, result):
        lines = record["address"].split(ADDRESS_LINE_SEPARATOR)
        snapshot = None
        if result.fixed is not None:
            snapshot = result.fixed["address"].split(ADDRESS_LINE_SEPARATOR)

        def save(new_lines, msg):
            result.fixed["address"] = ADDRESS_LINE_SEPARATOR.join(new_lines)
            result.autofixes.append(autofix(msg))
            return new_lines

        if len(lines) < 2:
            result.errors.append(error("`address` is not formatted with newlines (\\n)."))

        if any(line != line.strip() for line in lines):
            result.errors.append(
                error("`address` isn't trimmed (linewise), i.e. it contains unnecessary whitespace.")
            )
            if snapshot is not None:
                trimmed = [line.strip() for line in snapshot]
                if trimmed != snapshot:
                    snapshot = save(trimmed, "trimmed address")

        name = record.get("name")
        if name in lines or lines[0].strip() == name:
            result.errors.append(error("Record includes `name` in the `address`."))
        if snapshot and snapshot[0].strip() == name:
            snapshot = save(snapshot[1:], "Removed duplicate name in first line of address")

        last_line = lines[-1].strip()
        if not self.matcher.is_country_line(last_line):
            variations = ", ".join(self.matcher.variations.values())
            result.errors.append(
                error(
                    f"Last line of `address` ({last_line}) should be a country. If you feel like this "
                    f"error is a mistake, please let us know! We get our list of countries from "
                    f"{COUNTRIES_SOURCE}. We've decided on specific variations for some countries: "
                    f"({variations})."
                )
            )
            if snapshot is not None:
                self.guess_country(last_line, snapshot, save)

    def guess_country(self, last_line, snapshot, save):
        if self.cities is None:
            return
        city = extract_city(last_line)
        code = self.cities.guess_country(city)
        if not code:
            logger.debug("No country found for city %r", city)
            return
        name = self.matcher.display_name(code)
        if name:
            save(snapshot + [name], f"guessed missing country: {code}")
