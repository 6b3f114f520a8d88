#!/usr/bin/env python
# Validates company and supervisory authority records, optionally fixing them in place

import glob
import json
import logging
import os
from typing import Dict, List

import typer
from rich.console import Console
from rich.pretty import Pretty
from rich.text import Text

from constants import (
    AUTHORITIES_DIR,
    AUTHORITIES_SCHEMA,
    COMPANIES_DIR,
    COMPANIES_SCHEMA,
    TEMPLATES_DIR,
)
from countries import CityLookup, CountryMatcher
from record_checks import Finding, RecordChecker, error
from schemas import SchemaLoadError, load_schema, schema_errors
from template_catalog import build_template_catalog

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

app = typer.Typer()


def save_record(filepath, record):
    """Writes the record with 4 space indentation and exactly one trailing newline"""
    with open(filepath, "w", encoding="utf8", newline="\n") as f:
        f.write(json.dumps(record, indent=4, ensure_ascii=False) + "\n")


def validate_file(filepath, schema, checker=None, autofix=False) -> List[Finding]:
    findings = []
    try:
        with open(filepath, "rb") as f:
            raw = f.read()
    except OSError as e:
        return [error("Reading file failed.", detail=str(e))]

    if not raw.endswith(b"}\n"):
        findings.append(error("File doesn't end with exactly one newline."))

    try:
        record = json.loads(raw.decode("utf8"))
    except UnicodeDecodeError as e:
        findings.append(error("Parsing JSON failed.", detail=str(e)))
        return findings
    except json.JSONDecodeError as e:
        findings.append(
            error("Parsing JSON failed.", detail={"message": e.msg, "line": e.lineno, "column": e.colno})
        )
        # content checks need a parsed record
        return findings

    errors = schema_errors(schema, record)
    if errors:
        findings.append(error("Schema validation failed.", detail=errors))

    basename = os.path.basename(filepath)
    slug = record.get("slug") if isinstance(record, dict) else None
    if f"{slug}.json" != basename:
        findings.append(error(f'Filename "{basename}" does not match slug "{slug}".'))

    if checker is not None and isinstance(record, dict):
        result = checker.check(record, autofix_requested=autofix)
        findings.extend(result.findings)
        if autofix and result.fixed != record:
            try:
                save_record(filepath, result.fixed)
            except OSError as e:
                findings.append(error("Writing fixed file failed.", detail=str(e)))
            else:
                logger.info("Saved %d fixes to %s", len(result.autofixes), filepath)
    return findings


def validate_directory(directory, schema, checker=None, autofix=False) -> Dict[str, List[Finding]]:
    """Validates every *.json file in directory, returns findings per file path"""
    findings = {}
    for filepath in sorted(glob.glob(os.path.join(directory, "*.json"))):
        findings[filepath] = validate_file(filepath, schema, checker=checker, autofix=autofix)
    return findings


def print_findings(findings, console=None) -> int:
    """Prints the findings of every file that has some, returns the number of such files"""
    if console is None:
        console = Console(stderr=True)
    reported = 0
    for filepath, events in findings.items():
        if not events:
            continue
        reported += 1
        console.print(Text(f"Error(s) in {filepath}:", style="bold white on red"))
        for event in events:
            console.print(Text(event.msg), Pretty(event.details()))
    return reported


@app.command()
def validate(
    auto_fix: bool = typer.Option(
        False, "--auto-fix", help="Fix what can be fixed automatically and rewrite the files"
    ),
):
    """Validates company and supervisory authority records"""
    try:
        companies_schema = load_schema(COMPANIES_SCHEMA)
        authorities_schema = load_schema(AUTHORITIES_SCHEMA)
    except SchemaLoadError as e:
        logger.error("%s", e)
        raise typer.Exit(code=2)

    templates = build_template_catalog(TEMPLATES_DIR)
    cities = CityLookup.from_geonames() if auto_fix else None
    checker = RecordChecker(templates, CountryMatcher(), cities)

    console = Console(stderr=True)
    reported = 0
    for directory, schema, checks in [
        (COMPANIES_DIR, companies_schema, checker),
        (AUTHORITIES_DIR, authorities_schema, None),
    ]:
        findings = validate_directory(directory, schema, checker=checks, autofix=auto_fix)
        reported += print_findings(findings, console)
    if reported:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
