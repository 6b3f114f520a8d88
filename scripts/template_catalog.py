#!/usr/bin/env python
# Collects the request templates available per language

import glob
import logging
import os
from collections import defaultdict

from constants import TEMPLATES_DIR, TEMPLATE_EXT

logger = logging.getLogger(__name__)


def build_template_catalog(root=TEMPLATES_DIR, ext=TEMPLATE_EXT):
    """Map language code to the set of template names found as <lang>/<name><ext> under root.

    A missing or empty directory gives an empty catalog.
    """
    catalog = defaultdict(set)
    for filepath in glob.glob(os.path.join(root, "**", "*" + ext), recursive=True):
        relpath = os.path.relpath(filepath, root)
        parts = relpath.split(os.sep)
        if len(parts) != 2:
            logger.debug("Skipping template outside of a language directory: %s", relpath)
            continue
        lang, filename = parts
        catalog[lang].add(filename[: -len(ext)])
    logger.debug("Loaded templates for %d languages from %s", len(catalog), root)
    return dict(catalog)


def is_template_available(catalog, lang, name):
    return name in catalog.get(lang, ())
