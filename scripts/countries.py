#!/usr/bin/env python
# Country name matching and city -> country guessing for address lines

import gettext
import logging
import re
from functools import lru_cache
from typing import Dict, List, Optional

import pycountry
import yaml

try:
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Loader

from constants import COUNTRY_LANGUAGES_FILE, COUNTRY_NAME_VARIATIONS

logger = logging.getLogger(__name__)

# postal code (optional) followed by the city
CITY_RE = re.compile(r"[\d\s]*(.*)")


def load_country_languages(filepath=COUNTRY_LANGUAGES_FILE) -> Dict[str, List[str]]:
    """Country code -> languages used for the native country name"""
    f = open(filepath, "r", encoding="utf8")
    data = yaml.load(f, Loader=Loader) or {}
    f.close()
    langs = {}
    for code, value in data.items():
        langs[code] = value if isinstance(value, list) else [value]
    return langs


def english_names(country) -> List[str]:
    names = [country.name]
    for attr in ("common_name", "official_name"):
        value = getattr(country, attr, None)
        if value and value not in names:
            names.append(value)
    return names


@lru_cache(maxsize=None)
def _translation(lang):
    return gettext.translation("iso3166-1", pycountry.LOCALES_DIR, languages=[lang], fallback=True)


def native_names(country, langs) -> List[str]:
    # untranslated names are english names, not native ones
    names = []
    for lang in langs:
        name = _translation(lang).gettext(country.name)
        if name != country.name and name not in names:
            names.append(name)
    return names


class CountryMatcher:
    """Decides whether an address line names a country.

    Matching is exact. English names of countries listed in `variations` are
    not accepted, the variation is used for them instead. Native names are
    always accepted.
    """

    def __init__(self, variations=None, country_languages=None):
        self.variations = dict(COUNTRY_NAME_VARIATIONS if variations is None else variations)
        if country_languages is None:
            country_languages = load_country_languages()
        self.english = {}
        self.native = set()
        for country in pycountry.countries:
            code = country.alpha_2
            if code not in self.variations:
                for name in english_names(country):
                    self.english[name] = code
            self.native.update(native_names(country, country_languages.get(code, [])))
        self.accepted_variations = set(self.variations.values())
        logger.debug(
            "Loaded %d english and %d native country names", len(self.english), len(self.native)
        )

    def is_country_line(self, text) -> bool:
        return text in self.english or text in self.native or text in self.accepted_variations

    def display_name(self, code) -> Optional[str]:
        if code in self.variations:
            return self.variations[code]
        country = pycountry.countries.get(alpha_2=code)
        return country.name if country else None


def extract_city(line) -> Optional[str]:
    """Guess the city part of an address line like '10115 Berlin'"""
    match = CITY_RE.match(line)
    city = match.group(1).strip() if match else ""
    return city or None


class CityLookup:
    """Static gazetteer mapping city names to country codes"""

    def __init__(self, cities: Dict[str, str]):
        self.cities = cities

    @classmethod
    def from_geonames(cls, min_city_population=15000):
        from geonamescache import GeonamesCache

        gc = GeonamesCache(min_city_population=min_city_population)
        best = {}
        for city in gc.get_cities().values():
            name = city["name"]
            population = city.get("population") or 0
            if name not in best or population > best[name][0]:
                best[name] = (population, city["countrycode"])
        logger.debug("Loaded %d city names from geonames", len(best))
        return cls({name: code for name, (population, code) in best.items()})

    def guess_country(self, city) -> Optional[str]:
        if not city:
            return None
        return self.cities.get(city)
