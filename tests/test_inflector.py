"""Tests for the inflection capability."""

import pytest

from packguard.errors import ConfigurationError
from packguard.inflector import Inflector
from conftest import write_file


def test_camelize():
    inflector = Inflector()
    assert inflector.camelize("sales/order_item") == "Sales::OrderItem"
    assert inflector.camelize("html_parser") == "HtmlParser"


def test_acronyms():
    inflector = Inflector(acronyms=["API", "GraphQL"])
    assert inflector.camelize("api_client") == "APIClient"
    assert inflector.camelize("graphql/schema") == "GraphQL::Schema"


@pytest.mark.parametrize("plural, singular", [
    ("orders", "order"),
    ("categories", "category"),
    ("boxes", "box"),
    ("address", "address"),
    ("movies", "movie"),
    ("heroes", "hero"),
    ("analyses", "analysis"),
    ("people", "person"),
])
def test_default_singular_rules(plural, singular):
    assert Inflector().singularize(plural) == singular


def test_overrides_win_over_default_rules():
    inflector = Inflector(irregulars=[("octopus", "octopi"), ("cactus", "cacti")], uncountables=["news", "data"])
    assert inflector.singularize("octopi") == "octopus"
    assert inflector.singularize("cacti") == "cactus"
    assert inflector.singularize("data") == "data"


def test_from_file(tmp_path):
    path = write_file(tmp_path, "config/inflections.yml", (
        "acronym:\n  - API\n"
        "irregular:\n  - [person, people]\n"
        "uncountable:\n  - sheep\n"
    ))
    inflector = Inflector.from_file(path)
    assert inflector.camelize("api") == "API"
    assert inflector.singularize("people") == "person"
    assert inflector.singularize("sheep") == "sheep"


def test_missing_file_means_no_overrides(tmp_path):
    inflector = Inflector.from_file(tmp_path / "config/inflections.yml")
    assert inflector.camelize("api") == "Api"


def test_malformed_file_is_rejected(tmp_path):
    path = write_file(tmp_path, "inflections.yml", "irregular:\n  - [person]\n")
    with pytest.raises(ConfigurationError):
        Inflector.from_file(path)
