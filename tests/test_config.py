"""Tests for settings and search options."""
import pytest

from secondbrain.core.config import SearchOptions, Settings, parse_csv, unique


@pytest.fixture(autouse=True)
def clean_search_env(monkeypatch):
    for name in (
        "SEARCH_TOP", "SEARCH_MODE", "SEARCH_ID_FIELD", "SEARCH_TITLE_FIELD",
        "SEARCH_CONTENT_FIELDS", "SEARCH_CONTENT_FIELD", "SEARCH_KEYWORD_FIELDS",
        "SEARCH_VECTOR_FIELDS", "SEARCH_VECTOR_FIELD", "SEARCH_SEMANTIC_CONFIGURATION_NAME",
    ):
        monkeypatch.delenv(name, raising=False)


def test_parse_csv():
    assert parse_csv(" a, b ,,c ,") == ["a", "b", "c"]
    assert parse_csv(None) == []
    assert parse_csv("") == []


def test_unique_keeps_first_occurrence():
    assert unique(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]


class TestSearchOptions:
    def test_defaults(self):
        options = SearchOptions()
        assert options.search_fields == [
            "heading", "content", "objective", "scope", "document_name", "document_number",
        ]
        assert options.select[0] == "chunk_id"
        assert not options.has_vector_query
        assert options.k_nearest_neighbors == 8

    def test_semantic_configuration_widens_knn(self):
        assert SearchOptions(semantic_configuration_name="default").k_nearest_neighbors == 50

    def test_search_fields_are_deduplicated(self):
        options = SearchOptions(title_field="content", keyword_fields=("content", "tag"))
        assert options.search_fields == ["content", "objective", "scope", "tag"]


class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.max_chunks == 8
        assert settings.chunk_max_length == 700
        assert settings.chunk_overlap == 120
        assert settings.max_context_characters == 7000

        options = settings.search_options()
        assert options.content_fields == ("content", "objective", "scope")
        assert options.keyword_fields == ("document_name", "document_number")
        assert options.vector_fields == ()
        assert options.semantic_configuration_name is None

    def test_search_options_merge_csv_and_single_fields(self):
        settings = Settings(
            _env_file=None,
            SEARCH_CONTENT_FIELDS="body, summary, scope",
            SEARCH_CONTENT_FIELD="text",
            SEARCH_KEYWORD_FIELDS="tags",
            SEARCH_VECTOR_FIELDS="body_vector",
            SEARCH_VECTOR_FIELD="title_vector",
            SEARCH_SEMANTIC_CONFIGURATION_NAME="default",
        )
        options = settings.search_options()

        assert options.content_fields == ("body", "summary", "scope", "text", "objective")
        assert options.keyword_fields == ("tags", "document_name", "document_number")
        assert options.vector_fields == ("body_vector", "title_vector")
        assert options.semantic_configuration_name == "default"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("SEARCH_TITLE_FIELD", "title")
        monkeypatch.setenv("SEARCH_TOP", "5")
        options = Settings(_env_file=None).search_options()
        assert options.title_field == "title"
        assert options.top == 5
