"""Unit tests for the data loader."""

from unittest.mock import Mock, patch

import pytest
import requests

from academic_site.loader import LoadError, cache_token, fetch_document, is_remote, load_all
from academic_site.models import PageData

from .conftest import DATA_DIR, read_docs

BASE_URL = "https://example.edu/data"


def fake_get(status=None, broken=None, raises=None):
    """Build a Session.get replacement serving the sample documents."""
    docs = read_docs()

    def get(url, params=None, timeout=None):
        name = url.rsplit("/", 1)[1][: -len(".json")]
        if raises and name in raises:
            raise raises[name]
        response = Mock()
        response.status_code = (status or {}).get(name, 200)
        response.ok = response.status_code < 400
        if broken and name in broken:
            response.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
        else:
            response.json.return_value = docs[name]
        return response

    return get


class TestLocalLoad:
    """Loading documents from a directory."""

    def test_loads_all_four_documents(self):
        data = load_all(str(DATA_DIR))
        assert isinstance(data, PageData)
        assert data.personal["name"] == "Dr. Jane Smith"
        assert len(data.publications) == 3
        assert len(data.courses) == 2
        assert len(data.projects) == 2

    def test_loaded_data_is_read_only(self):
        data = load_all(str(DATA_DIR))
        with pytest.raises(TypeError):
            data.personal["name"] = "Someone Else"
        assert isinstance(data.publications, tuple)
        assert isinstance(data.publications[0]["authors"], tuple)

    def test_missing_file_names_the_source(self, data_dir):
        (data_dir / "projects.json").unlink()
        with pytest.raises(LoadError) as exc:
            load_all(str(data_dir))
        assert exc.value.source == "projects"
        assert str(exc.value).startswith("Data loading failed: Failed to load projects data")

    def test_unparseable_file(self, data_dir):
        (data_dir / "courses.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(LoadError) as exc:
            load_all(str(data_dir))
        assert exc.value.source == "courses"

    def test_requires_four_sources(self):
        with pytest.raises(ValueError):
            load_all(str(DATA_DIR), sources=("personal",))


class TestRemoteLoad:
    """Loading documents over HTTP."""

    @patch("academic_site.loader.SESSION.get")
    def test_fetches_every_source_with_cache_token(self, mock_get):
        mock_get.side_effect = fake_get()
        data = load_all(BASE_URL)

        assert data.projects[1]["title"] == "AutoLab"
        assert mock_get.call_count == 4
        urls = sorted(call.args[0] for call in mock_get.call_args_list)
        assert urls == [
            f"{BASE_URL}/courses.json",
            f"{BASE_URL}/personal.json",
            f"{BASE_URL}/projects.json",
            f"{BASE_URL}/publications.json",
        ]
        for call in mock_get.call_args_list:
            assert call.kwargs["params"]["v"].isdigit()

    @patch("academic_site.loader.SESSION.get")
    def test_trailing_slash_in_base(self, mock_get):
        mock_get.side_effect = fake_get()
        load_all(BASE_URL + "/")
        assert all("//personal" not in call.args[0] for call in mock_get.call_args_list)

    @patch("academic_site.loader.SESSION.get")
    def test_http_404_fails_whole_load(self, mock_get):
        mock_get.side_effect = fake_get(status={"publications": 404})
        with pytest.raises(LoadError) as exc:
            load_all(BASE_URL)
        assert exc.value.source == "publications"
        assert exc.value.cause == 404
        assert str(exc.value) == "Data loading failed: Failed to load publications data: 404"

    @patch("academic_site.loader.SESSION.get")
    def test_transport_error(self, mock_get):
        mock_get.side_effect = fake_get(raises={"courses": requests.ConnectionError("refused")})
        with pytest.raises(LoadError) as exc:
            load_all(BASE_URL)
        assert exc.value.source == "courses"
        assert isinstance(exc.value.cause, requests.ConnectionError)

    @patch("academic_site.loader.SESSION.get")
    def test_invalid_json_body(self, mock_get):
        mock_get.side_effect = fake_get(broken={"personal"})
        with pytest.raises(LoadError) as exc:
            load_all(BASE_URL)
        assert exc.value.source == "personal"

    @patch("academic_site.loader.SESSION.get")
    def test_timeout_is_passed_through(self, mock_get):
        mock_get.side_effect = fake_get()
        load_all(BASE_URL, timeout=5)
        assert {call.kwargs["timeout"] for call in mock_get.call_args_list} == {5}

    @patch("academic_site.loader.SESSION.get")
    def test_no_timeout_by_default(self, mock_get):
        mock_get.side_effect = fake_get()
        load_all(BASE_URL)
        assert {call.kwargs["timeout"] for call in mock_get.call_args_list} == {None}

    def test_explicit_session(self):
        session = Mock()
        session.get.side_effect = fake_get()
        doc = fetch_document(BASE_URL, "courses", session=session)
        assert doc[0]["courseCode"] == "CS 229"
        session.get.assert_called_once()


class TestHelpers:
    def test_is_remote(self):
        assert is_remote("https://example.edu/data")
        assert is_remote("http://localhost:8000")
        assert not is_remote("data")
        assert not is_remote("/srv/site/data")

    def test_cache_token_changes_per_request(self):
        with patch("academic_site.loader.time.time", side_effect=[1.0, 2.5]):
            assert cache_token() == "1000"
            assert cache_token() == "2500"
