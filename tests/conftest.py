"""Shared fixtures: the sample data documents and the site template."""

import json
from pathlib import Path

import pytest

from academic_site.models import PageData
from academic_site.page import Page

ROOT = Path(__file__).resolve().parent.parent
DATA_DIR = ROOT / "data"
TEMPLATE = ROOT / "site.template.html"
SOURCES = ("personal", "publications", "courses", "projects")


def read_docs():
    return {
        name: json.loads((DATA_DIR / f"{name}.json").read_text(encoding="utf-8"))
        for name in SOURCES
    }


@pytest.fixture
def docs():
    return read_docs()


@pytest.fixture
def data(docs):
    return PageData.from_documents(*(docs[name] for name in SOURCES))


@pytest.fixture
def page():
    return Page.from_file(TEMPLATE)


@pytest.fixture
def data_dir(tmp_path, docs):
    """A writable copy of the sample data directory."""
    target = tmp_path / "data"
    target.mkdir()
    for name, doc in docs.items():
        (target / f"{name}.json").write_text(json.dumps(doc), encoding="utf-8")
    return target
