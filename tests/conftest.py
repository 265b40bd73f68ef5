"""Shared test fixtures."""

import os

import pytest

SAMPLE_PAGE = """\
title:: Biology
- Plants
  - What is the taxon common name for Angiosperm? #card
    - Flowering plants
  - Photosynthesis happens in the #card
    card-review:: due:2024-01-10 interval:6 ease:2.50 reps:2
    - {{cloze chloroplast}}
      - with {{cloze chlorophyll}} pigments
- Not a card
"""


@pytest.fixture
def sample_text():
    return SAMPLE_PAGE


@pytest.fixture
def graph_root(tmp_path):
    """A Logseq graph root with one page holding SAMPLE_PAGE."""
    root = tmp_path / "graph"
    (root / "pages").mkdir(parents=True)
    (root / "pages" / "biology.md").write_text(SAMPLE_PAGE)
    return root


@pytest.fixture
def page_file(graph_root):
    return graph_root / "pages" / "biology.md"


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    """Empty config dir selected through LOSRS_DIR, with no LOSRS__ overrides."""
    d = tmp_path / "config"
    d.mkdir()
    monkeypatch.setenv("LOSRS_DIR", str(d))
    for name in list(os.environ):
        if name.startswith("LOSRS__"):
            monkeypatch.delenv(name)
    return d
