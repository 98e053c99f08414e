"""Tests for the vellum CLI."""

import json
import tempfile
from pathlib import Path

import pytest

from vellum.cli import main
from vellum.encode import escape_payload


def run(capsys, *args):
    with pytest.raises(SystemExit) as exc:
        main(list(args))
    captured = capsys.readouterr()
    return exc.value.code, captured.out, captured.err


@pytest.fixture
def store():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "articles"


def test_new_and_ls(capsys, store):
    """Test creating an article and listing it."""
    code, out, _ = run(capsys, "--store", str(store), "new", "--title", "Spring market")
    assert code == 0
    aid = out.strip()
    assert len(aid) == 12
    
    code, out, _ = run(capsys, "--store", str(store), "ls", "--with-titles")
    assert code == 0
    assert out == f"{aid}\tSpring market\n"
    
    code, out, _ = run(capsys, "--store", str(store), "--json", "ls")
    assert json.loads(out) == [{"id": aid, "title": "Spring market"}]


def test_save_render_show(capsys, store):
    """Test saving editor HTML and reading it back."""
    html_file = store.parent / "edit.html"
    html_file.write_text('<h2>Eggs</h2><p>Fresh <b>today</b> at <a href="https://farm.example">the farm</a></p>')
    
    code, out, _ = run(capsys, "--store", str(store), "save", "a1", str(html_file), "--title", "Eggs")
    assert code == 0
    assert out == "Saved a1 (2 blocks)\n"
    
    code, out, _ = run(capsys, "--store", str(store), "render", "a1")
    assert code == 0
    assert out.startswith("<h2>Eggs</h2><p>Fresh <strong>today</strong> at <a href=\"https://farm.example\"")
    
    code, out, _ = run(capsys, "--store", str(store), "show", "a1")
    data = json.loads(out)
    assert data["slug"] == "eggs"
    assert data["body"][1]["markDefs"][0]["href"] == "https://farm.example"
    
    code, out, _ = run(capsys, "--store", str(store), "edit-html", "a1")
    assert code == 0
    assert out.startswith("<h2>Eggs</h2><p>Fresh <strong>today</strong>")


def test_save_code_requires_role(capsys, store):
    """Test code blocks are refused for untrusted roles."""
    html_file = store.parent / "edit.html"
    html_file.write_text(f'<div data-snippet="{escape_payload("x()")}"></div>')
    
    code, _, err = run(capsys, "--store", str(store), "save", "a1", str(html_file), "--role", "editor")
    assert code == 1
    assert err.startswith("Error: ")
    
    code, _, _ = run(capsys, "--store", str(store), "save", "a1", str(html_file), "--role", "admin")
    assert code == 0


def test_excerpt(capsys, store):
    """Test preview text of a stored article."""
    store.mkdir(parents=True)
    (store / "old.yaml").write_text("id: old\ntitle: Old\nbody: Plain legacy text body\n")
    
    code, out, _ = run(capsys, "--store", str(store), "excerpt", "old", "--length", "5")
    assert code == 0
    assert out == "Plain…\n"


def test_preview(capsys, store):
    """Test rendering one inline text run."""
    code, out, _ = run(capsys, "--store", str(store), "preview", "**hi** there")
    assert code == 0
    assert out == "<strong>hi</strong> there\n"


def test_missing_article(capsys, store):
    """Test unknown ids fail with an error message."""
    code, _, err = run(capsys, "--store", str(store), "render", "nope")
    assert code == 1
    assert "Article nope not found" in err


def test_rm(capsys, store):
    """Test deleting needs confirmation."""
    run(capsys, "--store", str(store), "new", "--title", "x")
    aid = next(store.glob("*.yaml")).stem
    
    code, _, _ = run(capsys, "--store", str(store), "rm", aid)
    assert code == 1
    code, out, _ = run(capsys, "--store", str(store), "rm", aid, "--yes")
    assert code == 0
    assert list(store.glob("*.yaml")) == []


def test_version(capsys):
    """Test --version prints the package version."""
    code, out, _ = run(capsys, "--version")
    assert code == 0
    assert out == "vellum 0.1.0\n"
