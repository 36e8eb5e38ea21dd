"""Integration tests for the parse, validate, and serialize commands"""

import json

import pytest
from typer.testing import CliRunner

from blockparse.cli.cli import app
from blockparse.config import Settings


VALID_DOC = (
    "<p>intro</p>\n"
    "<!-- wp:core/paragraph -->\n<p>Hello</p>\n<!-- /wp:core/paragraph -->\n"
    "<!-- wp:core/separator --><hr /><!-- /wp:core/separator -->\n"
)
INVALID_DOC = "<!-- wp:core/separator --><hr class=\"wide\"><!-- /wp:core/separator -->"


@pytest.fixture(autouse=True)
def isolate(tmp_path, monkeypatch):
    """Run each command from an empty directory with no BLOCKPARSE_ env vars."""
    monkeypatch.chdir(tmp_path)
    for name in Settings.model_fields:
        monkeypatch.delenv(f"BLOCKPARSE_{name.upper()}", raising=False)


@pytest.fixture(name="runner")
def runner_fixture():
    return CliRunner()


def test_help(runner):
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "parse" in result.output


def test_parse_prints_blocks(runner, tmp_path):
    """parse prints the block list as JSON."""
    (tmp_path / "post.html").write_text(VALID_DOC)
    result = runner.invoke(app, ["parse", "post.html"])
    assert result.exit_code == 0, result.output
    blocks = json.loads(result.stdout)
    assert [b["name"] for b in blocks] == ["core/freeform", "core/paragraph", "core/separator"]
    assert all(b["is_valid"] for b in blocks)
    assert blocks[1]["attributes"] == {"content": "Hello"}


def test_parse_writes_out_file(runner, tmp_path):
    (tmp_path / "post.html").write_text(VALID_DOC)
    result = runner.invoke(app, ["parse", "post.html", "--out", "out/blocks.json"])
    assert result.exit_code == 0, result.output
    blocks = json.loads((tmp_path / "out" / "blocks.json").read_text())
    assert len(blocks) == 3


def test_parse_without_fallback_drops_free_text(runner, tmp_path):
    """An empty --fallback disables the fallback type."""
    (tmp_path / "post.html").write_text(VALID_DOC)
    result = runner.invoke(app, ["parse", "post.html", "--fallback", ""])
    assert result.exit_code == 0, result.output
    assert [b["name"] for b in json.loads(result.stdout)] == ["core/paragraph", "core/separator"]


def test_parse_missing_file(runner):
    result = runner.invoke(app, ["parse", "missing.html"])
    assert result.exit_code == 1
    assert "Cannot read missing.html" in result.output


def test_validate_valid_document(runner, tmp_path):
    (tmp_path / "post.html").write_text(VALID_DOC)
    result = runner.invoke(app, ["validate", "post.html"])
    assert result.exit_code == 0, result.output
    assert "3 block(s), 0 invalid" in result.output


def test_validate_reports_invalid_blocks(runner, tmp_path):
    """validate lists invalid blocks and exits 1."""
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "good.html").write_text(VALID_DOC)
    (docs / "bad.html").write_text(INVALID_DOC)
    result = runner.invoke(app, ["validate", "docs"])
    assert result.exit_code == 1
    assert "invalid:" in result.output
    assert "bad.html [0] core/separator" in result.output
    assert "Validated 2 document(s): 4 block(s), 1 invalid" in result.output


def test_validate_no_documents(runner, tmp_path):
    (tmp_path / "empty").mkdir()
    result = runner.invoke(app, ["validate", "empty"])
    assert result.exit_code == 1
    assert "No documents found." in result.output


def test_serialize(runner, tmp_path):
    """serialize writes canonical delimited markup, keeping invalid content verbatim."""
    (tmp_path / "post.html").write_text(VALID_DOC + INVALID_DOC)
    result = runner.invoke(app, ["serialize", "post.html", "--out", "canonical.html"])
    assert result.exit_code == 0, result.output
    assert (tmp_path / "canonical.html").read_text() == (
        "<p>intro</p>\n\n"
        "<!-- wp:core/paragraph -->\n<p>Hello</p>\n<!-- /wp:core/paragraph -->\n\n"
        "<!-- wp:core/separator -->\n<hr />\n<!-- /wp:core/separator -->\n\n"
        "<!-- wp:core/separator -->\n<hr class=\"wide\">\n<!-- /wp:core/separator -->"
    )


def test_invalid_config_fails(runner, tmp_path):
    (tmp_path / "config.yaml").write_text("key: [unclosed\n")
    (tmp_path / "post.html").write_text(VALID_DOC)
    result = runner.invoke(app, ["parse", "post.html"])
    assert result.exit_code == 1
    assert "Invalid config.yaml" in result.output
