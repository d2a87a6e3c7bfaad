"""Tests for the quiz-diagnostic CLI."""
import json

import pytest

from quiz_diagnostic.cli import EXIT_FINDINGS, EXIT_OK, EXIT_USAGE, main

CLEAN_QUIZ = "# Quiz\n## 1. Question\na) A\nb) B [x]\n"
BROKEN_QUIZ = "# Quiz\n## 1. Question\na) A\nb) B\n"


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    for name in ("STRICT", "WORK_DIR", "LOG_LEVEL", "CONTEXT_WIDTH"):
        monkeypatch.delenv(f"QUIZ_DIAGNOSTIC_{name}", raising=False)


def test_lint_clean_file(tmp_path):
    path = tmp_path / "quiz.md"
    path.write_text(CLEAN_QUIZ, encoding="utf-8")

    assert main(["lint", str(path)]) == EXIT_OK


def test_lint_json_output(tmp_path, capsys):
    path = tmp_path / "quiz.md"
    path.write_text(BROKEN_QUIZ, encoding="utf-8")

    assert main(["lint", str(path), "--json"]) == EXIT_FINDINGS

    data = json.loads(capsys.readouterr().out)
    assert data["errors"] == 1
    assert data["diagnostics"][0]["rule"] == "missing_correct_answer"


def test_lint_missing_file(tmp_path):
    assert main(["lint", str(tmp_path / "nope.md")]) == EXIT_USAGE


def test_validate_json_output(tmp_path, capsys):
    (tmp_path / "imsmanifest.xml").write_text(
        '<manifest identifier="m"><resources/></manifest>', encoding="utf-8"
    )

    assert main(["validate", str(tmp_path), "--json"]) == EXIT_OK

    data = json.loads(capsys.readouterr().out)
    assert data["is_valid"] is True
    assert data["details"]["manifest_found"] is True


def test_validate_invalid_package(tmp_path):
    assert main(["validate", str(tmp_path)]) == EXIT_FINDINGS


def test_validate_missing_path(tmp_path):
    assert main(["validate", str(tmp_path / "missing.zip")]) == EXIT_USAGE


def test_rules_command():
    assert main(["rules"]) == EXIT_OK


def test_usage_error_exits_with_2():
    with pytest.raises(SystemExit) as exc_info:
        main(["frobnicate"])
    assert exc_info.value.code == EXIT_USAGE
