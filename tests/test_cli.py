"""Tests for the command line interface."""

import json
import os
from unittest.mock import AsyncMock, patch

import pytest

from conftest import VALID_ANALYSIS
from resumescorer.analysis.transformers import transform_analysis_response
from resumescorer.cli import main, parse_args
from resumescorer.exceptions import InvalidCredentialError


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep settings, config files and API keys inside the temporary directory."""
    for name in list(os.environ):
        if name.upper().startswith("RESUMESCORER_"):
            monkeypatch.delenv(name)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("resumescorer.config.DEFAULT_CONFIG_PATHS", [])
    monkeypatch.setenv("RESUMESCORER_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setattr("resumescorer.cli.load_dotenv", lambda: None)
    return tmp_path / "data" / "settings.json"


def test_parse_args():
    args = parse_args(["--debug", "analyze", "cv.pdf", "--job-text", "Python dev", "--json"])

    assert args.debug
    assert args.command == "analyze"
    assert args.resume == "cv.pdf"
    assert args.job_text == "Python dev"
    assert args.json

    with pytest.raises(SystemExit):
        parse_args(["analyze", "cv.pdf"])
    with pytest.raises(SystemExit):
        parse_args(["analyze", "cv.pdf", "--job", "a.txt", "--job-text", "b"])


def test_key_commands(isolated_settings, capsys):
    assert main(["key", "set", "sk-abcdefgh1234"]) == 0
    assert json.loads(isolated_settings.read_text())["openai_api_key"] == "sk-abcdefgh1234"

    assert main(["key", "show"]) == 0
    out = capsys.readouterr().out
    assert "sk-a*******1234" in out
    assert "sk-abcdefgh1234" not in out

    assert main(["key", "clear"]) == 0
    assert main(["key", "show"]) == 0
    assert "No API key configured" in capsys.readouterr().out


def test_model_commands(isolated_settings, capsys):
    assert main(["model", "set", "gpt-4o"]) == 0
    assert json.loads(isolated_settings.read_text())["openai_model"] == "gpt-4o"

    assert main(["model", "list"]) == 0
    assert "gpt-4o" in capsys.readouterr().out

    assert main(["model", "set", "gpt-2"]) == 1
    assert "Invalid model selection" in capsys.readouterr().err

    assert main(["model", "clear"]) == 0
    assert "gpt-4o-mini" in capsys.readouterr().out


def test_analyze_json(tmp_path, capsys):
    job_file = tmp_path / "job.txt"
    job_file.write_text("React developer")
    result = transform_analysis_response(VALID_ANALYSIS)

    with patch(
        "resumescorer.cli.ResumeProcessor.process_resume", new=AsyncMock(return_value=result)
    ) as process:
        code = main(["analyze", "cv.pdf", "--job", str(job_file), "--json"])

    assert code == 0
    assert process.await_args.args[:2] == ("cv.pdf", "React developer")
    output = json.loads(capsys.readouterr().out)
    assert output["score"] == 85
    assert output["matchPercentage"] == 85
    assert output["feedback"][0]["title"] == "Matching Skills"


def test_analyze_renders_result(capsys):
    result = transform_analysis_response(VALID_ANALYSIS)

    with patch(
        "resumescorer.cli.ResumeProcessor.process_resume", new=AsyncMock(return_value=result)
    ):
        assert main(["analyze", "cv.pdf", "--job-text", "React developer"]) == 0

    out = capsys.readouterr().out
    assert "85/100" in out
    assert "Learn Python" in out


def test_analyze_error_exit_code(capsys):
    with patch(
        "resumescorer.cli.ResumeProcessor.process_resume",
        new=AsyncMock(side_effect=InvalidCredentialError(status=401)),
    ):
        code = main(["analyze", "cv.pdf", "--job-text", "React developer"])

    assert code == 1
    err = capsys.readouterr().err
    assert "invalid or has expired" in err
    assert "status=401" not in err


def test_analyze_error_details_with_debug(capsys):
    with patch(
        "resumescorer.cli.ResumeProcessor.process_resume",
        new=AsyncMock(side_effect=InvalidCredentialError(status=401)),
    ):
        code = main(["--debug", "analyze", "cv.pdf", "--job-text", "React developer"])

    assert code == 1
    assert "status=401" in capsys.readouterr().err


def test_missing_job_file(capsys):
    assert main(["analyze", "cv.pdf", "--job", "missing.txt"]) == 1
    assert "Could not read job description" in capsys.readouterr().err


def test_undecodable_job_file(tmp_path, capsys):
    job_file = tmp_path / "job.txt"
    job_file.write_bytes("Café developer".encode("cp1252"))

    assert main(["analyze", "cv.pdf", "--job", str(job_file)]) == 1
    assert "Could not read job description" in capsys.readouterr().err
