from typer.testing import CliRunner

import docxref
from docxref.ui.cli import app


def test_get_version_matches_public_api() -> None:
    assert docxref.get_version() == docxref.__version__
    assert isinstance(docxref.__version__, str)


def test_cli_version_flag() -> None:
    runner = CliRunner()
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0, result.stdout
    assert result.stdout.strip() == docxref.get_version()
