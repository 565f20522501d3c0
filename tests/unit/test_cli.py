"""Unit tests for CLI commands."""

import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from typer.testing import CliRunner

# Add src to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from askdad.cli import app
from askdad.config import DEFAULT_CONFIG

runner = CliRunner()


def test_shape_prints_shaped_text() -> None:
    """Test that shape prints the text as it would be synthesized."""
    result = runner.invoke(app, ["shape", "1. Loosen nuts.\n2. Lift car.", "--no-pacing"])

    assert result.exit_code == 0
    assert "Step 1: Loosen nuts. Step 2: Lift car." in result.stdout


def test_shape_reports_mode_and_voice() -> None:
    """Test that shape reports the resolved mode and voice settings."""
    result = runner.invoke(app, ["shape", "2 + 2 = 4", "--mode", "jokes"])

    assert result.exit_code == 0
    assert "2 plus 2 equals 4" in result.stdout
    assert "mode=dadjokes" in result.output


def test_shape_rejects_invalid_budget() -> None:
    """Test that a zero character budget exits with an error."""
    result = runner.invoke(app, ["shape", "hello", "--max-chars", "0"])

    assert result.exit_code == 1
    assert "max_chars must be at least 1" in result.output


def test_init_config_writes_file(tmp_path: Path) -> None:
    """Test that init-config writes the default config file."""
    path = tmp_path / "askdad" / "config.toml"
    with patch("askdad.cli.CONFIG_PATH", path):
        result = runner.invoke(app, ["init-config"])

    assert result.exit_code == 0
    assert path.read_text() == DEFAULT_CONFIG


def test_init_config_refuses_to_overwrite(tmp_path: Path) -> None:
    """Test that init-config keeps an existing file unless --force is given."""
    path = tmp_path / "config.toml"
    path.write_text("[cache]\nttl_seconds = 30\n")

    with patch("askdad.cli.CONFIG_PATH", path):
        refused = runner.invoke(app, ["init-config"])
        assert path.read_text() == "[cache]\nttl_seconds = 30\n"

        forced = runner.invoke(app, ["init-config", "--force"])

    assert refused.exit_code == 1
    assert forced.exit_code == 0
    assert path.read_text() == DEFAULT_CONFIG


def test_voices_lists_catalog(monkeypatch) -> None:
    """Test that voices prints one line per available voice."""
    monkeypatch.setenv("ELEVENLABS_API_KEY", "test_key")
    client = MagicMock()
    client.voices.get_all.return_value = SimpleNamespace(
        voices=[
            SimpleNamespace(voice_id="v1", name="Dad", category="premade"),
            SimpleNamespace(voice_id="v2", name="Grandpa", category=None),
        ]
    )

    with patch("askdad.cli.load_dotenv"), patch(
        "askdad.speech.voices.ElevenLabs", return_value=client
    ):
        result = runner.invoke(app, ["voices"])

    assert result.exit_code == 0
    assert "v1  Dad (premade)" in result.stdout
    assert "v2  Grandpa" in result.stdout


def test_voices_without_key_fails(monkeypatch) -> None:
    """Test that voices exits with an error when no API key is set."""
    with patch("askdad.cli.load_dotenv"):
        result = runner.invoke(app, ["voices"])

    assert result.exit_code == 1
    assert "ELEVENLABS_API_KEY" in result.output
