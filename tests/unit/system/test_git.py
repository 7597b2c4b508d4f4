"""Unit tests for git source checkout."""

from pathlib import Path
from unittest.mock import MagicMock, patch

from rtwctl.system.git import clone
from rtwctl.utils.shell import CommandResult


@patch("rtwctl.system.git.run_command")
def test_clone(mock_run: MagicMock, tmp_path: Path) -> None:
    """clone() runs git clone with a generous timeout."""
    mock_run.return_value = CommandResult(stdout="", stderr="Cloning into 'rtw88'...", returncode=0)

    result = clone("https://github.com/lwfinger/rtw88.git", tmp_path / "rtw88")

    assert result.success
    mock_run.assert_called_once_with(
        ["git", "clone", "https://github.com/lwfinger/rtw88.git", str(tmp_path / "rtw88")],
        timeout=600.0,
    )
