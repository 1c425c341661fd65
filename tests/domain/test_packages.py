"""Tests for ``brew info`` / ``brew config`` parsing."""

from brewstrap.domain.packages import parse_config, parse_info

INSTALLED = """\
==> podman: stable 5.2.2 (bottled), HEAD
Tool for managing OCI containers and pods
https://podman.io/
Installed
/home/linuxbrew/.linuxbrew/Cellar/podman/5.2.2 (200 files, 80MB) *
  Poured from bottle using the formulae.brew.sh API
"""

NOT_INSTALLED = """\
==> go: stable 1.23.0 (bottled), HEAD
Open source programming language
https://go.dev/
Not installed
From: https://github.com/Homebrew/homebrew-core/blob/HEAD/Formula/g/go.rb
"""


class TestParseInfo:
    def test_installed(self) -> None:
        pkg = parse_info("podman", INSTALLED)
        assert pkg is not None
        assert pkg.path == "/home/linuxbrew/.linuxbrew/Cellar/podman/5.2.2"
        assert pkg.version == "5.2.2"
        assert pkg.name == "podman"

    def test_not_installed(self) -> None:
        assert parse_info("go", NOT_INSTALLED) is None

    def test_marker_tolerates_surrounding_space(self) -> None:
        out = INSTALLED.replace("\nInstalled\n", "\n  Installed  \n")
        assert parse_info("podman", out) is not None

    def test_too_short(self) -> None:
        assert parse_info("x", "a\nb\nc\nInstalled") is None

    def test_blank_keg_line(self) -> None:
        assert parse_info("x", "a\nb\nc\nInstalled\n\n") is None


class TestParseConfig:
    def test_splits_on_first_colon(self) -> None:
        cfg = parse_config("ORIGIN: https://github.com/Homebrew/brew\nCore tap HEAD: abc123\n")
        assert cfg == {
            "ORIGIN": "https://github.com/Homebrew/brew",
            "Core tap HEAD": "abc123",
        }

    def test_skips_lines_without_colon(self) -> None:
        assert parse_config("garbage\nHOMEBREW_VERSION: 4.3.0\n\n") == {
            "HOMEBREW_VERSION": "4.3.0"
        }

    def test_empty_value_kept(self) -> None:
        assert parse_config("HOMEBREW_CASK_OPTS:\n") == {"HOMEBREW_CASK_OPTS": ""}
