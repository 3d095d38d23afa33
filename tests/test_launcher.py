"""
Tests for opening converted files
"""

import sys

import pytest

from encodingman import launcher
from encodingman.errors import LaunchError


def test_missing_file_raises(tmp_path):
    with pytest.raises(LaunchError):
        launcher.launch(tmp_path / "nope.csv")


def test_missing_application_raises(tmp_path):
    path = tmp_path / "a.csv"
    path.write_bytes(b"x")
    with pytest.raises(LaunchError) as info:
        launcher.launch(path, str(tmp_path / "no-such-app"))
    assert info.value.context["app"].endswith("no-such-app")


def test_custom_application_gets_the_file(tmp_path, monkeypatch):
    calls = []
    monkeypatch.setattr(launcher.subprocess, "Popen", lambda args: calls.append(args))
    path = tmp_path / "a.csv"
    path.write_bytes(b"x")

    launcher.launch(path, sys.executable)

    assert calls == [[sys.executable, str(path)]]


def test_start_failure_is_wrapped(tmp_path, monkeypatch):
    def boom(args):
        raise PermissionError("denied")

    monkeypatch.setattr(launcher.subprocess, "Popen", boom)
    path = tmp_path / "a.csv"
    path.write_bytes(b"x")
    with pytest.raises(LaunchError):
        launcher.launch(path, sys.executable)


def test_system_default(tmp_path, monkeypatch):
    opened = []
    monkeypatch.setattr(launcher, "_open_with_system_default", opened.append)
    path = tmp_path / "a.csv"
    path.write_bytes(b"x")
    launcher.launch(path)
    assert opened == [str(path)]
