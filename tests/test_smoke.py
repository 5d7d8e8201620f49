"""
Smoke tests for package structure and availability.

These tests strictly verify that the package is installed correctly in the
environment and that top-level modules are importable.
"""

from __future__ import annotations

import importlib

from pitchpdf import __version__


def test_package_importable() -> None:
    """Ensure the top-level package and its subpackages can be imported."""
    for name in ("pitchpdf", "pitchpdf.engine", "pitchpdf.rendering", "pitchpdf.pipelines"):
        assert importlib.import_module(name) is not None


def test_version_is_set() -> None:
    """Ensure the package exposes a valid version string."""
    assert isinstance(__version__, str)
    assert len(__version__) > 0


def test_cli_module_exposes_app() -> None:
    """The console script entry point (`pitchpdf.cli:app`) must exist."""
    cli = importlib.import_module("pitchpdf.cli")
    assert hasattr(cli, "app"), "pitchpdf.cli must expose an 'app' Typer object."
