"""Test package structure and imports."""

import sys
from pathlib import Path

# Add src to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))


def test_package_imports() -> None:
    """Test that askdad package can be imported."""
    import askdad

    assert askdad.__version__ == "0.1.0"


def test_main_module_imports() -> None:
    """Test that main module can be imported without error."""
    from askdad.__main__ import main

    # Should be able to import the main function
    assert callable(main)


def test_create_app_exported() -> None:
    """Test that the app factory is reachable from the package root."""
    import askdad
    from askdad.server.app import create_app

    assert askdad.create_app is create_app
