import importlib


def test_package_importable():
    """Ensure the railnet package can be imported without side-effects."""
    pkg = importlib.import_module("railnet")
    assert hasattr(pkg, "logger")


def test_public_api_exported():
    pkg = importlib.import_module("railnet")
    for name in pkg.__all__:
        assert hasattr(pkg, name), name
