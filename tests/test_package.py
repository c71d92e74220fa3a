"""Tests for transcode_planner package."""


def test_package_imports():
    """Test that the package can be imported successfully."""
    import transcode_planner

    assert transcode_planner is not None


def test_package_version():
    """Test that the package has a version string."""
    from transcode_planner import __version__

    assert __version__ == "0.1.0"
