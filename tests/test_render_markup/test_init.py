"""Test module for render_markup package initialization."""


def test_package_import() -> None:
    """Test that the package can be imported successfully."""
    # Arrange & Act
    import render_markup

    # Assert
    assert render_markup is not None


def test_package_has_version() -> None:
    """Test that the package has a version attribute."""
    # Arrange & Act
    import render_markup

    # Assert
    assert isinstance(render_markup.__version__, str)
    assert render_markup.__version__ == "0.1.0"


def test_package_has_author() -> None:
    """Test that the package has an author attribute."""
    # Arrange & Act
    import render_markup

    # Assert
    assert render_markup.__author__ == "Render Markup Team"


def test_package_all_exports() -> None:
    """Test that __all__ contains expected exports."""
    # Arrange & Act
    import render_markup

    # Assert
    for name in ("render", "MarkupCompiler", "CompilerConfig", "RendererRegistry", "box"):
        assert name in render_markup.__all__
        assert hasattr(render_markup, name)
