"""
Version information for lru-engine.

The package version is read from the installed distribution metadata via
importlib.metadata, falling back to pyproject.toml in a source checkout.
"""

try:
    from importlib.metadata import version

    __version__ = version("lru-engine")
except Exception:
    # Fallback for development (package not installed)
    import tomllib
    from pathlib import Path

    try:
        pyproject_path = Path(__file__).parent.parent / "pyproject.toml"
        with open(pyproject_path, "rb") as f:
            pyproject = tomllib.load(f)
            __version__ = pyproject["project"]["version"]
    except Exception:
        # Last resort fallback
        __version__ = "0.0.0-dev"
