"""TrenchBroom game configuration, FGD writing, map entity properties and geometry helpers."""

__version__ = "0.8.0.dev0"