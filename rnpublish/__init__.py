"""Release publishing for the react-native npm package."""

__version__ = "0.1.0"
