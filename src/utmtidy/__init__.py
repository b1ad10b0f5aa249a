"""utmtidy - lint, clean and review UTM-tagged marketing URLs."""

__version__ = "0.1.0"
