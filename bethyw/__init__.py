"""Beth Yw? — Welsh Government statistics importer."""
__version__ = "1.0.0"
