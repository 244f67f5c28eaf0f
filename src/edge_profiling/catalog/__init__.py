from .examples_catalog import ExampleItem, ExamplesCatalog

__all__ = ["ExampleItem", "ExamplesCatalog"]
