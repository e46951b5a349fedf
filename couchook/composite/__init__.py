from couchook.composite.component import Component, Composite

__all__ = ["Component", "Composite"]
