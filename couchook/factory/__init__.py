from couchook.factory.factory import Factory, FactoryItem, FactoryItemCollection, Handler

__all__ = ["Factory", "FactoryItem", "FactoryItemCollection", "Handler"]
