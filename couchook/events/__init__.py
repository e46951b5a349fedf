from couchook.events.bus import WILDCARD, EventBus, EventMeta, ListenerRecord

__all__ = ["EventBus", "EventMeta", "ListenerRecord", "WILDCARD"]
