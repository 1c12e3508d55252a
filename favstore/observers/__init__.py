from favstore.observers.observer_manager import ObserverManager

__all__ = ["ObserverManager"]
