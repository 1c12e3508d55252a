from favstore.state.state_store import StateStore

__all__ = ["StateStore"]
