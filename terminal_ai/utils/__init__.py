from .context import get_system_context

__all__ = ["get_system_context"]
