from .error_messages import get_friendly_error_message

__all__ = ["get_friendly_error_message"]
