from .key_message import key_message_plugin

__all__ = ["key_message_plugin"]
