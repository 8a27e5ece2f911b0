from .broadcast import ConnectionRegistry, MessageType, PushMessage, welcome_message

__all__ = ['ConnectionRegistry', 'MessageType', 'PushMessage', 'welcome_message']
