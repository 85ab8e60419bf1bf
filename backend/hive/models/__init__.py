from .auth import User, AuthToken
from .catalog import Item
from .sessions import CustomerSession
from .settings import AppSettings

__all__ = [
    'User', 'AuthToken',
    'Item',
    'CustomerSession',
    'AppSettings',
]
