from .explorer import router as explorer_router
from .monitoring import router as monitoring_router
from .push import router as push_router
from .wallet import router as wallet_router

__all__ = ['explorer_router', 'monitoring_router', 'push_router', 'wallet_router']
