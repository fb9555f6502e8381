from src.subtrack.api.routers.subscriptions import router as subscriptions_router

__all__ = ["subscriptions_router"]
