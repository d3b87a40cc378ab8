from informes.routers.events import router as events_router
from informes.routers.reports import router as reports_router
from informes.routers.informes import router as informes_router
from informes.routers.dashboard import router as dashboard_router

__all__ = ["events_router", "reports_router", "informes_router", "dashboard_router"]
