# Browser Relay Routers
from .logs import router as logs_router
from .tools import router as tools_router
