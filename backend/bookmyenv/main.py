import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bookmyenv.core.config import settings
from bookmyenv.routers import (
    notification_logs,
    notification_settings,
    notifications,
    refresh_history,
    refresh_intents,
    refresh_overview,
)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

OPENAPI_TAGS = [
    {"name": "Refresh Intents", "description": "Request, approve and run environment refreshes."},
    {"name": "Refresh History", "description": "Query finished refresh executions."},
    {
        "name": "Refresh Overview",
        "description": "Refresh statistics and the calendar of planned refreshes.",
    },
    {
        "name": "Notification Settings",
        "description": "Configure which channels receive refresh events.",
    },
    {"name": "Notification Logs", "description": "Audit every notification dispatch attempt."},
    {"name": "Notifications", "description": "The signed-in user's in-app inbox."},
]

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.version,
    description=(
        "Environment refresh scheduling API. "
        "Manage refresh intents and their approvals, and route lifecycle "
        "notifications to email, Teams, Slack, webhooks and the in-app inbox."
    ),
    openapi_tags=OPENAPI_TAGS,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Total-Count"],
)


app.include_router(
    refresh_intents.router,
    prefix="/v1/refresh/intents",
    tags=["Refresh Intents"],
)
app.include_router(
    refresh_history.router,
    prefix="/v1/refresh/history",
    tags=["Refresh History"],
)
app.include_router(
    refresh_overview.router,
    prefix="/v1/refresh",
    tags=["Refresh Overview"],
)
app.include_router(
    notification_settings.router,
    prefix="/v1/refresh/notification_settings",
    tags=["Notification Settings"],
)
app.include_router(
    notification_logs.router,
    prefix="/v1/refresh/notification_logs",
    tags=["Notification Logs"],
)
app.include_router(notifications.router, prefix="/v1/notifications", tags=["Notifications"])


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "app": settings.APP_NAME,
        "version": settings.version,
        "status": "running",
    }
