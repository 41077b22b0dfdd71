from fastapi import APIRouter

from famcal.api.v1.endpoints import calendar, events, members

api_router = APIRouter()

# Include all route modules
api_router.include_router(calendar.router)
api_router.include_router(events.router)
api_router.include_router(members.router)
