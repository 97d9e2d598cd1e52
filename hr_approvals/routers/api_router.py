from fastapi import APIRouter
from hr_approvals.routers import leave, timesheets, balances, notifications

# Centralized API router hub
# Routers are aggregated here, and main.py only imports this single hub.
api_router = APIRouter()

api_router.include_router(leave.router, tags=["Leave Requests"])
api_router.include_router(timesheets.router, tags=["Timesheets"])
api_router.include_router(balances.router, tags=["Leave Balances"])
api_router.include_router(notifications.router, tags=["Notifications"])
