from fastapi import APIRouter

from app.api import alerts, auth, codes, devices, system

api_router = APIRouter()
api_router.include_router(system.router)
api_router.include_router(auth.router)
api_router.include_router(codes.router)
api_router.include_router(devices.router)
api_router.include_router(alerts.router)
