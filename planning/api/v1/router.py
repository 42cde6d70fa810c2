# planning/api/v1/router.py
from fastapi import APIRouter
from planning.api.v1 import auth, users, rooms, events

api_router = APIRouter()

api_router.include_router(auth.router,   prefix="/auth",   tags=["auth"])
api_router.include_router(users.router,  prefix="/users",  tags=["users"])
api_router.include_router(rooms.router,  prefix="/rooms",  tags=["rooms"])
api_router.include_router(events.router, prefix="/events", tags=["events"])
