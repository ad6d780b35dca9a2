from fastapi import APIRouter
from clinicbook.api.v1 import doctors, availability

api_router = APIRouter()

api_router.include_router(doctors.router, prefix="/doctors", tags=["doctors"])
api_router.include_router(availability.router, tags=["availability"])
