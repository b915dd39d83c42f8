from fastapi import APIRouter

from src.modules.reminders.api.v1 import reminders

router = APIRouter()

router.include_router(reminders.router)
