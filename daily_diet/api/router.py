from fastapi import APIRouter
from daily_diet.api.v1.meals import router as meals_router
from daily_diet.api.v1.users import router as users_router

api_router = APIRouter()

api_router.include_router(users_router)
api_router.include_router(meals_router)
