from fastapi import APIRouter
from api.companies_routes import router as companies_router
from api.jobs_routes import router as jobs_router

router = APIRouter()

router.include_router(companies_router, prefix="/companies", tags=["Companies"])
router.include_router(jobs_router, prefix="/jobs", tags=["Jobs"])
