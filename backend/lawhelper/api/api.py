"""
Main API router aggregator
"""
from fastapi import APIRouter

from lawhelper.api.endpoints import (
    analysis,
    auth,
    cases,
    documents,
    drafting,
    health,
    medical,
    research,
)

api_router = APIRouter()

# Include routers
api_router.include_router(auth.router, tags=["Authentication"])
api_router.include_router(research.router, tags=["Research"])
api_router.include_router(analysis.router, tags=["Document Analysis"])
api_router.include_router(drafting.router, tags=["Drafting"])
api_router.include_router(cases.router, prefix="/cases", tags=["Cases"])
api_router.include_router(documents.router, tags=["Documents"])
api_router.include_router(medical.router, tags=["Medical"])
api_router.include_router(health.router, prefix="/health", tags=["Health"])
