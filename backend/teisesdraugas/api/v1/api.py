"""
Main API router aggregator
"""
from fastapi import APIRouter

from teisesdraugas.api.v1.endpoints import (
    analysis,
    cases,
    court_filings,
    demand_letters,
    documents,
    health,
    lawyer_reviews,
    notifications,
    reference,
)

api_router = APIRouter()

# Include routers
api_router.include_router(cases.router, tags=["Cases"])
api_router.include_router(documents.router, tags=["Documents"])
api_router.include_router(analysis.router, tags=["AI Analysis"])
api_router.include_router(demand_letters.router, tags=["Demand Letters"])
api_router.include_router(court_filings.router, tags=["Court Filings"])
api_router.include_router(lawyer_reviews.router, tags=["Lawyer Reviews"])
api_router.include_router(notifications.router, tags=["Notifications"])
api_router.include_router(reference.router, prefix="/reference", tags=["Reference"])
api_router.include_router(health.router, prefix="/health", tags=["Health"])
