# kubequest/api/v1/api.py
from fastapi import APIRouter
from kubequest.api.v1.endpoints import cluster, concepts, tutor

api_router = APIRouter()

# Include routers from endpoint modules
api_router.include_router(cluster.router, prefix="/cluster", tags=["Cluster"])
api_router.include_router(concepts.router, prefix="/concepts", tags=["Concepts"])
api_router.include_router(tutor.router, prefix="/tutor", tags=["Tutor"])
