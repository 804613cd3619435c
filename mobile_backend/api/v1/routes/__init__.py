"""
Rotas v1 da API.
"""

from fastapi import APIRouter

from mobile_backend.api.v1.routes.auth import router as auth_router
from mobile_backend.api.v1.routes.fractioning import router as fractioning_router

router = APIRouter(prefix="/v1")

# Inclui rotas
router.include_router(auth_router)
router.include_router(fractioning_router)


@router.get("/", tags=["Info"])
async def api_info():
    """Informações da API v1."""
    return {
        "version": "1.0.0",
        "endpoints": {
            "auth": "/v1/auth",
            "fractioning": "/v1/fractioning",
        },
    }
