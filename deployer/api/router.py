"""Main API router."""

from fastapi import APIRouter

from deployer.api.routes import aws, deploy, drafts, github, health

router = APIRouter(prefix="/api")

# Include sub-routers
router.include_router(health.router, tags=["health"])
router.include_router(github.router, tags=["credentials"])
router.include_router(aws.router, tags=["credentials"])
router.include_router(deploy.router, tags=["deployment"])
router.include_router(drafts.router, prefix="/drafts", tags=["drafts"])
