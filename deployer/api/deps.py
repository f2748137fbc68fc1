"""Dependency injection for API endpoints."""

from typing import Annotated

from fastapi import Depends

from deployer.core.drafts import DraftManager, get_draft_manager
from deployer.core.orchestrator import DeploymentOrchestrator, get_orchestrator
from deployer.services.credentials import CredentialValidator


async def get_drafts() -> DraftManager:
    """Get the draft manager."""
    return get_draft_manager()


async def get_validator() -> CredentialValidator:
    """Get a credential validator."""
    return CredentialValidator()


async def get_deployment_orchestrator() -> DeploymentOrchestrator:
    """Get a deployment orchestrator."""
    return get_orchestrator()


# Type aliases for cleaner signatures
DraftsDep = Annotated[DraftManager, Depends(get_drafts)]
ValidatorDep = Annotated[CredentialValidator, Depends(get_validator)]
OrchestratorDep = Annotated[DeploymentOrchestrator, Depends(get_deployment_orchestrator)]
