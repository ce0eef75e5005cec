"""
Project router: CRUD, dashboard counters and per-project BOM views.
"""

from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException

from renoplan.auth.dependencies import get_session_context
from renoplan.auth.schemas import SessionContext
from renoplan.db.boms.repository import BOMRepository
from renoplan.db.boms.schemas import BOMListResponse, BOMResponse, BOMStatsResponse
from renoplan.db.dependencies import get_bom_repository, get_project_repository
from renoplan.db.projects.repository import ProjectRepository
from renoplan.db.projects.schemas import (
    CreateProjectRequest,
    ProjectListResponse,
    ProjectResponse,
    ProjectStatsResponse,
    ProjectStatus,
    UpdateProjectRequest,
)
from renoplan.utils.logger import logger

router = APIRouter(prefix="/projects", tags=["Projects"])


def _not_found(project_id: str) -> HTTPException:
    return HTTPException(
        status_code=HTTPStatus.NOT_FOUND, detail=f"Project {project_id} not found"
    )


@router.post("", response_model=ProjectResponse, status_code=HTTPStatus.CREATED)
async def create_project(
    request: CreateProjectRequest,
    context: SessionContext = Depends(get_session_context),
    project_repository: ProjectRepository = Depends(get_project_repository),
) -> ProjectResponse:
    """Create a project; it starts in the planning status."""
    try:
        project = await project_repository.create_project(
            user_id=context.user_id,
            name=request.name,
            description=request.description,
            budget=request.budget,
        )
        await project_repository.session.commit()
        return ProjectResponse.model_validate(project)

    except Exception as e:
        await project_repository.session.rollback()
        logger.error("Failed to create project", error=str(e))
        raise HTTPException(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            detail=f"Failed to create project: {str(e)}",
        )


@router.get("", response_model=ProjectListResponse)
async def list_projects(
    context: SessionContext = Depends(get_session_context),
    project_repository: ProjectRepository = Depends(get_project_repository),
) -> ProjectListResponse:
    projects = await project_repository.list_projects(context.user_id)
    return ProjectListResponse(
        projects=[ProjectResponse.model_validate(p) for p in projects],
        total=len(projects),
    )


@router.get("/stats", response_model=ProjectStatsResponse)
async def get_project_stats(
    context: SessionContext = Depends(get_session_context),
    project_repository: ProjectRepository = Depends(get_project_repository),
) -> ProjectStatsResponse:
    """Dashboard counters for the caller's projects."""
    counts = await project_repository.count_by_status(context.user_id)
    return ProjectStatsResponse(
        total=sum(counts.values()),
        planning=counts.get(ProjectStatus.PLANNING.value, 0),
        in_progress=counts.get(ProjectStatus.IN_PROGRESS.value, 0),
        completed=counts.get(ProjectStatus.COMPLETED.value, 0),
    )


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(
    project_id: str,
    context: SessionContext = Depends(get_session_context),
    project_repository: ProjectRepository = Depends(get_project_repository),
) -> ProjectResponse:
    project = await project_repository.get_project(project_id, context.user_id)
    if not project:
        raise _not_found(project_id)
    return ProjectResponse.model_validate(project)


@router.patch("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: str,
    request: UpdateProjectRequest,
    context: SessionContext = Depends(get_session_context),
    project_repository: ProjectRepository = Depends(get_project_repository),
) -> ProjectResponse:
    """
    Update the fields present in the request body.

    Raises:
        HTTPException: If project not found or an error occurs
    """
    try:
        project = await project_repository.update_project(
            project_id,
            context.user_id,
            request.model_dump(exclude_unset=True),
        )
        if not project:
            raise _not_found(project_id)

        await project_repository.session.commit()
        return ProjectResponse.model_validate(project)

    except HTTPException:
        raise
    except Exception as e:
        await project_repository.session.rollback()
        logger.error("Failed to update project", error=str(e), project_id=project_id)
        raise HTTPException(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            detail=f"Failed to update project: {str(e)}",
        )


@router.delete("/{project_id}", status_code=HTTPStatus.NO_CONTENT)
async def delete_project(
    project_id: str,
    context: SessionContext = Depends(get_session_context),
    project_repository: ProjectRepository = Depends(get_project_repository),
) -> None:
    """
    Delete a project with its BOMs; its conversations are kept.

    Raises:
        HTTPException: If project not found or an error occurs
    """
    try:
        deleted = await project_repository.delete_project(project_id, context.user_id)
        if not deleted:
            raise _not_found(project_id)

        await project_repository.session.commit()

    except HTTPException:
        raise
    except Exception as e:
        await project_repository.session.rollback()
        logger.error("Failed to delete project", error=str(e), project_id=project_id)
        raise HTTPException(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete project: {str(e)}",
        )


# ========== BOM Views ==========


@router.get("/{project_id}/boms", response_model=BOMListResponse)
async def list_project_boms(
    project_id: str,
    context: SessionContext = Depends(get_session_context),
    project_repository: ProjectRepository = Depends(get_project_repository),
    bom_repository: BOMRepository = Depends(get_bom_repository),
) -> BOMListResponse:
    if not await project_repository.get_project(project_id, context.user_id):
        raise _not_found(project_id)

    boms = await bom_repository.list_boms_for_project(project_id)
    return BOMListResponse(
        boms=[BOMResponse.model_validate(b) for b in boms], total=len(boms)
    )


@router.get("/{project_id}/bom-stats", response_model=BOMStatsResponse)
async def get_project_bom_stats(
    project_id: str,
    context: SessionContext = Depends(get_session_context),
    project_repository: ProjectRepository = Depends(get_project_repository),
    bom_repository: BOMRepository = Depends(get_bom_repository),
) -> BOMStatsResponse:
    """BOM, item and shopping-list counts plus total estimated cost."""
    if not await project_repository.get_project(project_id, context.user_id):
        raise _not_found(project_id)

    return BOMStatsResponse(**await bom_repository.get_project_stats(project_id))
