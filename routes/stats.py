from fastapi import APIRouter, Depends, status
from schemas import (
    PrsTotalResponse, PrsStatusResponse,
    UserAssignmentsResponse, TopReviewersResponse, UserAssignmentResponse,
    AvgCloseTimeResponse,
    TeamMetricsResponse, TeamMetricResponse
)
from repository.base import Repository
from routes.dependencies import get_repository
from services import stats as stats_service


router = APIRouter(prefix="/stats")


@router.get("/prs-total", status_code=status.HTTP_200_OK,
               summary="Общее количество PR",
               response_model=PrsTotalResponse)
async def prs_total(repo: Repository = Depends(get_repository)):
    total = await stats_service.get_total_prs(repo)
    return PrsTotalResponse(total_prs=total)


@router.get("/prs-status", status_code=status.HTTP_200_OK,
               summary="Количество открытых и смёрженных PR",
               response_model=PrsStatusResponse)
async def prs_status(repo: Repository = Depends(get_repository)):
    open_prs, merged_prs = await stats_service.get_prs_by_status(repo)
    return PrsStatusResponse(open_prs=open_prs, merged_prs=merged_prs)


@router.get("/assignments-per-user", status_code=status.HTTP_200_OK,
               summary="Количество назначений на ревью для каждого активного пользователя",
               response_model=UserAssignmentsResponse)
async def assignments_per_user(repo: Repository = Depends(get_repository)):
    assignments = await stats_service.get_assignments_per_user(repo)
    return UserAssignmentsResponse(
        user_assignments=[UserAssignmentResponse.from_entity(a) for a in assignments]
    )


@router.get("/top-reviewers", status_code=status.HTTP_200_OK,
               summary="Топ-5 ревьюверов по количеству назначений",
               response_model=TopReviewersResponse)
async def top_reviewers(repo: Repository = Depends(get_repository)):
    top = await stats_service.get_top_reviewers(repo)
    return TopReviewersResponse(top_reviewers=[UserAssignmentResponse.from_entity(a) for a in top])


@router.get("/avg-close-time", status_code=status.HTTP_200_OK,
               summary="Среднее время от создания PR до merge",
               response_model=AvgCloseTimeResponse)
async def avg_close_time(repo: Repository = Depends(get_repository)):
    detail = await stats_service.get_avg_close_time(repo)
    return AvgCloseTimeResponse.from_entity(detail)


@router.get("/idle-users-per-team", status_code=status.HTTP_200_OK,
               summary="Активные пользователи без открытых ревью по командам",
               response_model=TeamMetricsResponse)
async def idle_users_per_team(repo: Repository = Depends(get_repository)):
    metrics = await stats_service.get_idle_users_per_team(repo)
    return TeamMetricsResponse(team_metrics=[TeamMetricResponse.from_entity(m) for m in metrics])


@router.get("/needy-prs-per-team", status_code=status.HTTP_200_OK,
               summary="Открытые PR, которым не хватает ревьюверов, по командам авторов",
               response_model=TeamMetricsResponse)
async def needy_prs_per_team(repo: Repository = Depends(get_repository)):
    metrics = await stats_service.get_needy_prs_per_team(repo)
    return TeamMetricsResponse(team_metrics=[TeamMetricResponse.from_entity(m) for m in metrics])
