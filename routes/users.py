from random import Random

from fastapi import APIRouter, Depends, Query, status
from schemas import (
    SetIsActiveRequest, UserUpdateResponse, UserResponse,
    GetReviewResponse, PullRequestShortResponse,
    DeactivateByTeamRequest, DeactivateByTeamResponse,
    ErrorResponse
)
from repository.base import Repository
from routes.dependencies import get_repository, get_rng
from services import users as user_service


router = APIRouter(prefix="/users")


@router.post("/setIsActive", status_code=status.HTTP_200_OK,
                   summary="Установить флаг активности пользователя",
                   response_model=UserUpdateResponse,
                   responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}})
async def setIsActive(request: SetIsActiveRequest, repo: Repository = Depends(get_repository)):
    user = await user_service.set_is_active(repo, request.user_id, request.is_active)
    return UserUpdateResponse(user=UserResponse.from_entity(user))


@router.get("/getReview", status_code=status.HTTP_200_OK,
                  summary="Получить PR'ы, где пользователь назначен ревьювером",
                  response_model=GetReviewResponse,
                  responses={400: {"model": ErrorResponse}})
async def getReview(user_id: str = Query(..., description="Идентификатор пользователя"),
                    repo: Repository = Depends(get_repository)):
    pull_requests = await user_service.get_review(repo, user_id)
    return GetReviewResponse(
        user_id=user_id,
        pull_requests=[PullRequestShortResponse.from_entity(pr) for pr in pull_requests]
    )


@router.post("/deactivateByTeam", status_code=status.HTTP_200_OK,
                  summary="Массовая деактивация пользователей команды с переназначением ревьюверов открытых PR",
                  response_model=DeactivateByTeamResponse,
                  responses={400: {"model": ErrorResponse}})
async def deactivateByTeam(request: DeactivateByTeamRequest,
                           repo: Repository = Depends(get_repository),
                           rng: Random = Depends(get_rng)):
    result = await user_service.deactivate_team_users(repo, request.team_name, rng)
    return DeactivateByTeamResponse(
        message="users deactivated and PRs reassigned successfully",
        team_name=result.team_name,
        deactivated_users=result.deactivated_users,
        repaired_prs=result.repaired_prs
    )
