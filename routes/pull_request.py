from random import Random

from fastapi import APIRouter, Depends, Query, status
from schemas import (
    PullRequestCreateRequest, PullRequestEnvelope, PullRequestResponse,
    PullRequestMergeRequest,
    PullRequestReassignRequest, PullRequestReassignResponse,
    ErrorResponse
)
from repository.base import Repository
from routes.dependencies import get_repository, get_rng
from services import pull_request as pr_service


router = APIRouter(prefix="/pullRequest")


@router.post("/create", status_code=status.HTTP_201_CREATED,
                summary="Создать PR и автоматически назначить до 2 ревьюверов из команды автора",
                response_model=PullRequestEnvelope,
                responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}})
async def create(request: PullRequestCreateRequest,
                 repo: Repository = Depends(get_repository),
                 rng: Random = Depends(get_rng)):
    pr = await pr_service.create_pull_request(
        repo,
        request.pull_request_id,
        request.pull_request_name,
        request.author_id,
        rng
    )
    return PullRequestEnvelope(pr=PullRequestResponse.from_entity(pr))


@router.post("/merge", status_code=status.HTTP_200_OK,
                summary="Пометить PR как MERGED (идемпотентная операция)",
                response_model=PullRequestEnvelope,
                responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}})
async def merge(request: PullRequestMergeRequest, repo: Repository = Depends(get_repository)):
    pr = await pr_service.merge_pull_request(repo, request.pull_request_id)
    return PullRequestEnvelope(pr=PullRequestResponse.from_entity(pr))


@router.post("/reassign", status_code=status.HTTP_200_OK,
                summary="Переназначить конкретного ревьювера на другого из его команды",
                response_model=PullRequestReassignResponse,
                responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}})
async def reassign(request: PullRequestReassignRequest,
                   repo: Repository = Depends(get_repository),
                   rng: Random = Depends(get_rng)):
    pr, replaced_by = await pr_service.reassign_reviewer(
        repo,
        request.pull_request_id,
        request.old_reviewer_id,
        rng
    )
    return PullRequestReassignResponse(pr=PullRequestResponse.from_entity(pr), replaced_by=replaced_by)


@router.get("/get", status_code=status.HTTP_200_OK,
               summary="Получить PR с текущими ревьюверами",
               response_model=PullRequestEnvelope,
               responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}})
async def get(pull_request_id: str = Query(..., description="Идентификатор PR"),
              repo: Repository = Depends(get_repository)):
    pr = await pr_service.get_pull_request(repo, pull_request_id)
    return PullRequestEnvelope(pr=PullRequestResponse.from_entity(pr))
