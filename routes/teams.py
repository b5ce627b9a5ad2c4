from fastapi import APIRouter, Depends, Query, status
from schemas import (
    TeamRequest, TeamEnvelope, TeamResponse,
    AddMemberRequest, MessageResponse,
    ErrorResponse
)
from repository.base import Repository
from routes.dependencies import get_repository
from services import teams as team_service


router = APIRouter(prefix="/team")


@router.post("/add", status_code=status.HTTP_201_CREATED,
                  summary="Создать команду с участниками (создаёт/обновляет пользователей)",
                  response_model=TeamEnvelope,
                  responses={400: {"model": ErrorResponse}})
async def add(request: TeamRequest, repo: Repository = Depends(get_repository)):
    team = await team_service.add_team(
        repo,
        request.team_name,
        [member.to_entity() for member in request.members]
    )
    return TeamEnvelope(team=TeamResponse.from_entity(team))


@router.post("/add-member", status_code=status.HTTP_200_OK,
                  summary="Добавить участника в существующую команду (перенос из другой команды допускается)",
                  response_model=MessageResponse,
                  responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}})
async def add_member(request: AddMemberRequest, repo: Repository = Depends(get_repository)):
    await team_service.add_team_member(repo, request.team_name, request.member.to_entity())
    return MessageResponse(message="member added successfully")


@router.get("/get", status_code=status.HTTP_200_OK,
                 summary="Получить команду с участниками",
                 response_model=TeamEnvelope,
                 responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}})
async def get(team_name: str = Query(..., description="Уникальное имя команды"),
              repo: Repository = Depends(get_repository)):
    team = await team_service.get_team(repo, team_name)
    return TeamEnvelope(team=TeamResponse.from_entity(team))
