"""User API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, status

from payroll_records.api.dependencies import DbSession
from payroll_records.api.schemas import ErrorResponse, UserCreate, UserResponse
from payroll_records.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def create_user(db: DbSession, payload: UserCreate) -> UserResponse:
    user = await UserService(db).create_user(**payload.model_dump())
    await db.commit()
    return UserResponse.model_validate(user)


@router.get(
    "/{user_id}",
    response_model=UserResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_user(db: DbSession, user_id: Annotated[int, Path()]) -> UserResponse:
    user = await UserService(db).get_user(user_id)
    return UserResponse.model_validate(user)
