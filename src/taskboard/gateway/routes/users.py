"""用户路由

GET    /api/users: 全部用户
GET    /api/users/{user_id}: 用户详情（404 不存在）
POST   /api/users: 创建用户（400 携带 id 或用户名重复）
PUT    /api/users/{user_id}: 更新用户名（404 不存在）
DELETE /api/users/{user_id}: 删除用户（404 不存在）
DELETE /api/users: 清空用户
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from starlette.responses import JSONResponse, Response
from taskboard.core.config import USER_NAME_PATTERN
from taskboard.core.models import User

from ..deps import get_user_service
from ..services.user_service import UserService

router = APIRouter()


class UserRequest(BaseModel):
    """用户请求体（创建时 id 必须为空）"""

    id: str | None = Field(default=None, description="创建时必须为空")
    name: str = Field(pattern=USER_NAME_PATTERN, description="用户名（单词字符）")


class UserResponse(BaseModel):
    """用户响应体"""

    id: str
    created_at: str
    name: str

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(id=user.id, created_at=user.created_at.isoformat(), name=user.name)


def _user_not_found(user_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content={
            "error": {
                "code": "USER_NOT_FOUND",
                "message": f"User with ID {user_id} does not exist.",
            }
        },
    )


@router.get("/api/users", response_model=list[UserResponse])
async def list_users(service: UserService = Depends(get_user_service)):
    """查询全部用户"""
    users = await service.get_all()
    return [UserResponse.from_user(u) for u in users]


@router.get("/api/users/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, service: UserService = Depends(get_user_service)):
    """查询用户详情"""
    user = await service.get_by_id(user_id)
    if user is None:
        return _user_not_found(user_id)
    return UserResponse.from_user(user)


@router.post("/api/users", status_code=201, response_model=UserResponse)
async def create_user(body: UserRequest, service: UserService = Depends(get_user_service)):
    """创建用户"""
    user = await service.create(User(id=body.id, name=body.name))
    return UserResponse.from_user(user)


@router.put("/api/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    body: UserRequest,
    service: UserService = Depends(get_user_service),
):
    """更新用户名"""
    user = await service.update(user_id, body.name)
    return UserResponse.from_user(user)


@router.delete("/api/users/{user_id}", status_code=204)
async def delete_user(user_id: str, service: UserService = Depends(get_user_service)):
    """删除用户"""
    await service.delete(user_id)
    return Response(status_code=204)


@router.delete("/api/users", status_code=204)
async def clear_users(service: UserService = Depends(get_user_service)):
    """清空用户（每个用户各记录一条 DELETE 事件）"""
    await service.clear()
    return Response(status_code=204)
