"""
dependencies/security.py

게이트웨이가 사용자 인증을 끝낸 뒤 넘겨주는 요청만 받는다는 전제
- Authorization: Bearer <API_INTERNAL_TOKEN>   (게이트웨이 ↔ 백엔드 공유 토큰)
- X-User-Role: dos / principal / teacher      (인증된 사용자 역할)
- X-Teacher-Id: 교사 ID                        (role 이 teacher 일 때)
"""

import hmac
import logging
from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, Request
from pydantic import BaseModel

from config.settings import settings

logger = logging.getLogger(__name__)

ROLES = ("dos", "principal", "teacher")
ADMIN_ROLES = ("dos", "principal")
STAFF_ROLES = ADMIN_ROLES + ("teacher",)

AuthHeader = Annotated[Optional[str], Header(alias="Authorization")]
RoleHeader = Annotated[Optional[str], Header(alias="X-User-Role")]
TeacherHeader = Annotated[Optional[int], Header(alias="X-Teacher-Id")]


class CurrentUser(BaseModel):
    role: str
    teacher_id: Optional[int] = None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=401, detail=detail, headers={"WWW-Authenticate": "Bearer"})


def get_current_user(
    authorization: AuthHeader = None,
    x_user_role: RoleHeader = None,
    x_teacher_id: TeacherHeader = None,
) -> CurrentUser:
    # 설정 누락 방지: 토큰이 비어있으면 개발 중 오류를 명확히 드러냄
    if not settings.API_INTERNAL_TOKEN:
        raise HTTPException(status_code=500, detail="Server token not configured")

    if not authorization:
        raise _unauthorized("Not authorized, no token provided")

    # "Bearer <token>" 파싱
    try:
        scheme, token = authorization.split(" ", 1)
    except ValueError:
        raise _unauthorized("Invalid Authorization header format")

    if scheme.lower() != "bearer":
        raise _unauthorized("Invalid auth scheme")

    # 타이밍 안전 비교
    if not hmac.compare_digest(token.strip(), settings.API_INTERNAL_TOKEN):
        raise _unauthorized("Not authorized, invalid token")

    role = (x_user_role or "").strip().lower()
    if role not in ROLES:
        raise _unauthorized("User role missing or unknown")

    return CurrentUser(role=role, teacher_id=x_teacher_id)


def require_roles(*roles: str):
    """허용 역할 목록을 받아 FastAPI 의존성 반환"""

    def _checker(request: Request, user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in roles:
            logger.warning(
                "Authorization failed: role=%s attempted %s %s",
                user.role, request.method, request.url.path,
            )
            raise HTTPException(
                status_code=403,
                detail="Forbidden: You do not have permission to access this resource",
            )
        return user

    return _checker


def require_teacher(user: CurrentUser = Depends(require_roles("teacher"))) -> CurrentUser:
    if user.teacher_id is None:
        raise HTTPException(status_code=403, detail="Teacher profile not found")
    return user
