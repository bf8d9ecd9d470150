"""서비스 공유 링크: 생성, 목록, 비밀번호 검증."""

import re
import secrets
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.logging.logger import logger
from core.utils.timezone_helper import to_naive_utc, utc_now
from domain.entities.service import Service, SharedService
from shared.services.auth_service import hash_password, verify_password
from shared.services.exceptions import (
    ForbiddenError,
    NotFoundError,
    ServiceError,
    ValidationError,
)

SLUG_PATTERN = re.compile(r"^[a-zA-Z0-9-]+$")


def is_link_active(link: SharedService, now: Optional[datetime] = None) -> bool:
    """활성 상태이고 만료되지 않은 링크인지."""
    now = now or utc_now()
    return bool(link.is_active) and (link.expiry_date is None or link.expiry_date > now)


class ShareService:
    """공유 링크 서비스."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def verify_password(self, token: Optional[str], password: Optional[str]) -> None:
        """공유 링크 비밀번호 확인. 실패 시 ServiceError.

        순서: 존재 → 활성 → 만료 → 비밀번호 설정 여부 → 비밀번호 일치.
        """
        if not token or not password:
            raise ValidationError("토큰과 비밀번호가 필요합니다.")

        result = await self.session.execute(
            select(SharedService).where(SharedService.token == token)
        )
        link = result.scalar_one_or_none()

        if not link:
            raise NotFoundError("공유 링크를 찾을 수 없습니다.")
        if not link.is_active:
            raise NotFoundError("비활성화된 공유 링크입니다.")
        if link.expiry_date and utc_now() > link.expiry_date:
            raise NotFoundError("만료된 공유 링크입니다.")
        if not link.password:
            raise ValidationError("비밀번호가 설정되지 않은 공유 링크입니다.")
        if not verify_password(password, link.password):
            logger.info("Shared link password rejected", shared_service_id=link.id)
            raise ServiceError(401, "잘못된 비밀번호입니다.")

        logger.info("Shared link password verified", shared_service_id=link.id)

    async def list_links(self, user_id: int) -> List[Dict[str, Any]]:
        """사용자의 공유 링크 목록."""
        result = await self.session.execute(
            select(SharedService)
            .where(SharedService.user_id == user_id)
            .options(selectinload(SharedService.services))
            .order_by(SharedService.created_at.desc(), SharedService.id.desc())
        )
        now = utc_now()
        links = []
        for link in result.scalars().all():
            links.append({
                "id": link.id,
                "title": link.title,
                "description": link.description,
                "token": link.token,
                "type": "single" if len(link.services) == 1 else "collection",
                "serviceCount": len(link.services),
                "viewCount": link.view_count,
                "isActive": is_link_active(link, now),
                "hasPassword": bool(link.password),
                "expiryDate": link.expiry_date,
                "createdAt": link.created_at,
                "services": [
                    {"id": service.id, "title": service.title, "price": service.price}
                    for service in link.services
                ],
            })
        return links

    async def create_link(self, user_id: int, data: Dict[str, Any]) -> SharedService:
        """공유 링크 생성. 비밀번호는 bcrypt 해시로 저장한다."""
        service_ids = [int(service_id) for service_id in data.get("selected_services") or []]
        if not service_ids:
            raise ValidationError("공유할 서비스를 선택해주세요.")

        title = (data.get("title") or "").strip()
        if not title:
            raise ValidationError("페이지 제목을 입력해주세요.")

        result = await self.session.execute(
            select(Service).where(Service.id.in_(service_ids), Service.user_id == user_id)
        )
        services = list(result.scalars().all())
        if len(services) != len(set(service_ids)):
            raise ForbiddenError("권한이 없는 서비스가 포함되어 있습니다.")

        token = await self._resolve_token(data.get("custom_slug"))

        password = (data.get("password") or "").strip()
        expiry_date = to_naive_utc(data.get("expiry_date"))
        if expiry_date and expiry_date <= utc_now():
            raise ValidationError("만료일은 현재 시간보다 늦어야 합니다.")

        description = (data.get("description") or "").strip() or None
        link = SharedService(
            user_id=user_id,
            token=token,
            title=title,
            description=description,
            password=hash_password(password) if password else None,
            expiry_date=expiry_date,
            view_count=0,
            is_active=True,
        )
        link.services = services
        self.session.add(link)
        await self.session.commit()

        logger.info("Shared link created", shared_service_id=link.id, user_id=user_id, service_count=len(services))
        return link

    async def _resolve_token(self, custom_slug: Optional[str]) -> str:
        """커스텀 슬러그 또는 중복되지 않는 랜덤 토큰."""
        if custom_slug and custom_slug.strip():
            slug = custom_slug.strip()
            if not SLUG_PATTERN.match(slug):
                raise ValidationError("커스텀 URL은 영문, 숫자, 하이픈만 사용 가능합니다.")
            token = slug.lower()
            if await self._token_exists(token):
                raise ValidationError("이미 사용 중인 URL입니다.")
            return token

        while True:
            token = secrets.token_hex(16)
            if not await self._token_exists(token):
                return token

    async def _token_exists(self, token: str) -> bool:
        result = await self.session.execute(
            select(SharedService.id).where(SharedService.token == token)
        )
        return result.scalar_one_or_none() is not None
