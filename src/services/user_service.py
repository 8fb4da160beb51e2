from typing import List, Optional

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from src.core.exceptions import NotFoundError
from src.core.identity import IdentityProvider, IdentityProviderError
from src.models.user import UserProfile
from src.schemas.base import DeleteResult, WriteResult
from src.utils.logger import db_logger, identity_logger
from src.utils.time_utils import hk_timestamp


class UserService:
    def __init__(self, db: Session, identity: Optional[IdentityProvider] = None):
        self.db = db
        self.identity = identity

    async def upsert_profile(
        self,
        uid: str,
        email: str,
        country: Optional[str] = None,
        institution: Optional[str] = None,
        ip: Optional[str] = None,
        _retried: bool = False,
    ) -> WriteResult:
        """按 uid 写入用户资料

        同一邮箱下其它 uid 的旧记录会先被删除（Firebase 用户被删后重建的情况）。
        """
        now = hk_timestamp()

        stale = (
            self.db.query(UserProfile)
            .filter(UserProfile.email == email, UserProfile.uid != uid)
            .delete(synchronize_session=False)
        )
        if stale:
            db_logger.info(f"Removed {stale} stale profile(s) for {email}")

        user = self.db.query(UserProfile).filter(UserProfile.uid == uid).first()
        if user is None:
            user = UserProfile(
                uid=uid,
                email=email,
                country=country or "",
                institution=institution or "",
                last_ip=ip,
                updated_at=now,
                created_at=now,
                signup_ip=ip,
            )
            self.db.add(user)
            try:
                self.db.commit()
            except IntegrityError:
                # 并发插入同一 uid，回退为更新
                self.db.rollback()
                if _retried:
                    raise
                return await self.upsert_profile(
                    uid, email, country, institution, ip, _retried=True)
            result = WriteResult(upserted_count=1, upserted_id=user.id)
        else:
            user.email = email
            user.country = country or ""
            user.institution = institution or ""
            user.updated_at = now
            user.last_ip = ip
            self.db.commit()
            result = WriteResult(matched_count=1, modified_count=1)

        db_logger.info(
            f"User save result: matched={result.matched_count}, "
            f"modified={result.modified_count}, upserted={result.upserted_count}")
        return result

    async def get_profile(self, uid: str) -> UserProfile:
        user = self.db.query(UserProfile).filter(UserProfile.uid == uid).first()
        if not user:
            db_logger.info(f"User {uid} not found")
            raise NotFoundError("User not found")
        return user

    async def get_profile_by_email(self, email: str) -> Optional[UserProfile]:
        return self.db.query(UserProfile).filter(UserProfile.email == email).first()

    async def list_profiles(self) -> List[UserProfile]:
        return self.db.query(UserProfile).all()

    async def delete_profile_by_email(self, email: str) -> DeleteResult:
        user = await self.get_profile_by_email(email)
        if user is None:
            db_logger.info(f"User {email} not found")
            return DeleteResult(deleted_count=0)

        self.db.delete(user)
        self.db.commit()
        db_logger.info(f"Successfully deleted user {email}")
        return DeleteResult(deleted_count=1)

    async def check_email_availability(self, email: str) -> bool:
        """资料库和身份服务任一处存在该邮箱即视为不可用"""
        if await self.get_profile_by_email(email) is not None:
            return False

        if self.identity is None or not self.identity.available:
            return True

        try:
            result = await run_in_threadpool(self.identity.get_user_by_email, email)
        except IdentityProviderError as e:
            identity_logger.error(f"Firebase Admin check error: {e}")
            return True
        return not result.ok

    async def force_delete_user(self, email: str) -> DeleteResult:
        """同时删除 Firebase 账号和资料记录"""
        if self.identity is not None and self.identity.available:
            try:
                lookup = await run_in_threadpool(self.identity.get_user_by_email, email)
                if lookup.ok:
                    await run_in_threadpool(self.identity.delete_user, lookup.user.uid)
                    identity_logger.info(f"Deleted user from Firebase: {lookup.user.uid}")
                else:
                    identity_logger.info(f"User not found in Firebase: {email}")
            except IdentityProviderError as e:
                identity_logger.error(f"Error deleting from Firebase: {e}")

        result = await self.delete_profile_by_email(email)
        db_logger.info(f"Profile delete count: {result.deleted_count}")
        return result
