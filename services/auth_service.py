from datetime import datetime, timedelta
from typing import Optional
import logging

from config import settings
from models.user import User, UserRole
from repositories.base import FleetStore
from utils.security import verify_key, get_key_hash, create_session_token, mask_sensitive_data

logger = logging.getLogger(__name__)

class AuthService:
    @staticmethod
    def authenticate_user(store: FleetStore, user_id: str, key: str) -> Optional[User]:
        """Check an account id and API key"""
        user = store.get_user(user_id)
        if not user:
            logger.warning(f"Login attempt with unknown account: {mask_sensitive_data(user_id)}")
            return None
        if not user.is_active:
            logger.warning(f"Login attempt on deactivated account: {user.id}")
            return None
        if not verify_key(key, user.key_hash):
            logger.warning(f"Failed login attempt for account: {user.id}")
            return None
        logger.info(f"Successful login for account: {user.id}")
        return user

    @staticmethod
    def create_user(store: FleetStore, user_id: str, name: str, key: str, role: UserRole) -> Optional[User]:
        """Register an account; returns None when the id is taken"""
        if store.get_user(user_id):
            return None

        user = User(
            id=user_id,
            name=name,
            role=role,
            key_hash=get_key_hash(key),
            is_active=True,
            created_at=datetime.utcnow()
        )
        store.add_user(user)
        logger.info(f"New account created: {user.id} with role: {role.value}")
        return user

    @staticmethod
    def generate_token(user: User, expire_minutes: Optional[int] = None) -> str:
        return create_session_token(
            data={"sub": user.id, "role": user.role.value},
            expires_delta=timedelta(minutes=expire_minutes or settings.session_expire_minutes)
        )
