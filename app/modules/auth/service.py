from supabase import Client
from app.modules.auth.schemas import Caller
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_caller(self, token: Optional[str]) -> Optional[Caller]:
        """Resolve a bearer token into the calling user. Returns None when it cannot be resolved."""
        if not token:
            return None
        try:
            user_response = self.supabase.auth.get_user(jwt=token)
        except Exception as e:
            logger.info(f"Could not resolve caller from token: {e}")
            return None
        if not user_response or not user_response.user:
            return None
        user = user_response.user
        return Caller(id=str(user.id), email=user.email)
