from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, Optional


class Caller(BaseModel):
    """Authenticated user behind the current request"""
    id: str
    email: Optional[str] = None


class IdentityUser(BaseModel):
    """Identity record from Supabase Auth, normalized at the boundary"""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    email: Optional[str] = None
    user_metadata: Dict[str, Any] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("user_metadata", "raw_user_meta_data"),
    )

    @field_validator("user_metadata", mode="before")
    @classmethod
    def _empty_metadata(cls, value: Any) -> Any:
        return value or {}

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Any:
        return str(value) if value is not None else value

    @property
    def metadata_role(self) -> Optional[str]:
        role = self.user_metadata.get("role")
        return role if isinstance(role, str) else None

    @classmethod
    def from_provider(cls, raw: Any) -> "IdentityUser":
        """Accept a gotrue User model or a plain dict"""
        if isinstance(raw, dict):
            return cls.model_validate(raw)
        if hasattr(raw, "model_dump"):
            return cls.model_validate(raw.model_dump())
        return cls.model_validate(vars(raw))
