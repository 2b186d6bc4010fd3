"""Validated, immutable configuration of a BangumiClient."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from bgmtv.config.settings import DEFAULT_BASE_URL


class ClientConfig(BaseModel):
    """Everything a client needs to talk to the service. Frozen once built."""

    model_config = ConfigDict(frozen=True)

    base_url: str = DEFAULT_BASE_URL
    user_agent: str = Field(..., min_length=1)
    token: Optional[str] = None
    timeout: Optional[float] = Field(None, gt=0)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"base_url must be an http(s) URL, got {v!r}")
        return v

    @field_validator("user_agent")
    @classmethod
    def validate_user_agent(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("user_agent must not be blank")
        return v

    @field_validator("token")
    @classmethod
    def validate_token(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("token must not be blank; leave it unset instead")
        return v

    def __repr__(self) -> str:
        # Keep the credential out of logs and tracebacks
        token = "***" if self.token else None
        return (
            f"ClientConfig(base_url={self.base_url!r}, user_agent={self.user_agent!r}, "
            f"token={token!r}, timeout={self.timeout!r})"
        )

    __str__ = __repr__
