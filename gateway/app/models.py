"""
Data Models Module

Pydantic models for the identity payload carried in session credentials
and for the JSON bodies returned by the gateway endpoints.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Identity Models
# ============================================================================

class UserProfile(BaseModel):
    """
    User profile extracted from the provider's identity token.

    This is the only identity state the gateway keeps: it is embedded in
    every session credential and there is no server-side record.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: Optional[str] = Field(None, description="User display name")
    email: Optional[str] = Field(None, description="User email address")
    picture: Optional[str] = Field(None, description="Profile picture URL")


# ============================================================================
# Authentication Responses
# ============================================================================

class AuthUrlResponse(BaseModel):
    url: str = Field(..., description="Provider consent URL to redirect the browser to")


class UserResponse(BaseModel):
    user: UserProfile


class LoginStatusResponse(BaseModel):
    """Login status; user is only present when loggedIn is true."""
    loggedIn: bool = Field(..., description="Whether the session cookie is valid")
    user: Optional[UserProfile] = Field(None, description="Profile of the logged-in user")


class MessageResponse(BaseModel):
    message: str


# ============================================================================
# Resource Responses
# ============================================================================

class PostsResponse(BaseModel):
    posts: List[Any] = Field(default_factory=list, description="At most five posts")


# ============================================================================
# Health / Error Models
# ============================================================================

class HealthResponse(BaseModel):
    status: str = Field(..., description="Service health status")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")


class ErrorResponse(BaseModel):
    """Standardized error response model."""
    message: str = Field(..., description="Human-readable error message")
