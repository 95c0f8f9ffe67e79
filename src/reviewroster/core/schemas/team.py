"""Team and user schemas."""
from pydantic import BaseModel, ConfigDict, Field


class TeamMember(BaseModel):
    """Member entry of a team."""
    user_id: str = Field(..., max_length=255, description="Caller-supplied unique user id")
    username: str = Field(..., max_length=255, description="Display name")
    is_active: bool = Field(default=True, description="Whether the user can be assigned reviews")

    model_config = ConfigDict(from_attributes=True)


class TeamCreate(BaseModel):
    """Schema for creating a team with its members."""
    team_name: str = Field(..., max_length=255, description="Unique team name")
    members: list[TeamMember] = Field(default_factory=list, description="Team members")


class TeamResponse(BaseModel):
    """Schema for a team with its members."""
    team_name: str
    members: list[TeamMember]

    model_config = ConfigDict(from_attributes=True)


class TeamEnvelope(BaseModel):
    """Response wrapping a team."""
    team: TeamResponse


class UserActiveUpdate(BaseModel):
    """Schema for toggling a user's active flag."""
    user_id: str = Field(..., description="User to update")
    is_active: bool = Field(..., description="New active flag")


class UserResponse(BaseModel):
    """Schema for a user."""
    user_id: str
    username: str
    team_name: str
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class UserEnvelope(BaseModel):
    """Response wrapping a user."""
    user: UserResponse
