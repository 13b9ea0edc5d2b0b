"""User profile data models."""

from pydantic import BaseModel, Field


class PerformanceGoals(BaseModel):
    """User-defined profit goals and drawdown limit."""

    monthly_profit_goal: float = Field(default=0.0, ge=0, description="Monthly profit goal")
    weekly_profit_target: float = Field(default=0.0, ge=0, description="Weekly profit target")
    max_drawdown_limit: float = Field(
        default=0.0, ge=0, le=1, description="Maximum drawdown as a fraction of peak equity"
    )

    model_config = {"frozen": True}


class UserProfile(BaseModel):
    """Represents the journal owner's account settings."""

    name: str = Field(..., min_length=1, description="Display name")
    account_balance: float = Field(default=0.0, ge=0, description="Starting account balance")
    currency: str = Field(default="USD", min_length=1, description="ISO-like currency code")
    performance_goals: PerformanceGoals = Field(default_factory=PerformanceGoals)

    model_config = {"frozen": True}
