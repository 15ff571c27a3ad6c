"""Profile schemas."""
from flashcards.records import UserRecord, UserStats
from flashcards.schemas.auth import UserResponse
from flashcards.schemas.common import CamelModel


class UserStatsResponse(CamelModel):
    deck_count: int
    card_count: int
    completed_sessions: int
    total_study_time_minutes: int


class UserProfileResponse(UserResponse):
    """The signed-in user with study statistics."""

    stats: UserStatsResponse

    @classmethod
    def from_profile(cls, user: UserRecord, stats: UserStats) -> "UserProfileResponse":
        return cls(
            **UserResponse.from_record(user).model_dump(),
            stats=UserStatsResponse(
                deck_count=stats.deck_count,
                card_count=stats.card_count,
                completed_sessions=stats.completed_sessions,
                total_study_time_minutes=stats.total_study_time_minutes,
            ),
        )


class UpdateUserRequest(CamelModel):
    """Partial profile update; omitted fields are left unchanged."""

    display_name: str | None = None
