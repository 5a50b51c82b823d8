from pydantic import BaseModel, Field, field_validator

from rps_server.domain.hand import Hand


class LoginModel(BaseModel):
    user_name: str = Field(min_length=1, max_length=64)


class PlayModel(BaseModel):
    hand: Hand
    commitment: str = Field(pattern=r"^[0-9a-f]{64}$")  # the round being answered

    @field_validator("hand", mode="before")
    @classmethod
    def parse_hand(cls, value):
        return Hand.parse(value)


class UserModel(BaseModel):
    user_id: str
    user_name: str


class GameViewModel(BaseModel):
    user_name: str
    win_count: int
    tie_count: int
    loss_count: int
    commitment: str | None = None
    last_human_hand: Hand | None = None
    last_human_icon: str | None = None
    last_computer_hand: Hand | None = None
    last_computer_icon: str | None = None
    last_result: str | None = None
    last_nonce: str | None = None
    last_commitment: str | None = None


class MessageModel(BaseModel):
    detail: str
