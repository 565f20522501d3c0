"""Request and response bodies for the askdad HTTP API."""

from pydantic import BaseModel, ConfigDict, Field


class AskRequest(BaseModel):
    question: str = ""
    mode: str | None = None
    history: list[str] = Field(default_factory=list)


class HomeworkRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question: str | None = None
    image_base64: str | None = Field(default=None, alias="imageBase64")


class AnswerResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    answer: str
    audio_url: str = Field(alias="audioUrl")


class CreateAudioRequest(BaseModel):
    text: str = ""
    mode: str | None = None


class CreateAudioResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    token: str
    audio_url: str = Field(alias="audioUrl")
