import uuid
from datetime import datetime, timezone
from typing import Annotated, Generic, TypeVar
from urllib.parse import urlparse

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


def to_naive_utc(value: datetime) -> datetime:
    """Aware datetimes are converted to UTC and stored naive."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


UtcDateTime = Annotated[datetime, AfterValidator(to_naive_utc)]


def check_absolute_url(value: str | None) -> str | None:
    if value:
        parsed = urlparse(value)
        if not (parsed.scheme and parsed.netloc):
            raise ValueError("must be a valid absolute URL")
    return value


class TaskinModel(BaseModel):
    """
    Base for every request and response body.

    Fields are snake_case in Python and camelCase on the wire; requests may
    use either spelling.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Page(TaskinModel, Generic[T]):
    """One page of a paged list."""
    data: list[T]
    total: int
    page: int
    size: int


class ActionResponse(TaskinModel):
    """Acknowledgement for write operations."""
    id: uuid.UUID
    message: str
    success: bool = True
