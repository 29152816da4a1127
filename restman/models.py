from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class RequestOptions(_Model):
    method: str = Field(min_length=1)
    url: str = Field(min_length=1)
    headers: Dict[str, str]
    body: Optional[str] = None


class Response(_Model):
    status: int
    status_text: str = Field(alias="statusText")
    headers: Dict[str, str] = {}
    body: str = ""
    time: int = 0

    @property
    def is_transport_error(self) -> bool:
        # status 0 never comes back from a real server
        return self.status == 0


class Environment(_Model):
    id: int
    name: str
    variables: Dict[str, str] = {}


class EnvironmentsConfig(_Model):
    active_environment_id: Optional[int] = Field(default=None, alias="activeEnvironmentId")
    environments: List[Environment]


class HistoryEntry(_Model):
    id: int = Field(ge=1)
    timestamp: datetime
    request: RequestOptions
    status: Optional[int] = None
    status_text: Optional[str] = Field(default=None, alias="statusText")
    time: Optional[int] = None


class SavedRequest(_Model):
    id: int = Field(ge=1)
    name: str = Field(min_length=1)
    timestamp: datetime
    request: RequestOptions


M = TypeVar("M", bound=BaseModel)


@dataclass
class Accepted(Generic[M]):
    value: M


@dataclass
class Rejected:
    raw: Any
    reason: str


def validate_entry(model: Type[M], raw: Any) -> Union[Accepted[M], Rejected]:
    """Validate one persisted record, tagging it instead of raising."""
    if not isinstance(raw, dict):
        return Rejected(raw, f"expected an object, got {type(raw).__name__}")
    try:
        return Accepted(model.model_validate(raw))
    except ValidationError as e:
        return Rejected(raw, "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        ))


def dump(model: BaseModel, exclude_none: bool = True) -> Dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True, exclude_none=exclude_none)
