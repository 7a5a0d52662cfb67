from enum import Enum
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ══════════════════════════════════════════════════════════════════════════════
# Dataset records
#
# Field names are snake_case in Python and camelCase on the wire (the browser
# client and the stored JSON both use camelCase).  Unknown keys are kept so a
# newer client never loses data by round-tripping through this server.
#
# Validation is lenient: the stored JSON was written by browser clients with
# no schema, so numbers in text fields become strings and nulls fall back to
# the field default instead of rejecting the whole record.
# ══════════════════════════════════════════════════════════════════════════════

class Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow", coerce_numbers_to_str=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data):
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

    def to_json(self) -> dict:
        """Wire form: camelCase keys, enums as values, unset optionals omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class FileType(str, Enum):
    IMAGE = "image/jpeg"
    PDF   = "application/pdf"


class User(Record):
    id: str
    email: str


class Project(Record):
    id: str
    title: str = ""
    description: str = ""
    file_url: str = Field("", alias="fileUrl")       # weak reference into /uploads/
    file_name: str = Field("", alias="fileName")
    # Known MIME types map onto FileType; anything else (image/png, ...) is
    # kept verbatim rather than rejected
    file_type: Union[FileType, str] = Field(FileType.IMAGE, alias="fileType")

    @field_validator("file_type", mode="before")
    @classmethod
    def _known_file_type(cls, value):
        try:
            return FileType(value)
        except ValueError:
            return value


class Award(Record):
    id: str
    title: str = ""
    issuer: str = ""
    date: str = ""
    image_url: Optional[str] = Field(None, alias="imageUrl")


class Experience(Record):
    id: str
    role: str = ""
    company: str = ""
    period: str = ""
    description: str = ""


class Education(Record):
    id: str
    degree: str = ""
    school: str = ""
    year: str = ""


class Profile(Record):
    id: str
    user_id: str = Field(..., alias="userId")         # owner; not checked against users
    name: str = ""
    headline: str = ""
    contact_info: str = Field("", alias="contactInfo")
    avatar_url: str = Field("", alias="avatarUrl")
    skills: List[str] = []
    projects: List[Project] = []
    awards: List[Award] = []
    experience: List[Experience] = []
    education: List[Education] = []


class Dataset(BaseModel):
    """The unit of persistence: every user and every profile, always together."""
    users: List[User] = []
    profiles: List[Profile] = []

    def to_json(self) -> dict:
        return {
            "users":    [u.to_json() for u in self.users],
            "profiles": [p.to_json() for p in self.profiles],
        }


# ══════════════════════════════════════════════════════════════════════════════
# Operation results
# ══════════════════════════════════════════════════════════════════════════════

class WriteResult(BaseModel):
    """Outcome of DatasetStore.write(); mode says where the data actually lives."""
    success: bool
    mode: Literal["memory", "sheets"]
    error: Optional[str] = None

    def to_json(self) -> dict:
        return self.model_dump(exclude_none=True)


class StoredFile(BaseModel):
    url: str             # "/uploads/<storage_name>"
    filename: str        # the caller's original filename
    storage_name: str
    size: int
