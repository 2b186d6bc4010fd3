"""
Domain entities for the bgm.tv API.

Every entity mirrors a JSON shape published by the service. Entities are
frozen value objects: unknown wire fields are ignored, optional wire fields
read as None when absent, and enum fields reject values they do not know.
"""

from datetime import datetime
import json
from functools import lru_cache
from typing import Any, Generic, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from bgmtv.domain.enums import (
    BloodType,
    CharacterType,
    CollectionType,
    EpisodeType,
    PersonCareer,
    PersonType,
    SortType,
    SubjectType,
)
from bgmtv.domain.errors import DecodeError

T = TypeVar("T")


@lru_cache(maxsize=None)
def _adapter(type_: Any) -> TypeAdapter:
    return TypeAdapter(type_)


def _type_name(type_: Any) -> str:
    return getattr(type_, "__name__", None) or str(type_)


def decode(type_: Any, payload: Any) -> Any:
    """
    Validate a JSON payload against a model or container type.

    Validation is strict: a string never stands in for a number, nor a number
    for a boolean. Integers still map to int enums and ISO strings to
    datetimes.

    Args:
        type_: Target type, e.g. Subject, list[RelatedPerson], Paged[Episode]
        payload: Raw JSON (bytes or str), or JSON-compatible Python values

    Returns:
        Validated instance of type_

    Raises:
        DecodeError: If the payload is not JSON or does not match the shape
    """
    if isinstance(payload, (bytes, bytearray, str)):
        document = payload
    else:
        try:
            document = json.dumps(payload, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise DecodeError(f"Payload for {_type_name(type_)} is not JSON: {e}") from e

    try:
        return _adapter(type_).validate_json(document, strict=True)
    except ValidationError as e:
        errors = e.errors(include_url=False)
        if any(err["type"] == "json_invalid" for err in errors):
            raise DecodeError(
                f"Malformed JSON for {_type_name(type_)}: {errors[0]['msg']}",
                errors=errors,
            ) from e
        raise DecodeError(
            f"Response does not match {_type_name(type_)}: "
            f"{e.error_count()} validation error(s)",
            errors=errors,
        ) from e


class BgmModel(BaseModel):
    """Base for every wire model (immutable, lenient about extra fields)."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    @classmethod
    def from_wire(cls, data: Any):
        """Build an instance from wire JSON, raising DecodeError on mismatch."""
        return decode(cls, data)

    def to_wire(self) -> dict[str, Any]:
        """Dump to wire JSON using the service's field names."""
        return self.model_dump(mode="json", by_alias=True)


# === Value Objects ===


class Images(BgmModel):
    """Cover image links in several sizes."""

    large: str
    common: str
    medium: str
    small: str
    grid: str


class PersonImages(BgmModel):
    large: str
    medium: str
    small: str
    grid: str


class Avatar(BgmModel):
    large: str
    medium: str
    small: str


class InfoboxItem(BgmModel):
    """One entry of a list-valued infobox field; `k` is present for key/value pairs."""

    v: str
    k: str | None = None


class Infobox(BgmModel):
    """Free-form wiki metadata (e.g. 中文名, 别名, 作者)."""

    key: str
    value: Union[str, tuple[InfoboxItem, ...]]


class Stat(BgmModel):
    comments: int = Field(..., ge=0)
    collects: int = Field(..., ge=0)


class SubjectRatingCount(BgmModel):
    """Vote histogram; the wire keys are the scores "1" to "10"."""

    one: int = Field(..., ge=0, alias="1")
    two: int = Field(..., ge=0, alias="2")
    three: int = Field(..., ge=0, alias="3")
    four: int = Field(..., ge=0, alias="4")
    five: int = Field(..., ge=0, alias="5")
    six: int = Field(..., ge=0, alias="6")
    seven: int = Field(..., ge=0, alias="7")
    eight: int = Field(..., ge=0, alias="8")
    nine: int = Field(..., ge=0, alias="9")
    ten: int = Field(..., ge=0, alias="10")

    def as_dict(self) -> dict[int, int]:
        """Map score -> votes."""
        return {
            score: getattr(self, name)
            for score, name in enumerate(
                ("one", "two", "three", "four", "five",
                 "six", "seven", "eight", "nine", "ten"),
                start=1,
            )
        }


class SubjectRating(BgmModel):
    rank: int = Field(..., ge=0)  # 0 when unranked
    total: int = Field(..., ge=0)
    count: SubjectRatingCount
    score: float = Field(..., ge=0, le=10)


class SubjectCollection(BgmModel):
    """How many users hold the subject in each collection state."""

    wish: int = Field(..., ge=0)
    collect: int = Field(..., ge=0)
    doing: int = Field(..., ge=0)
    on_hold: int = Field(..., ge=0)
    dropped: int = Field(..., ge=0)


class SubjectTag(BgmModel):
    name: str
    count: int = Field(..., ge=0)


# === Subjects ===


class Subject(BgmModel):
    """A cataloged work (条目)."""

    id: int = Field(..., gt=0)
    type: SubjectType
    name: str
    name_cn: str
    summary: str
    series: bool  # main entry of a book series
    nsfw: bool
    locked: bool
    date: str | None = None
    platform: str
    images: Images
    image: str | None = None  # only sent by /v0/search/subjects
    infobox: tuple[Infobox, ...]
    volumes: int = Field(..., ge=0)
    eps: int = Field(..., ge=0)
    total_episodes: int | None = None
    rating: SubjectRating
    collection: SubjectCollection
    tags: tuple[SubjectTag, ...]
    meta_tags: tuple[str, ...] | None = None

    @property
    def display_name(self) -> str:
        """Localized name, falling back to the original one."""
        return self.name_cn or self.name


class SlimSubject(BgmModel):
    """Reduced subject embedded in a user's collection entry."""

    id: int = Field(..., gt=0)
    type: SubjectType
    name: str
    name_cn: str
    short_summary: str | None = None
    date: str | None = None
    images: Images | None = None
    volumes: int | None = None
    eps: int | None = None
    collection_total: int | None = None
    score: float | None = None
    rank: int | None = None
    tags: tuple[SubjectTag, ...]


class SubjectRelation(BgmModel):
    """Another subject related to a subject (sequel, adaptation, ...)."""

    id: int = Field(..., gt=0)
    type: SubjectType
    name: str
    name_cn: str
    images: Images | None = None
    relation: str


class RelatedSubject(BgmModel):
    """A subject a person or character appears in."""

    id: int = Field(..., gt=0)
    type: SubjectType
    staff: str
    name: str
    name_cn: str
    image: str | None = None


# === Episodes ===


class Episode(BgmModel):
    """An episode, chapter or track (章节)."""

    id: int = Field(..., gt=0)
    type: EpisodeType
    name: str
    name_cn: str
    sort: float  # ordering within episodes of the same type
    ep: float | None = None  # episode number within the subject, main story only
    airdate: str
    comment: int = Field(..., ge=0)
    duration: str
    desc: str
    disc: int = Field(..., ge=0)
    duration_seconds: int | None = None


class EpisodeDetail(Episode):
    subject_id: int = Field(..., gt=0)


# === Persons & Characters ===


class Person(BgmModel):
    """A real person, company or group credited on subjects."""

    id: int = Field(..., gt=0)
    name: str
    type: PersonType
    career: tuple[PersonCareer, ...]
    images: PersonImages | None = None
    short_summary: str
    locked: bool


class PersonDetail(BgmModel):
    id: int = Field(..., gt=0)
    name: str
    type: PersonType
    career: tuple[PersonCareer, ...]
    images: PersonImages | None = None
    summary: str
    locked: bool
    last_modified: str
    infobox: tuple[Infobox, ...] | None = None
    gender: str | None = None
    blood_type: BloodType | None = None
    birth_year: int | None = None
    birth_mon: int | None = None
    birth_day: int | None = None
    stat: Stat


class CharacterDetail(BgmModel):
    id: int = Field(..., gt=0)
    name: str
    type: CharacterType
    images: PersonImages | None = None
    summary: str
    locked: bool
    infobox: tuple[Infobox, ...] | None = None
    gender: str | None = None
    blood_type: BloodType | None = None
    birth_year: int | None = None
    birth_mon: int | None = None
    birth_day: int | None = None
    stat: Stat
    nsfw: bool | None = None


class RelatedPerson(BgmModel):
    """A person credited on a subject."""

    id: int = Field(..., gt=0)
    name: str
    type: PersonType
    career: tuple[PersonCareer, ...]
    images: PersonImages | None = None
    relation: str
    eps: str


class RelatedCharacter(BgmModel):
    """A character appearing in a subject, with the voicing actors."""

    id: int = Field(..., gt=0)
    name: str
    type: CharacterType
    images: PersonImages | None = None
    relation: str
    actors: tuple[Person, ...]


class CharacterPerson(BgmModel):
    """A person who played a character, per subject."""

    id: int = Field(..., gt=0)
    name: str
    type: CharacterType
    images: PersonImages | None = None
    subject_id: int = Field(..., gt=0)
    subject_type: SubjectType
    subject_name: str
    subject_name_cn: str
    staff: str | None = None


class PersonCharacter(BgmModel):
    """A character a person played, per subject."""

    id: int = Field(..., gt=0)
    name: str
    type: CharacterType
    images: PersonImages | None = None
    subject_id: int = Field(..., gt=0)
    subject_type: SubjectType
    subject_name: str
    subject_name_cn: str
    staff: str | None = None


# === Users & Collections ===


class User(BgmModel):
    id: int = Field(..., gt=0)
    username: str
    nickname: str
    sign: str
    avatar: Avatar | None = None
    user_group: int | None = None


class UserSubjectCollection(BgmModel):
    """A user's tracked relationship to a subject."""

    subject_id: int = Field(..., gt=0)
    subject_type: SubjectType
    rate: int = Field(..., ge=0, le=10)
    type: CollectionType
    comment: str | None = None
    tags: tuple[str, ...]
    ep_status: int = Field(..., ge=0)
    vol_status: int = Field(..., ge=0)
    updated_at: datetime
    private: bool
    subject: SlimSubject | None = None


class UserSubjectCollectionModifyPayload(BgmModel):
    """
    Body for creating or updating a collection entry.

    Fields left as None are not sent, so the service keeps their current
    value.
    """

    type: CollectionType | None = None
    rate: int | None = Field(None, ge=0, le=10)
    ep_status: int | None = Field(None, ge=0)
    vol_status: int | None = Field(None, ge=0)
    comment: str | None = None
    private: bool | None = None
    tags: tuple[str, ...] | None = None

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# === Search ===


class SearchSubjectsFilter(BgmModel):
    """
    Filter for subject search. Every list condition is AND-ed.

    air_date, rating and rank take comparison strings such as ">=2020-07-01",
    ">=6" or "<=18". nsfw only has effect for authorized requests.
    """

    type: tuple[SubjectType, ...] = ()
    tag: tuple[str, ...] = ()
    air_date: tuple[str, ...] = ()
    rating: tuple[str, ...] = ()
    rank: tuple[str, ...] = ()
    nsfw: bool | None = None

    def to_wire(self) -> dict[str, Any]:
        data = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        return {key: value for key, value in data.items() if value != []}


class SearchSubjectsBody(BgmModel):
    keyword: str = Field(..., min_length=1)
    sort: SortType = SortType.MATCH
    filter: SearchSubjectsFilter = Field(default_factory=SearchSubjectsFilter)

    def to_wire(self) -> dict[str, Any]:
        return {
            "keyword": self.keyword,
            "sort": self.sort.value,
            "filter": self.filter.to_wire(),
        }


# === Pagination ===


class Paged(BgmModel, Generic[T]):
    """One page of a paginated listing; the caller drives offset/limit."""

    total: int = Field(..., ge=0)
    limit: int = Field(..., ge=0)
    offset: int = Field(..., ge=0)
    data: tuple[T, ...]

    @property
    def has_more(self) -> bool:
        return self.offset + len(self.data) < self.total

    @property
    def next_offset(self) -> int | None:
        """Offset of the following page, or None on the last page."""
        return self.offset + len(self.data) if self.has_more else None
