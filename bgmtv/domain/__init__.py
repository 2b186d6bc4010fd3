"""Typed mirrors of bgm.tv resources and the client's error taxonomy."""

from bgmtv.domain.entities import (
    Avatar,
    BgmModel,
    CharacterDetail,
    CharacterPerson,
    Episode,
    EpisodeDetail,
    Images,
    Infobox,
    InfoboxItem,
    Paged,
    Person,
    PersonCharacter,
    PersonDetail,
    PersonImages,
    RelatedCharacter,
    RelatedPerson,
    RelatedSubject,
    SearchSubjectsBody,
    SearchSubjectsFilter,
    SlimSubject,
    Stat,
    Subject,
    SubjectCollection,
    SubjectRating,
    SubjectRatingCount,
    SubjectRelation,
    SubjectTag,
    User,
    UserSubjectCollection,
    UserSubjectCollectionModifyPayload,
    decode,
)
from bgmtv.domain.enums import (
    SUBJECT_CATEGORIES,
    BloodType,
    CharacterType,
    CollectionType,
    EpisodeType,
    ImageType,
    PersonCareer,
    PersonType,
    SortType,
    SubjectAnimeCategory,
    SubjectBookCategory,
    SubjectGameCategory,
    SubjectRealCategory,
    SubjectType,
)
from bgmtv.domain.errors import (
    ApiError,
    BangumiError,
    ConfigError,
    DecodeError,
    TransportError,
)

__all__ = [
    "ApiError",
    "Avatar",
    "BangumiError",
    "BgmModel",
    "BloodType",
    "CharacterDetail",
    "CharacterPerson",
    "CharacterType",
    "CollectionType",
    "ConfigError",
    "DecodeError",
    "Episode",
    "EpisodeDetail",
    "EpisodeType",
    "ImageType",
    "Images",
    "Infobox",
    "InfoboxItem",
    "Paged",
    "Person",
    "PersonCareer",
    "PersonCharacter",
    "PersonDetail",
    "PersonImages",
    "PersonType",
    "RelatedCharacter",
    "RelatedPerson",
    "RelatedSubject",
    "SUBJECT_CATEGORIES",
    "SearchSubjectsBody",
    "SearchSubjectsFilter",
    "SlimSubject",
    "SortType",
    "Stat",
    "Subject",
    "SubjectAnimeCategory",
    "SubjectBookCategory",
    "SubjectCollection",
    "SubjectGameCategory",
    "SubjectRating",
    "SubjectRatingCount",
    "SubjectRealCategory",
    "SubjectRelation",
    "SubjectTag",
    "SubjectType",
    "TransportError",
    "User",
    "UserSubjectCollection",
    "UserSubjectCollectionModifyPayload",
    "decode",
]
