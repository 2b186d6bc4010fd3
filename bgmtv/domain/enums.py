"""Closed value sets used by the bgm.tv API."""

from enum import Enum, IntEnum


class SubjectType(IntEnum):
    """Subject type (条目类型)."""

    BOOK = 1
    ANIME = 2
    MUSIC = 3
    GAME = 4
    REAL = 6


class SubjectBookCategory(IntEnum):
    OTHER = 0
    COMIC = 1001
    NOVEL = 1002
    ILLUSTRATION = 1003


class SubjectAnimeCategory(IntEnum):
    TV = 1
    OVA = 2
    MOVIE = 3
    WEB = 4


class SubjectGameCategory(IntEnum):
    OTHER = 0
    GAMES = 4001
    SOFTWARE = 4002
    DLC = 4003
    TABLETOP = 4005


class SubjectRealCategory(IntEnum):
    OTHER = 0
    JP = 1
    EN = 2
    CN = 3
    TV = 6001
    MOVIE = 6002
    LIVE = 6003
    SHOW = 6004


# Which category set is valid for which subject type; music has none.
SUBJECT_CATEGORIES: dict[SubjectType, type[IntEnum]] = {
    SubjectType.BOOK: SubjectBookCategory,
    SubjectType.ANIME: SubjectAnimeCategory,
    SubjectType.GAME: SubjectGameCategory,
    SubjectType.REAL: SubjectRealCategory,
}


class EpisodeType(IntEnum):
    """Episode type (章节类型)."""

    MAIN_STORY = 0
    SP = 1
    OP = 2
    ED = 3
    PV = 4
    MAD = 5
    OTHER = 6


class CharacterType(IntEnum):
    CHARACTER = 1
    MECHANIC = 2
    SHIP = 3
    ORGANIZATION = 4


class PersonType(IntEnum):
    INDIVIDUAL = 1
    CORPORATION = 2
    ASSOCIATION = 3


class PersonCareer(str, Enum):
    PRODUCER = "producer"
    MANGAKA = "mangaka"
    ARTIST = "artist"
    SEIYU = "seiyu"
    WRITER = "writer"
    ILLUSTRATOR = "illustrator"
    ACTOR = "actor"


class BloodType(IntEnum):
    A = 1
    B = 2
    AB = 3
    O = 4


class CollectionType(IntEnum):
    """A user's relationship to a subject (收藏类型)."""

    WISH = 1
    DONE = 2
    DOING = 3
    ON_HOLD = 4
    DROPPED = 5


class SortType(str, Enum):
    """Ordering for subject search results."""

    MATCH = "match"  # meilisearch relevance
    HEAT = "heat"
    RANK = "rank"
    SCORE = "score"


class ImageType(str, Enum):
    SMALL = "small"
    COMMON = "common"
    MEDIUM = "medium"
    LARGE = "large"
    GRID = "grid"
