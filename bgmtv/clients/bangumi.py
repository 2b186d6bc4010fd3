"""
Bangumi API client for the bgm.tv v0 API.

Official API: https://bangumi.github.io/api/
Provides methods to:
- Search, browse and fetch subjects and their staff, cast and relations
- List and fetch episodes
- Fetch characters and persons
- Read users and their collections, and update the caller's collection
"""

from enum import IntEnum
from typing import Any, List, Optional, Union
import urllib.parse

import aiohttp
from pydantic import ValidationError

from bgmtv.clients.base import BaseHTTPClient
from bgmtv.config import ClientConfig, Settings, get_settings
from bgmtv.config.settings import DEFAULT_BASE_URL
from bgmtv.domain.entities import (
    CharacterDetail,
    CharacterPerson,
    Episode,
    EpisodeDetail,
    Paged,
    PersonCharacter,
    PersonDetail,
    RelatedCharacter,
    RelatedPerson,
    RelatedSubject,
    SearchSubjectsBody,
    SearchSubjectsFilter,
    Subject,
    SubjectRelation,
    User,
    UserSubjectCollection,
    UserSubjectCollectionModifyPayload,
    decode,
)
from bgmtv.domain.enums import (
    SUBJECT_CATEGORIES,
    CollectionType,
    EpisodeType,
    ImageType,
    SortType,
    SubjectType,
)
from bgmtv.domain.errors import ConfigError, DecodeError
from bgmtv.utils.logger import get_logger

logger = get_logger(__name__)

BROWSE_SORTS = ("date", "rank")


def _require_positive(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"{name} must be positive")


def _require_non_negative(name: str, value: Any) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{name} must be non-negative")


def _require_username(username: str) -> str:
    if not username or not username.strip():
        raise ValueError("username cannot be empty")
    return urllib.parse.quote(username.strip(), safe="")


def _describe_validation_error(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'config'}: {err['msg']}"
        for err in error.errors(include_url=False)
    )


class ClientBuilder:
    """
    Staged configuration for BangumiClient.

    Setters return the builder so calls can be chained; build() validates
    everything at once and never touches the network.

    Example:
        >>> client = (
        ...     BangumiClient.builder()
        ...     .user_agent("me/my-app/1.0 (https://example.com)")
        ...     .auth_token("xxxx")
        ...     .build()
        ... )
    """

    def __init__(self):
        self._base_url: str = DEFAULT_BASE_URL
        self._user_agent: Optional[str] = None
        self._token: Optional[str] = None
        self._timeout: Optional[float] = None
        self._session: Optional[aiohttp.ClientSession] = None

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ClientBuilder":
        """Seed a builder from BGM_* environment settings."""
        settings = settings or get_settings()
        builder = cls().base_url(settings.base_url)
        if settings.user_agent:
            builder.user_agent(settings.user_agent)
        if settings.token:
            builder.auth_token(settings.token)
        if settings.timeout_seconds is not None:
            builder.timeout(settings.timeout_seconds)
        return builder

    def base_url(self, base_url: str) -> "ClientBuilder":
        """Override the API host (default: https://api.bgm.tv)."""
        self._base_url = base_url
        return self

    def user_agent(self, user_agent: str) -> "ClientBuilder":
        """Set the User-Agent, e.g. "<developer>/<app>/<version> (<url>)"."""
        self._user_agent = user_agent
        return self

    def auth_token(self, token: Optional[str]) -> "ClientBuilder":
        """Set the bearer token sent as the Authorization header."""
        self._token = token
        return self

    token = auth_token

    def timeout(self, seconds: Optional[float]) -> "ClientBuilder":
        """Set a total per-request timeout in seconds."""
        self._timeout = seconds
        return self

    def session(self, session: aiohttp.ClientSession) -> "ClientBuilder":
        """Borrow an existing aiohttp session instead of opening one."""
        self._session = session
        return self

    def build(self) -> "BangumiClient":
        """
        Validate the options and create the client.

        Raises:
            ConfigError: If the user agent is missing or any option is invalid
        """
        if self._user_agent is None or not str(self._user_agent).strip():
            raise ConfigError(
                "user_agent is required by bgm.tv; "
                "use the form <developer>/<app>/<version>"
            )

        if self._session is not None and not isinstance(self._session, aiohttp.ClientSession):
            raise ConfigError("session must be an aiohttp.ClientSession")

        try:
            config = ClientConfig(
                base_url=self._base_url,
                user_agent=self._user_agent,
                token=self._token,
                timeout=self._timeout,
            )
        except ValidationError as e:
            raise ConfigError(
                f"Invalid client configuration: {_describe_validation_error(e)}"
            ) from e

        return BangumiClient(config, session=self._session)


class BangumiClient(BaseHTTPClient):
    """
    Client for the bgm.tv API (番组计划 API).

    Holds an immutable ClientConfig and a reusable connection pool. Every
    method sends exactly one request; paginated listings return one page and
    leave offset/limit to the caller.

    Use as an async context manager, or call close() when done.
    """

    # Subject Types
    TYPE_BOOK = SubjectType.BOOK
    TYPE_ANIME = SubjectType.ANIME
    TYPE_MUSIC = SubjectType.MUSIC
    TYPE_GAME = SubjectType.GAME
    TYPE_REAL = SubjectType.REAL

    def __init__(
        self,
        config: ClientConfig,
        session: Optional[aiohttp.ClientSession] = None
    ):
        """
        Initialize the client from a validated configuration.

        Prefer BangumiClient.builder(), which validates before constructing.

        Args:
            config: Validated client configuration
            session: Existing aiohttp session to borrow
        """
        headers = {
            "User-Agent": config.user_agent,
            "Accept": "application/json",
        }
        if config.token:
            headers["Authorization"] = f"Bearer {config.token}"

        super().__init__(
            base_url=config.base_url,
            headers=headers,
            timeout=config.timeout,
            session=session
        )
        self._config = config

        logger.debug(
            "Bangumi client initialized",
            base_url=config.base_url,
            authorized=config.token is not None,
            timeout=config.timeout,
            borrowed_session=session is not None
        )

    @classmethod
    def builder(cls) -> ClientBuilder:
        return ClientBuilder()

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def user_agent(self) -> str:
        return self._config.user_agent

    @property
    def token(self) -> Optional[str]:
        return self._config.token

    def __repr__(self) -> str:
        return f"BangumiClient({self._config!r})"

    # === Subjects ===

    async def get_subject(self, subject_id: int) -> Subject:
        """
        Get detailed information about a subject by ID.

        Args:
            subject_id: Bangumi subject ID

        Returns:
            Subject

        Raises:
            ValueError: On invalid subject_id
            ApiError: If the service rejects the request (404 when missing)
            TransportError: On network failure
            DecodeError: If the body does not match Subject

        Example:
            >>> subject = await client.get_subject(3559)
            >>> subject.name
            'とある魔術の禁書目録'
        """
        _require_positive("subject_id", subject_id)

        response = await self.get(f"/v0/subjects/{subject_id}")
        subject = decode(Subject, response)

        logger.info(
            "Bangumi subject fetched",
            subject_id=subject_id,
            name=subject.name
        )
        return subject

    async def search_subjects(
        self,
        keyword: str,
        sort: Union[SortType, str] = SortType.MATCH,
        filter: Optional[SearchSubjectsFilter] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None
    ) -> Paged[Subject]:
        """
        Search subjects by keyword.

        The keyword, sort and filter go in the JSON body; limit and offset go
        in the query string.

        Args:
            keyword: Search keyword
            sort: Result ordering (match, heat, rank, score)
            filter: Optional type/tag/date/rating/rank/nsfw conditions
            limit: Page size
            offset: Page start

        Returns:
            One page of matching subjects

        Raises:
            ValueError: On empty keyword or negative pagination
        """
        if not keyword or not keyword.strip():
            raise ValueError("Keyword cannot be empty")
        _require_non_negative("limit", limit)
        _require_non_negative("offset", offset)

        body = SearchSubjectsBody(
            keyword=keyword.strip(),
            sort=SortType(sort),
            filter=filter or SearchSubjectsFilter(),
        )

        response = await self.post(
            "/v0/search/subjects",
            params={"limit": limit, "offset": offset},
            json_body=body.to_wire()
        )
        page = decode(Paged[Subject], response)

        logger.info(
            "Bangumi search completed",
            keyword=body.keyword,
            total=page.total,
            results_count=len(page.data)
        )
        return page

    async def get_subjects(
        self,
        subject_type: Union[SubjectType, int],
        cat: Optional[int] = None,
        series: Optional[bool] = None,
        platform: Optional[str] = None,
        sort: Optional[str] = None,
        year: Optional[int] = None,
        month: Optional[int] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None
    ) -> Paged[Subject]:
        """
        Browse subjects of one type.

        Args:
            subject_type: Subject type to browse
            cat: Category within the type (see SUBJECT_CATEGORIES)
            series: Books only; restrict to series main entries
            platform: Games only; e.g. "Web", "PC"
            sort: "date" or "rank"
            year: Air/release year
            month: Air/release month (1-12)
            limit: Page size
            offset: Page start

        Returns:
            One page of subjects
        """
        subject_type = SubjectType(subject_type)

        if cat is not None:
            categories = SUBJECT_CATEGORIES.get(subject_type)
            if categories is None:
                raise ValueError(f"{subject_type.name} subjects have no categories")
            if isinstance(cat, IntEnum) and not isinstance(cat, categories):
                raise ValueError(f"{cat!r} is not a {subject_type.name} category")
            try:
                cat = categories(cat)
            except ValueError:
                raise ValueError(
                    f"{cat!r} is not a {subject_type.name} category"
                ) from None

        if sort is not None and sort not in BROWSE_SORTS:
            raise ValueError(f"sort must be one of {BROWSE_SORTS}")
        if month is not None and not 1 <= month <= 12:
            raise ValueError("month must be between 1 and 12")
        _require_non_negative("year", year)
        _require_non_negative("limit", limit)
        _require_non_negative("offset", offset)

        response = await self.get(
            "/v0/subjects",
            params={
                "type": subject_type,
                "cat": cat,
                "series": series,
                "platform": platform,
                "sort": sort,
                "year": year,
                "month": month,
                "limit": limit,
                "offset": offset,
            }
        )
        return decode(Paged[Subject], response)

    async def get_subject_image(
        self,
        subject_id: int,
        image_type: Union[ImageType, str] = ImageType.LARGE
    ) -> str:
        """
        Resolve the cover image URL of a subject.

        The service answers with a redirect; the target URL is returned
        without being fetched.
        """
        _require_positive("subject_id", subject_id)
        image_type = ImageType(image_type)

        path = f"/v0/subjects/{subject_id}/image"
        raw = await self.send(
            "GET", path, params={"type": image_type}, allow_redirects=False
        )

        location = raw.headers.get("Location")
        if not location:
            raise DecodeError(
                f"Expected a redirect to the image from GET {path}, "
                f"got HTTP {raw.status} without a Location header"
            )
        return location

    async def get_subject_persons(self, subject_id: int) -> List[RelatedPerson]:
        """Staff credited on a subject."""
        _require_positive("subject_id", subject_id)
        response = await self.get(f"/v0/subjects/{subject_id}/persons")
        return decode(List[RelatedPerson], response)

    async def get_subject_characters(self, subject_id: int) -> List[RelatedCharacter]:
        """Characters in a subject, with their actors."""
        _require_positive("subject_id", subject_id)
        response = await self.get(f"/v0/subjects/{subject_id}/characters")
        return decode(List[RelatedCharacter], response)

    async def get_subject_relations(self, subject_id: int) -> List[SubjectRelation]:
        """Subjects related to a subject (sequels, adaptations, ...)."""
        _require_positive("subject_id", subject_id)
        response = await self.get(f"/v0/subjects/{subject_id}/subjects")
        return decode(List[SubjectRelation], response)

    # === Episodes ===

    async def get_episodes(
        self,
        subject_id: int,
        episode_type: Optional[Union[EpisodeType, int]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None
    ) -> Paged[Episode]:
        """
        List one page of a subject's episodes.

        Args:
            subject_id: Bangumi subject ID
            episode_type: Only return episodes of this type
            limit: Page size
            offset: Page start

        Returns:
            One page of episodes
        """
        _require_positive("subject_id", subject_id)
        _require_non_negative("limit", limit)
        _require_non_negative("offset", offset)
        if episode_type is not None:
            episode_type = EpisodeType(episode_type)

        response = await self.get(
            "/v0/episodes",
            params={
                "subject_id": subject_id,
                "type": episode_type,
                "limit": limit,
                "offset": offset,
            }
        )
        page = decode(Paged[Episode], response)

        logger.info(
            "Bangumi episodes fetched",
            subject_id=subject_id,
            total=page.total,
            page_size=len(page.data)
        )
        return page

    async def get_episode(self, episode_id: int) -> EpisodeDetail:
        _require_positive("episode_id", episode_id)
        response = await self.get(f"/v0/episodes/{episode_id}")
        return decode(EpisodeDetail, response)

    # === Characters ===

    async def get_character(self, character_id: int) -> CharacterDetail:
        _require_positive("character_id", character_id)
        response = await self.get(f"/v0/characters/{character_id}")
        return decode(CharacterDetail, response)

    async def get_character_subjects(self, character_id: int) -> List[RelatedSubject]:
        _require_positive("character_id", character_id)
        response = await self.get(f"/v0/characters/{character_id}/subjects")
        return decode(List[RelatedSubject], response)

    async def get_character_persons(self, character_id: int) -> List[CharacterPerson]:
        """Persons who played a character, per subject."""
        _require_positive("character_id", character_id)
        response = await self.get(f"/v0/characters/{character_id}/persons")
        return decode(List[CharacterPerson], response)

    # === Persons ===

    async def get_person(self, person_id: int) -> PersonDetail:
        _require_positive("person_id", person_id)
        response = await self.get(f"/v0/persons/{person_id}")
        return decode(PersonDetail, response)

    async def get_person_subjects(self, person_id: int) -> List[RelatedSubject]:
        _require_positive("person_id", person_id)
        response = await self.get(f"/v0/persons/{person_id}/subjects")
        return decode(List[RelatedSubject], response)

    async def get_person_characters(self, person_id: int) -> List[PersonCharacter]:
        _require_positive("person_id", person_id)
        response = await self.get(f"/v0/persons/{person_id}/characters")
        return decode(List[PersonCharacter], response)

    # === Users & Collections ===

    async def get_me(self) -> User:
        """The user owning the configured token."""
        response = await self.get("/v0/me")
        return decode(User, response)

    async def get_user(self, username: str) -> User:
        response = await self.get(f"/v0/users/{_require_username(username)}")
        return decode(User, response)

    async def get_collection(
        self,
        username: str,
        subject_type: Optional[Union[SubjectType, int]] = None,
        collection_type: Optional[Union[CollectionType, int]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None
    ) -> Paged[UserSubjectCollection]:
        """
        List one page of a user's collection.

        Private entries are only returned to their owner's token.

        Args:
            username: User name (or numeric UID as a string)
            subject_type: Only this subject type
            collection_type: Only this collection state (wish, done, ...)
            limit: Page size
            offset: Page start
        """
        path = f"/v0/users/{_require_username(username)}/collections"
        _require_non_negative("limit", limit)
        _require_non_negative("offset", offset)
        if subject_type is not None:
            subject_type = SubjectType(subject_type)
        if collection_type is not None:
            collection_type = CollectionType(collection_type)

        response = await self.get(
            path,
            params={
                "subject_type": subject_type,
                "type": collection_type,
                "limit": limit,
                "offset": offset,
            }
        )
        page = decode(Paged[UserSubjectCollection], response)

        logger.info(
            "Bangumi collection fetched",
            username=username,
            total=page.total,
            page_size=len(page.data)
        )
        return page

    async def get_user_collection(
        self,
        username: str,
        subject_id: int
    ) -> UserSubjectCollection:
        """A user's collection entry for one subject (404 when not collected)."""
        path = f"/v0/users/{_require_username(username)}/collections"
        _require_positive("subject_id", subject_id)
        response = await self.get(f"{path}/{subject_id}")
        return decode(UserSubjectCollection, response)

    async def update_collection(
        self,
        subject_id: int,
        payload: UserSubjectCollectionModifyPayload
    ) -> None:
        """
        Create or update the token owner's collection entry for a subject.

        Fields left as None in the payload are not sent. Requires a token.
        """
        _require_positive("subject_id", subject_id)

        await self.post(
            f"/v0/users/-/collections/{subject_id}",
            json_body=payload.to_wire()
        )

        logger.info(
            "Bangumi collection updated",
            subject_id=subject_id,
            fields=sorted(payload.to_wire())
        )

    async def modify_collection(
        self,
        subject_id: int,
        payload: UserSubjectCollectionModifyPayload
    ) -> None:
        """
        Modify an existing collection entry of the token owner.

        Unlike update_collection, the service answers 404 when the subject
        is not collected yet.
        """
        _require_positive("subject_id", subject_id)

        await self.patch(
            f"/v0/users/-/collections/{subject_id}",
            json_body=payload.to_wire()
        )

        logger.info(
            "Bangumi collection modified",
            subject_id=subject_id,
            fields=sorted(payload.to_wire())
        )
