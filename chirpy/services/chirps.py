from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from chirpy.core.errors import BadRequest, Internal, InvalidChirp, NotFound, StorageError
from chirpy.db.store import Store
from chirpy.models.chirp import Chirp
from chirpy.services.sessions import SessionOrchestrator

MAX_CHIRP_LENGTH = 140
PROFANE_WORDS = frozenset({"kerfuffle", "sharbert", "fornax"})
MASK = "****"


def clean_body(body: str, bad_words: frozenset[str] = PROFANE_WORDS) -> str:
    words = body.split(" ")
    return " ".join(MASK if word.lower() in bad_words else word for word in words)


def validate_chirp(body: str) -> str:
    if len(body) > MAX_CHIRP_LENGTH:
        raise InvalidChirp("Chirp is too long")
    return clean_body(body)


def create_chirp(store: Store, author_id: UUID, body: str) -> Chirp:
    cleaned = validate_chirp(body)
    try:
        return store.create_chirp(cleaned, author_id)
    except StorageError as e:
        raise Internal("Couldn't store chirp") from e


def list_chirps(store: Store, author_id: UUID | None = None, sort: str | None = None) -> Sequence[Chirp]:
    sort = (sort or "asc").lower()
    if sort not in ("asc", "desc"):
        raise BadRequest("sort must be 'asc' or 'desc'")
    try:
        return store.list_chirps(author_id=author_id, descending=sort == "desc")
    except StorageError as e:
        raise Internal("Couldn't get chirps") from e


def get_chirp(store: Store, chirp_id: UUID) -> Chirp:
    try:
        chirp = store.get_chirp(chirp_id)
    except StorageError as e:
        raise Internal("Couldn't get chirp") from e
    if chirp is None:
        raise NotFound("Chirp not found")
    return chirp


def delete_chirp(store: Store, sessions: SessionOrchestrator, subject_id: UUID, chirp_id: UUID) -> None:
    try:
        owner_id = store.get_chirp_owner(chirp_id)
    except StorageError as e:
        raise Internal("Couldn't get chirp") from e
    if owner_id is None:
        raise NotFound("Chirp not found")

    sessions.authorize_ownership(subject_id, owner_id)
    try:
        store.delete_chirp(chirp_id)
    except StorageError as e:
        raise Internal("Couldn't delete chirp") from e
