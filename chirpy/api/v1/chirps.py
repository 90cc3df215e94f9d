"""Chirp creation, listing, lookup and deletion."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from chirpy.api.v1.auth import AuthorizationHeader, get_auth_guard
from chirpy.core.database import ChirpOrder, ChirpyDB, get_db
from chirpy.models import Chirp
from chirpy.schemas.chirps import ChirpCreateRequest, ChirpResponse
from chirpy.services.auth_guard import AuthGuard

router = APIRouter()


def _to_response(chirp: Chirp) -> ChirpResponse:
    return ChirpResponse(id=chirp.id, body=chirp.body, author_id=chirp.author_id)


@router.post("", response_model=ChirpResponse, status_code=status.HTTP_201_CREATED)
def create_chirp(
    body: ChirpCreateRequest,
    guard: Annotated[AuthGuard, Depends(get_auth_guard)],
    authorization: AuthorizationHeader = None,
) -> ChirpResponse:
    return _to_response(guard.create_chirp(authorization, body.body))


@router.get("", response_model=list[ChirpResponse])
def list_chirps(
    db: Annotated[ChirpyDB, Depends(get_db)],
    author_id: Annotated[int | None, Query()] = None,
    sort: Annotated[ChirpOrder, Query()] = "asc",
) -> list[ChirpResponse]:
    """All chirps, or one author's chirps, sorted by id (sort=asc|desc)."""
    if author_id is None:
        chirps = db.list_chirps(sort)
    else:
        chirps = db.list_chirps_by_author(author_id, sort)
    return [_to_response(c) for c in chirps]


@router.get("/{chirp_id}", response_model=ChirpResponse)
def get_chirp(
    chirp_id: int,
    db: Annotated[ChirpyDB, Depends(get_db)],
) -> ChirpResponse:
    return _to_response(db.get_chirp(chirp_id))


@router.delete("/{chirp_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_chirp(
    chirp_id: int,
    guard: Annotated[AuthGuard, Depends(get_auth_guard)],
    authorization: AuthorizationHeader = None,
) -> Response:
    """Delete a chirp; only its author may do so."""
    guard.delete_chirp(authorization, chirp_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
