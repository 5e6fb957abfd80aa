"""Song registry routes: registration, ownership transfer, updates and lookups."""

from __future__ import annotations

from typing import Any, Callable

from flask import Blueprint, current_app, jsonify, request
from flask_login import login_required

from songregistry.database.db_manager import db
from songregistry.domain.registry import InvalidInputError, RegistryError, SongRegistry
from songregistry.observability.metrics import record_registry_operation
from songregistry.support.identity import current_principal


songs_bp = Blueprint('songs_bp', __name__, url_prefix='/api/songs')


def _json_payload() -> dict:
    payload = request.get_json(silent=True)
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise InvalidInputError('Request body must be a JSON object', field='payload')
    return payload


def _execute(operation: str, call: Callable[[SongRegistry], Any], *, status: int = 200):
    """Run one registry call under the host lock and render the result.

    Every outcome is counted, including malformed bodies and unexpected errors.
    """
    lock = current_app.extensions['registry_lock']
    with lock:
        try:
            result = call(SongRegistry(db.session))
        except RegistryError as exc:
            record_registry_operation(operation, exc.code.value)
            raise
        except Exception:
            record_registry_operation(operation, 'error')
            raise
    record_registry_operation(operation, 'ok')
    return jsonify({'ok': True, 'result': result}), status


@songs_bp.errorhandler(RegistryError)
def _registry_error(exc: RegistryError):
    return jsonify(exc.to_dict()), exc.http_status


@songs_bp.route('', methods=['POST'])
@login_required
def create_song():
    caller = current_principal()

    def register(registry: SongRegistry) -> int:
        payload = _json_payload()
        return registry.create(
            caller,
            title=payload.get('title'),
            artist=payload.get('artist'),
            duration=payload.get('duration'),
            genre=payload.get('genre'),
            tags=payload.get('tags'),
        )

    return _execute('create', register, status=201)


@songs_bp.route('/<int(signed=True):song_id>/transfer', methods=['POST'])
@login_required
def transfer_song(song_id: int):
    caller = current_principal()
    return _execute(
        'transfer_ownership',
        lambda registry: registry.transfer_ownership(caller, song_id, _json_payload().get('new_owner')),
    )


@songs_bp.route('/<int(signed=True):song_id>', methods=['PUT'])
@login_required
def update_song(song_id: int):
    caller = current_principal()

    def update(registry: SongRegistry) -> bool:
        payload = _json_payload()
        return registry.update_details(
            caller,
            song_id,
            title=payload.get('title'),
            duration=payload.get('duration'),
            genre=payload.get('genre'),
            tags=payload.get('tags'),
        )

    return _execute('update_details', update)


@songs_bp.route('/count', methods=['GET'])
def total_count():
    return _execute('get_total_count', lambda registry: registry.get_total_count())


@songs_bp.route('/<int(signed=True):song_id>', methods=['GET'])
def song_details(song_id: int):
    return _execute(
        'get_details',
        lambda registry: registry.get_details(song_id).model_dump(mode='json'),
    )


@songs_bp.route('/<int(signed=True):song_id>/owner', methods=['GET'])
def song_owner(song_id: int):
    return _execute('get_owner', lambda registry: registry.get_owner(song_id))


@songs_bp.route('/<int(signed=True):song_id>/genre', methods=['GET'])
def song_genre(song_id: int):
    return _execute('get_genre', lambda registry: registry.get_genre(song_id))


@songs_bp.route('/<int(signed=True):song_id>/tags', methods=['GET'])
def song_tags(song_id: int):
    return _execute('get_tags', lambda registry: registry.get_tags(song_id))


@songs_bp.route('/<int(signed=True):song_id>/artist', methods=['GET'])
def song_artist(song_id: int):
    return _execute('get_artist', lambda registry: registry.get_artist(song_id))


@songs_bp.route('/<int(signed=True):song_id>/permissions/<path:user>', methods=['GET'])
def song_permission(song_id: int, user: str):
    return _execute(
        'get_user_permission',
        lambda registry: registry.get_user_permission(song_id, user),
    )


__all__ = ['songs_bp']
