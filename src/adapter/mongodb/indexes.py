"""MongoDB index management.

``create_index_safe`` is shared by each MongoXxxRepository.ensure_indexes().
"""

from logging import getLogger

from pymongo.collection import Collection
from pymongo.errors import PyMongoError

logger = getLogger(__name__)


def create_index_safe(collection: Collection, keys: list, name: str, **kwargs) -> bool:
    """Create an index, replacing a conflicting one.

    A conflict is an existing index with the same name but other keys, or
    the same keys under another name. The old index is dropped and the
    requested one created in its place.
    """
    try:
        collection.create_index(keys, name=name, **kwargs)
        return True
    except PyMongoError as e:
        if "already exists" not in str(e) and "Conflict" not in str(e):
            raise
        return _replace_conflicting(collection, keys, name, **kwargs)


def _replace_conflicting(collection: Collection, keys: list, name: str, **kwargs) -> bool:
    wanted = dict(keys)

    for existing_name, info in collection.index_information().items():
        if existing_name == '_id_':
            continue

        same_name = existing_name == name
        same_keys = dict(info.get('key', [])) == wanted
        if same_name != same_keys:
            logger.warning("Dropping conflicting index", extra={"index": existing_name})
            collection.drop_index(existing_name)
            collection.create_index(keys, name=name, **kwargs)
            return True

    logger.error("Failed to resolve index conflict", extra={"index": name})
    return False


def ensure_all_indexes(db) -> bool:
    """Ensure indexes for all collections. Called at app startup."""
    from adapter.mongodb.note_repository import MongoNoteRepository
    from adapter.mongodb.user_repository import MongoUserRepository

    results = [
        MongoUserRepository(db).ensure_indexes(),
        MongoNoteRepository(db).ensure_indexes(),
    ]
    return all(results)
