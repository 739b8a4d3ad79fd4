"""
Identifier utilities shared by the archive and the reconciler.

Provides:
- Pair keys: normalized docid + version id, used to match cortex and corcode
- Version paths: "groupPath/shortName" compound keys and their split/join
- Store ids: ObjectId-shaped identifiers for stored documents
"""

from uuid import uuid4

DEFAULT_SUFFIX = "/default"


def normalize_docid(docid: str) -> str:
    """
    Collapse the default-version convention into the bare document identity.

    Args:
        docid: Document identifier, possibly ending in "/default"

    Returns:
        docid without one trailing "/default"
    """
    if docid.endswith(DEFAULT_SUFFIX):
        return docid[: -len(DEFAULT_SUFFIX)]
    return docid


def pair_key(docid: str, version_id: str) -> str:
    """
    Build the key cortex and corcode entries are paired on.

    Args:
        docid: Document identifier
        version_id: Version identifier of the entry

    Returns:
        normalize_docid(docid) + version_id
    """
    return normalize_docid(docid) + version_id


def split_vpath(vpath: str) -> tuple[str, str]:
    """
    Split a version path into its group path and short name.

    The short name is the last "/"-separated segment; everything before it
    is the group path. A vpath without "/" has an empty group path.

    Args:
        vpath: Compound "groupPath/shortName" key

    Returns:
        (group_path, short_name)
    """
    index = vpath.rfind("/")
    if index == -1:
        return "", vpath
    return vpath[:index], vpath[index + 1 :]


def join_vpath(group_path: str, short_name: str) -> str:
    """
    Inverse of split_vpath for keys in "groupPath/shortName" form.

    A top-level version keeps its separator: join_vpath("", "v1") == "/v1".
    """
    return f"{group_path}/{short_name}"


def canonical_vpath(version_id: str) -> str:
    """
    Map a version id to its one version key.

    "v1" and "/v1" both name the top-level version v1 and give "/v1";
    grouped keys such as "A/v1" are returned unchanged.
    """
    return join_vpath(*split_vpath(version_id))


def default_long_name(group_path: str, short_name: str) -> str:
    """Long name for a version that was never given one."""
    if group_path:
        return f"Version {short_name} of {group_path}"
    return f"Version {short_name}"


def generate_store_id() -> str:
    """
    Generate a unique stored-document ID.

    Returns:
        24 hex characters, the shape of a document database object id
    """
    return uuid4().hex[:24]
