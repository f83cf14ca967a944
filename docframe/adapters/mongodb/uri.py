"""
Connection URI composition for MongoDB.
"""

from urllib.parse import quote_plus

DEFAULT_SCHEME = "mongodb"
SCHEMES = ("mongodb://", "mongodb+srv://")


def generate_mongo_uri(uri: str, username: str = "", password: str = "") -> str:
    """
    Build a MongoDB connection URI from a base URI and optional credentials.

    A base without a recognised scheme gets ``mongodb://`` prepended.
    Credentials are injected right after the scheme, and only when both a
    username and a password are given. They are percent-escaped, so a
    password containing ``@`` or ``:`` cannot break the URI.

    Args:
        uri: Host string or URI, e.g. ``db.example.com`` or
            ``mongodb+srv://cluster.example.com``
        username: Optional username
        password: Optional password

    Returns:
        Connection URI accepted by ``pymongo.MongoClient``
    """
    uri = uri or ""
    has_credentials = bool(username) and bool(password)

    if uri.startswith(SCHEMES):
        if not has_credentials:
            return uri
        scheme, rest = uri.split("://", 1)
    else:
        scheme, rest = DEFAULT_SCHEME, uri
        if not has_credentials:
            return f"{scheme}://{rest}"

    return f"{scheme}://{quote_plus(username)}:{quote_plus(password)}@{rest}"
