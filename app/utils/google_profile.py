from typing import Any, Dict, List, Optional

from app.core.exceptions import ProfileIncompleteError
from app.schemas.viewer import GoogleProfile


def _first(person: Dict[str, Any], field: str) -> Dict[str, Any]:
    """
    Get the first candidate of a People API list field.

    Only the first entry is authoritative; later entries are ignored even
    when the first one lacks the value we need.

    Args:
        person: People API person resource.
        field: List field name (names, photos, emailAddresses).

    Returns:
        Dict: First entry, or an empty dict if the list is missing or empty.
    """
    values: Optional[List[Any]] = person.get(field)
    if not values or not isinstance(values, list):
        return {}
    first = values[0]
    return first if isinstance(first, dict) else {}


def extract_google_profile(person: Dict[str, Any]) -> GoogleProfile:
    """
    Pull the fields a user record needs out of a Google person resource.

    Args:
        person: People API person resource.

    Returns:
        GoogleProfile: Display name, person id, avatar URL and email.

    Raises:
        ProfileIncompleteError: If any required field is missing.
    """
    name_entry = _first(person, "names")
    source = (name_entry.get("metadata") or {}).get("source") or {}

    user_id = source.get("id")
    user_name = name_entry.get("displayName")
    user_avatar = _first(person, "photos").get("url")
    user_email = _first(person, "emailAddresses").get("value")

    missing = [
        label
        for label, value in (
            ("id", user_id),
            ("name", user_name),
            ("avatar", user_avatar),
            ("contact", user_email),
        )
        if not value
    ]
    if missing:
        raise ProfileIncompleteError(f"Google profile missing {', '.join(missing)}")

    return GoogleProfile(
        id=str(user_id),
        name=user_name,
        avatar=user_avatar,
        contact=user_email,
    )
