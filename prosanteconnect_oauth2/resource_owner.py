"""
Resource owner returned by Pro Santé Connect.

The user-info endpoint identifies the practitioner by ``SubjectNameID``;
no email address is returned, so a synthetic one is derived from it.
"""

from typing import Any, Mapping, Optional

from .utils import safe_get

ID_KEY = "SubjectNameID"
EMAIL_DOMAIN = "santeconnect.pro"


class ProSanteConnectResourceOwner:
    """Authenticated practitioner, wrapping the raw user-info payload."""

    def __init__(self, response: Optional[Mapping[str, Any]] = None):
        """
        Initialize the resource owner.

        Args:
            response: Parsed user-info payload (defaults to an empty mapping)
        """
        self.response = response if response is not None else {}

    def get_id(self):
        """Return the ``SubjectNameID`` of the owner, or None if absent."""
        return safe_get(self.response, ID_KEY)

    def get_email(self) -> Optional[str]:
        """
        Return a proto email made from ``SubjectNameID`` and the
        ``@santeconnect.pro`` suffix.

        Returns None when the payload carries no ``SubjectNameID``.
        """
        owner_id = self.get_id()
        if owner_id is None:
            return None
        return f"{owner_id}@{EMAIL_DOMAIN}"

    def to_dict(self) -> Mapping[str, Any]:
        """Return all of the owner details as received (not a copy)."""
        return self.response

    @property
    def id(self):
        return self.get_id()

    @property
    def email(self) -> Optional[str]:
        return self.get_email()

    def __repr__(self):
        return f"<ProSanteConnectResourceOwner id={self.get_id()!r}>"
