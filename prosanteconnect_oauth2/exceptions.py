"""Errors raised while talking to Pro Santé Connect."""


class IdentityProviderError(Exception):
    """
    The identity provider answered with an OAuth2 error body.

    Attributes:
        message: Composed human readable message
        status_code: HTTP status code of the response
        response: The raw HTTP response, for inspection by the caller
    """

    def __init__(self, message: str, status_code: int, response=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response = response

    @property
    def response_body(self):
        """Return the decoded body of the failing response, if any."""
        if self.response is None:
            return None
        try:
            return self.response.json()
        except ValueError:
            return self.response.text


class UnexpectedResponseError(ValueError):
    """Raised when a provider response cannot be parsed as a JSON object."""


class MissingAccessTokenError(ValueError):
    """Raised when a token response carries no access token."""

    def __init__(self, option: str = "access_token"):
        super().__init__(f'Required option not passed: "{option}"')
