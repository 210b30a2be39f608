from typing import Any, Protocol, runtime_checkable

GITHUB_API = "https://api.github.com"

REQUEST_TIMEOUT = 30.0


@runtime_checkable
class TransportProtocol(Protocol):
    """Protocol defining the interface for GitHub API transports.

    Any class implementing an awaitable ``request`` satisfies the protocol,
    so the privileged proxy and the direct client are interchangeable.
    """

    async def request(self, api_path: str) -> Any:
        """Issue a GET for an API-relative path.

        Args:
            api_path: Percent-encoded route relative to the API root
                (e.g., "repos/octocat/hello/contents/README.md")

        Returns:
            The decoded JSON body

        Raises:
            ApiRequestError: If the API answers with a non-success status
            TransportUnavailableError: If the endpoint cannot be reached
        """
        ...
