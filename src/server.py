import asyncio
import logging
import os
import signal
from typing import Any, Dict

from dotenv import load_dotenv
from fastmcp import FastMCP

from src.drive import DirectTransport, DriveError, GitHubDrive, ProxiedTransport, RateLimitedError
from src.drive.transport_protocol import GITHUB_API, REQUEST_TIMEOUT

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

load_dotenv()


class ServerConfig:
    def __init__(self) -> None:
        self.sse_port = int(os.getenv("MCP_SSE_PORT", "8000"))
        self.streamable_http_port = int(os.getenv("MCP_STREAMABLE_HTTP_PORT", "8080"))
        self.github_user = os.getenv("GITHUB_USER", "")
        self.github_api_url = os.getenv("GITHUB_API_URL", GITHUB_API)
        self.proxy_url = os.getenv("GITHUB_PROXY_URL") or None
        self.proxy_token = os.getenv("GITHUB_PROXY_TOKEN") or None
        self.request_timeout = float(os.getenv("GITHUB_REQUEST_TIMEOUT", str(REQUEST_TIMEOUT)))
        if self.proxy_token and not self.proxy_url:
            self.proxy_url = self._get_required_env("GITHUB_PROXY_URL")

    @staticmethod
    def _get_required_env(key: str) -> str:
        """Get required environment variable or raise descriptive error."""
        value = os.getenv(key)
        if not value:
            raise ValueError(f"Required environment variable {key} is not set")
        return value


config = ServerConfig()

server = FastMCP(name="github-drive")

drive = GitHubDrive(
    proxied=ProxiedTransport(config.proxy_url, config.proxy_token, timeout=config.request_timeout),
    direct=DirectTransport(config.github_api_url, timeout=config.request_timeout),
    user=config.github_user,
)

GET_CONTENTS_DESCRIPTION = (
    "Get a file or directory from the active GitHub user's repositories. "
    "Paths look like '<repo>/<path inside repo>'; an empty path lists the repositories."
)
GET_DOWNLOAD_URL_DESCRIPTION = "Get the raw download URL of a file, given its '<repo>/<path>' drive path."
SET_USER_DESCRIPTION = "Switch the drive to another GitHub user or organization."
DRIVE_STATUS_DESCRIPTION = "Report the active user and whether it is valid or rate limited."

_shutdown_requested = False


def signal_handler(sig: int, frame: Any) -> None:
    """Handle termination signals for graceful shutdown."""
    global _shutdown_requested
    logger.info(f"Received signal {sig}, initiating graceful shutdown...")
    _shutdown_requested = True


async def get_contents(path: str = "") -> Dict[str, Any]:
    if _shutdown_requested:
        logger.info("Shutdown in progress, declining new requests")
        return {}

    try:
        model = await drive.get(path)
        return model.to_dict()
    except RateLimitedError as e:
        logger.warning(f"Rate limited while fetching {path}: {e}")
        return {"error": "rate limited by GitHub, try again later"}
    except DriveError as e:
        logger.error(f"Error fetching content for {path}: {e}")
        return {"error": "error fetching content"}


async def get_download_url(path: str) -> str:
    if _shutdown_requested:
        logger.info("Shutdown in progress, declining new requests")
        return ""

    try:
        return await drive.get_download_url(path)
    except DriveError as e:
        logger.warning(f"Error resolving download url for {path}: {e}")
        return "invalid arguments the given path or repository does not exist"


def set_user(user: str) -> str:
    drive.user = user
    logger.info(f"Active GitHub user set to {user!r}")
    return user


def drive_status() -> Dict[str, Any]:
    return {
        "name": drive.name,
        "base_url": drive.base_url,
        "user": drive.user,
        "user_valid": drive.valid_user_state.get(),
        "rate_limited": drive.rate_limited_state.get(),
    }


def _register_tools() -> None:
    """Register MCP tools with the server."""
    tool_descriptions = {
        "get_contents": GET_CONTENTS_DESCRIPTION,
        "get_download_url": GET_DOWNLOAD_URL_DESCRIPTION,
        "set_user": SET_USER_DESCRIPTION,
        "drive_status": DRIVE_STATUS_DESCRIPTION,
    }

    tools = [
        (get_contents, "get_contents"),
        (get_download_url, "get_download_url"),
        (set_user, "set_user"),
        (drive_status, "drive_status"),
    ]

    for tool_func, tool_name in tools:
        description = tool_descriptions.get(tool_name, "")
        server.tool(name=tool_name, description=description)(tool_func)
        logger.info(f"Registered tool: {tool_name}")


async def _run_server() -> None:
    """Run the FastMCP server with both HTTP and SSE transports."""
    tasks = [
        server.run_http_async(
            transport="streamable-http",
            host="0.0.0.0",
            path="/github/mcp",
            port=config.streamable_http_port,
        ),
        server.run_http_async(transport="sse", host="0.0.0.0", port=config.sse_port),
    ]
    await asyncio.gather(*tasks)


def main() -> None:
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    _register_tools()

    try:
        logger.info("Starting GitHub drive MCP server...")
        asyncio.run(_run_server())
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt (CTRL+C)")
    except Exception as exc:
        logger.error(f"Server error: {exc}")
        raise
    finally:
        drive.dispose()
        logger.info("Server has shut down.")


if __name__ == "__main__":
    main()
