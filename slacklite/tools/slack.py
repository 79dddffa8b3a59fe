from __future__ import annotations

from abc import abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Protocol

from slacklite.tools.base import Tool, ToolArgs
from slacklite.tools.registry import ToolRegistry


class SlackOperations(Protocol):
    async def get_channels(self, limit: int | None = ..., cursor: str | None = ...) -> Any: ...

    async def post_message(self, channel_id: str, text: str) -> Any: ...

    async def post_reply(self, channel_id: str, thread_ts: str, text: str) -> Any: ...

    async def add_reaction(self, channel_id: str, timestamp: str, reaction: str) -> Any: ...

    async def get_channel_history(self, channel_id: str, limit: int | None = ...) -> Any: ...

    async def get_thread_replies(self, channel_id: str, thread_ts: str) -> Any: ...

    async def get_users(self, limit: int | None = ..., cursor: str | None = ...) -> Any: ...

    async def get_user_profile(self, user_id: str) -> Any: ...


@dataclass(frozen=True, slots=True)
class ListChannelsArgs(ToolArgs):
    limit: int | None = None
    cursor: str | None = None


@dataclass(frozen=True, slots=True)
class PostMessageArgs(ToolArgs):
    required: ClassVar[tuple[str, ...]] = ("channel_id", "text")

    channel_id: str = ""
    text: str = ""


@dataclass(frozen=True, slots=True)
class ReplyToThreadArgs(ToolArgs):
    required: ClassVar[tuple[str, ...]] = ("channel_id", "thread_ts", "text")

    channel_id: str = ""
    thread_ts: str = ""
    text: str = ""


@dataclass(frozen=True, slots=True)
class AddReactionArgs(ToolArgs):
    required: ClassVar[tuple[str, ...]] = ("channel_id", "timestamp", "reaction")

    channel_id: str = ""
    timestamp: str = ""
    reaction: str = ""


@dataclass(frozen=True, slots=True)
class GetChannelHistoryArgs(ToolArgs):
    required: ClassVar[tuple[str, ...]] = ("channel_id",)

    channel_id: str = ""
    limit: int | None = None


@dataclass(frozen=True, slots=True)
class GetThreadRepliesArgs(ToolArgs):
    required: ClassVar[tuple[str, ...]] = ("channel_id", "thread_ts")

    channel_id: str = ""
    thread_ts: str = ""


@dataclass(frozen=True, slots=True)
class GetUsersArgs(ToolArgs):
    limit: int | None = None
    cursor: str | None = None


@dataclass(frozen=True, slots=True)
class GetUserProfileArgs(ToolArgs):
    required: ClassVar[tuple[str, ...]] = ("user_id",)

    user_id: str = ""


def _object(properties: dict[str, Any], required: tuple[str, ...] = ()) -> dict[str, Any]:
    schema: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        schema["required"] = list(required)
    return schema


class SlackTool(Tool):
    def __init__(self, client: SlackOperations | None = None) -> None:
        self._client = client

    @property
    def client(self) -> SlackOperations:
        if self._client is None:
            raise RuntimeError(f"{self.name}: no Slack client bound")
        return self._client

    def args_schema(self) -> dict[str, Any]:
        return _object(self.properties(), self.required)

    @abstractmethod
    def properties(self) -> dict[str, Any]:
        raise NotImplementedError


class ListChannelsTool(SlackTool):
    name = "slack_list_channels"
    description = "List public channels in the workspace with pagination"
    args_type = ListChannelsArgs

    def properties(self) -> dict[str, Any]:
        return {
            "limit": {
                "type": "number",
                "description": "Maximum number of channels to return (default 100, max 200)",
                "default": 100,
            },
            "cursor": {
                "type": "string",
                "description": "Pagination cursor for next page of results",
            },
        }

    async def invoke(self, args: ListChannelsArgs) -> Any:
        return await self.client.get_channels(args.limit, args.cursor)


class PostMessageTool(SlackTool):
    name = "slack_post_message"
    description = "Post a new message to a Slack channel"
    args_type = PostMessageArgs

    def properties(self) -> dict[str, Any]:
        return {
            "channel_id": {"type": "string", "description": "The ID of the channel to post to"},
            "text": {"type": "string", "description": "The message text to post"},
        }

    async def invoke(self, args: PostMessageArgs) -> Any:
        return await self.client.post_message(args.channel_id, args.text)


class ReplyToThreadTool(SlackTool):
    name = "slack_reply_to_thread"
    description = "Reply to a specific message thread in Slack"
    args_type = ReplyToThreadArgs

    def properties(self) -> dict[str, Any]:
        return {
            "channel_id": {"type": "string", "description": "The ID of the channel containing the thread"},
            "thread_ts": {
                "type": "string",
                "description": (
                    "The timestamp of the parent message in the format '1234567890.123456'. "
                    "Timestamps in the format without the period can be converted by adding "
                    "the period such that 6 numbers come after it."
                ),
            },
            "text": {"type": "string", "description": "The reply text"},
        }

    async def invoke(self, args: ReplyToThreadArgs) -> Any:
        return await self.client.post_reply(args.channel_id, args.thread_ts, args.text)


class AddReactionTool(SlackTool):
    name = "slack_add_reaction"
    description = "Add a reaction emoji to a message"
    args_type = AddReactionArgs

    def properties(self) -> dict[str, Any]:
        return {
            "channel_id": {"type": "string", "description": "The ID of the channel containing the message"},
            "timestamp": {"type": "string", "description": "The timestamp of the message to react to"},
            "reaction": {"type": "string", "description": "The name of the emoji reaction (without ::)"},
        }

    async def invoke(self, args: AddReactionArgs) -> Any:
        return await self.client.add_reaction(args.channel_id, args.timestamp, args.reaction)


class GetChannelHistoryTool(SlackTool):
    name = "slack_get_channel_history"
    description = "Get recent messages from a channel"
    args_type = GetChannelHistoryArgs

    def properties(self) -> dict[str, Any]:
        return {
            "channel_id": {"type": "string", "description": "The ID of the channel"},
            "limit": {
                "type": "number",
                "description": "Number of messages to retrieve (default 10)",
                "default": 10,
            },
        }

    async def invoke(self, args: GetChannelHistoryArgs) -> Any:
        return await self.client.get_channel_history(args.channel_id, args.limit)


class GetThreadRepliesTool(SlackTool):
    name = "slack_get_thread_replies"
    description = "Get all replies in a message thread"
    args_type = GetThreadRepliesArgs

    def properties(self) -> dict[str, Any]:
        return {
            "channel_id": {"type": "string", "description": "The ID of the channel containing the thread"},
            "thread_ts": {
                "type": "string",
                "description": (
                    "The timestamp of the parent message in the format '1234567890.123456'. "
                    "Timestamps in the format without the period can be converted by adding "
                    "the period such that 6 numbers come after it."
                ),
            },
        }

    async def invoke(self, args: GetThreadRepliesArgs) -> Any:
        return await self.client.get_thread_replies(args.channel_id, args.thread_ts)


class GetUsersTool(SlackTool):
    name = "slack_get_users"
    description = "Get a list of all users in the workspace with their basic profile information"
    args_type = GetUsersArgs

    def properties(self) -> dict[str, Any]:
        return {
            "cursor": {"type": "string", "description": "Pagination cursor for next page of results"},
            "limit": {
                "type": "number",
                "description": "Maximum number of users to return (default 100, max 200)",
                "default": 100,
            },
        }

    async def invoke(self, args: GetUsersArgs) -> Any:
        return await self.client.get_users(args.limit, args.cursor)


class GetUserProfileTool(SlackTool):
    name = "slack_get_user_profile"
    description = "Get detailed profile information for a specific user"
    args_type = GetUserProfileArgs

    def properties(self) -> dict[str, Any]:
        return {
            "user_id": {"type": "string", "description": "The ID of the user"},
        }

    async def invoke(self, args: GetUserProfileArgs) -> Any:
        return await self.client.get_user_profile(args.user_id)


SLACK_TOOLS: tuple[type[SlackTool], ...] = (
    ListChannelsTool,
    PostMessageTool,
    ReplyToThreadTool,
    AddReactionTool,
    GetChannelHistoryTool,
    GetThreadRepliesTool,
    GetUsersTool,
    GetUserProfileTool,
)


def build_slack_registry(client: SlackOperations | None = None) -> ToolRegistry:
    """Registry of the eight Slack tools. Without a client it only serves the catalog."""
    return ToolRegistry(tool_cls(client) for tool_cls in SLACK_TOOLS)
