"""
REST API facade: endpoint methods on top of the request dispatcher.
"""

from typing import Any, Optional, Sequence

from shared.config import RestClientConfig, get_config
from shared.logging import get_logger
from shared.metrics import DispatcherMetrics

from . import endpoints
from .adapters.transport import HttpxTransport, Transport
from .dispatcher import RequestDispatcher
from .encoding.multipart import Attachment
from .encoding.query import QueryParams, urlencode
from .outcome import Outcome


class RestAPI:
    """Client-facing API object.

    Every method returns an Outcome; unpack it as ``data, error = await ...``
    or call ``raise_for_error()`` on it.
    """

    def __init__(
        self,
        config: Optional[RestClientConfig] = None,
        transport: Optional[Transport] = None,
        metrics: Optional[DispatcherMetrics] = None,
        **dispatcher_options: Any,
    ):
        self.config = config or get_config()
        self.logger = get_logger("rest_client.api")
        self._owns_transport = transport is None
        self.transport = transport or HttpxTransport(timeout=self.config.request_timeout)
        self.dispatcher = RequestDispatcher(
            self.transport,
            config=self.config,
            metrics=metrics,
            **dispatcher_options,
        )

    async def __aenter__(self) -> "RestAPI":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_transport:
            await self.transport.aclose()

    async def authenticate(self, token: str) -> Outcome:
        """Store the credential and verify it by fetching the current user."""
        self.dispatcher.token = token
        outcome = await self.get_current_user()
        if outcome.ok:
            self.logger.info("Authenticated", user_id=(outcome.data or {}).get("id"))
        else:
            self.logger.error("Authentication failed", error=outcome.error)
        return outcome

    async def request(self, method: str, path: str, payload: Any = None,
                      query: Optional[QueryParams] = None,
                      files: Optional[Sequence[Attachment]] = None) -> Outcome:
        return await self.dispatcher.dispatch(method, path, payload, query, files)

    # Channels

    async def get_channel(self, channel_id) -> Outcome:
        return await self.request("GET", endpoints.CHANNEL.format(channel_id))

    async def modify_channel(self, channel_id, payload) -> Outcome:
        return await self.request("PATCH", endpoints.CHANNEL.format(channel_id), payload)

    async def delete_channel(self, channel_id) -> Outcome:
        return await self.request("DELETE", endpoints.CHANNEL.format(channel_id))

    async def trigger_typing_indicator(self, channel_id) -> Outcome:
        return await self.request("POST", endpoints.CHANNEL_TYPING.format(channel_id))

    async def get_channel_invites(self, channel_id) -> Outcome:
        return await self.request("GET", endpoints.CHANNEL_INVITES.format(channel_id))

    async def create_channel_invite(self, channel_id, payload=None) -> Outcome:
        return await self.request("POST", endpoints.CHANNEL_INVITES.format(channel_id), payload)

    async def edit_channel_permissions(self, channel_id, overwrite_id, payload) -> Outcome:
        return await self.request("PUT", endpoints.CHANNEL_PERMISSION.format(channel_id, overwrite_id), payload)

    async def delete_channel_permission(self, channel_id, overwrite_id) -> Outcome:
        return await self.request("DELETE", endpoints.CHANNEL_PERMISSION.format(channel_id, overwrite_id))

    # Messages

    async def get_channel_messages(self, channel_id, query: Optional[QueryParams] = None) -> Outcome:
        return await self.request("GET", endpoints.CHANNEL_MESSAGES.format(channel_id), query=query)

    async def get_channel_message(self, channel_id, message_id) -> Outcome:
        return await self.request("GET", endpoints.CHANNEL_MESSAGE.format(channel_id, message_id))

    async def create_message(self, channel_id, payload,
                             files: Optional[Sequence[Attachment]] = None) -> Outcome:
        return await self.request("POST", endpoints.CHANNEL_MESSAGES.format(channel_id), payload, files=files)

    async def edit_message(self, channel_id, message_id, payload) -> Outcome:
        return await self.request("PATCH", endpoints.CHANNEL_MESSAGE.format(channel_id, message_id), payload)

    async def delete_message(self, channel_id, message_id) -> Outcome:
        return await self.request("DELETE", endpoints.CHANNEL_MESSAGE.format(channel_id, message_id))

    async def bulk_delete_messages(self, channel_id, payload) -> Outcome:
        return await self.request("POST", endpoints.CHANNEL_MESSAGES_BULK_DELETE.format(channel_id), payload)

    async def crosspost_message(self, channel_id, message_id) -> Outcome:
        return await self.request("POST", endpoints.CHANNEL_MESSAGE_CROSSPOST.format(channel_id, message_id))

    async def get_pinned_messages(self, channel_id) -> Outcome:
        return await self.request("GET", endpoints.CHANNEL_PINS.format(channel_id))

    async def add_pinned_channel_message(self, channel_id, message_id) -> Outcome:
        return await self.request("PUT", endpoints.CHANNEL_PIN.format(channel_id, message_id))

    async def delete_pinned_channel_message(self, channel_id, message_id) -> Outcome:
        return await self.request("DELETE", endpoints.CHANNEL_PIN.format(channel_id, message_id))

    # Reactions

    async def create_reaction(self, channel_id, message_id, emoji: str) -> Outcome:
        path = endpoints.CHANNEL_MESSAGE_REACTION_ME.format(channel_id, message_id, urlencode(emoji))
        return await self.request("PUT", path)

    async def delete_own_reaction(self, channel_id, message_id, emoji: str) -> Outcome:
        path = endpoints.CHANNEL_MESSAGE_REACTION_ME.format(channel_id, message_id, urlencode(emoji))
        return await self.request("DELETE", path)

    async def delete_user_reaction(self, channel_id, message_id, emoji: str, user_id) -> Outcome:
        path = endpoints.CHANNEL_MESSAGE_REACTION_USER.format(channel_id, message_id, urlencode(emoji), user_id)
        return await self.request("DELETE", path)

    async def get_reactions(self, channel_id, message_id, emoji: str,
                            query: Optional[QueryParams] = None) -> Outcome:
        path = endpoints.CHANNEL_MESSAGE_REACTION.format(channel_id, message_id, urlencode(emoji))
        return await self.request("GET", path, query=query)

    async def delete_all_reactions(self, channel_id, message_id) -> Outcome:
        return await self.request("DELETE", endpoints.CHANNEL_MESSAGE_REACTIONS.format(channel_id, message_id))

    # Guilds

    async def get_guild(self, guild_id) -> Outcome:
        return await self.request("GET", endpoints.GUILD.format(guild_id))

    async def modify_guild(self, guild_id, payload) -> Outcome:
        return await self.request("PATCH", endpoints.GUILD.format(guild_id), payload)

    async def get_guild_audit_log(self, guild_id, query: Optional[QueryParams] = None) -> Outcome:
        return await self.request("GET", endpoints.GUILD_AUDIT_LOGS.format(guild_id), query=query)

    async def get_guild_channels(self, guild_id) -> Outcome:
        return await self.request("GET", endpoints.GUILD_CHANNELS.format(guild_id))

    async def create_guild_channel(self, guild_id, payload) -> Outcome:
        return await self.request("POST", endpoints.GUILD_CHANNELS.format(guild_id), payload)

    async def get_guild_member(self, guild_id, user_id) -> Outcome:
        return await self.request("GET", endpoints.GUILD_MEMBER.format(guild_id, user_id))

    async def modify_guild_member(self, guild_id, user_id, payload) -> Outcome:
        return await self.request("PATCH", endpoints.GUILD_MEMBER.format(guild_id, user_id), payload)

    async def remove_guild_member(self, guild_id, user_id, query: Optional[QueryParams] = None) -> Outcome:
        return await self.request("DELETE", endpoints.GUILD_MEMBER.format(guild_id, user_id), query=query)

    async def add_guild_member_role(self, guild_id, user_id, role_id) -> Outcome:
        return await self.request("PUT", endpoints.GUILD_MEMBER_ROLE.format(guild_id, user_id, role_id))

    async def remove_guild_member_role(self, guild_id, user_id, role_id) -> Outcome:
        return await self.request("DELETE", endpoints.GUILD_MEMBER_ROLE.format(guild_id, user_id, role_id))

    async def get_guild_bans(self, guild_id) -> Outcome:
        return await self.request("GET", endpoints.GUILD_BANS.format(guild_id))

    async def create_guild_ban(self, guild_id, user_id, query: Optional[QueryParams] = None) -> Outcome:
        return await self.request("PUT", endpoints.GUILD_BAN.format(guild_id, user_id), query=query)

    async def remove_guild_ban(self, guild_id, user_id) -> Outcome:
        return await self.request("DELETE", endpoints.GUILD_BAN.format(guild_id, user_id))

    async def get_guild_roles(self, guild_id) -> Outcome:
        return await self.request("GET", endpoints.GUILD_ROLES.format(guild_id))

    async def create_guild_role(self, guild_id, payload) -> Outcome:
        return await self.request("POST", endpoints.GUILD_ROLES.format(guild_id), payload)

    async def modify_guild_role(self, guild_id, role_id, payload) -> Outcome:
        return await self.request("PATCH", endpoints.GUILD_ROLE.format(guild_id, role_id), payload)

    async def delete_guild_role(self, guild_id, role_id) -> Outcome:
        return await self.request("DELETE", endpoints.GUILD_ROLE.format(guild_id, role_id))

    # Invites

    async def get_invite(self, invite_code, query: Optional[QueryParams] = None) -> Outcome:
        return await self.request("GET", endpoints.INVITE.format(invite_code), query=query)

    async def delete_invite(self, invite_code) -> Outcome:
        return await self.request("DELETE", endpoints.INVITE.format(invite_code))

    # Users

    async def get_current_user(self) -> Outcome:
        return await self.request("GET", endpoints.USER_ME)

    async def get_user(self, user_id) -> Outcome:
        return await self.request("GET", endpoints.USER.format(user_id))

    async def modify_current_user(self, payload) -> Outcome:
        return await self.request("PATCH", endpoints.USER_ME, payload)

    async def get_current_user_guilds(self) -> Outcome:
        return await self.request("GET", endpoints.USER_ME_GUILDS)

    async def leave_guild(self, guild_id) -> Outcome:
        return await self.request("DELETE", endpoints.USER_ME_GUILD.format(guild_id))

    async def create_dm(self, payload) -> Outcome:
        return await self.request("POST", endpoints.USER_ME_CHANNELS, payload)

    # Webhooks

    async def create_webhook(self, channel_id, payload) -> Outcome:
        return await self.request("POST", endpoints.CHANNEL_WEBHOOKS.format(channel_id), payload)

    async def get_channel_webhooks(self, channel_id) -> Outcome:
        return await self.request("GET", endpoints.CHANNEL_WEBHOOKS.format(channel_id))

    async def get_guild_webhooks(self, guild_id) -> Outcome:
        return await self.request("GET", endpoints.GUILD_WEBHOOKS.format(guild_id))

    async def get_webhook(self, webhook_id) -> Outcome:
        return await self.request("GET", endpoints.WEBHOOK.format(webhook_id))

    async def modify_webhook(self, webhook_id, payload) -> Outcome:
        return await self.request("PATCH", endpoints.WEBHOOK.format(webhook_id), payload)

    async def delete_webhook(self, webhook_id) -> Outcome:
        return await self.request("DELETE", endpoints.WEBHOOK.format(webhook_id))

    async def execute_webhook(self, webhook_id, webhook_token, payload,
                              files: Optional[Sequence[Attachment]] = None) -> Outcome:
        path = endpoints.WEBHOOK_TOKEN.format(webhook_id, webhook_token)
        return await self.request("POST", path, payload, files=files)

    # Gateway and application

    async def get_gateway(self) -> Outcome:
        return await self.request("GET", endpoints.GATEWAY)

    async def get_gateway_bot(self) -> Outcome:
        return await self.request("GET", endpoints.GATEWAY_BOT)

    async def get_current_application_information(self) -> Outcome:
        return await self.request("GET", endpoints.OAUTH2_APPLICATION_ME)
