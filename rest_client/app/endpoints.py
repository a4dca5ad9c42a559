"""
Endpoint path templates.

Formatted with positional ids by RestAPI; emoji segments must already be
percent-encoded.
"""

CHANNEL = "/channels/{}"
CHANNEL_INVITES = "/channels/{}/invites"
CHANNEL_MESSAGE = "/channels/{}/messages/{}"
CHANNEL_MESSAGES = "/channels/{}/messages"
CHANNEL_MESSAGES_BULK_DELETE = "/channels/{}/messages/bulk-delete"
CHANNEL_MESSAGE_CROSSPOST = "/channels/{}/messages/{}/crosspost"
CHANNEL_MESSAGE_REACTION = "/channels/{}/messages/{}/reactions/{}"
CHANNEL_MESSAGE_REACTIONS = "/channels/{}/messages/{}/reactions"
CHANNEL_MESSAGE_REACTION_ME = "/channels/{}/messages/{}/reactions/{}/@me"
CHANNEL_MESSAGE_REACTION_USER = "/channels/{}/messages/{}/reactions/{}/{}"
CHANNEL_PERMISSION = "/channels/{}/permissions/{}"
CHANNEL_PIN = "/channels/{}/pins/{}"
CHANNEL_PINS = "/channels/{}/pins"
CHANNEL_TYPING = "/channels/{}/typing"
CHANNEL_WEBHOOKS = "/channels/{}/webhooks"
GATEWAY = "/gateway"
GATEWAY_BOT = "/gateway/bot"
GUILD = "/guilds/{}"
GUILD_AUDIT_LOGS = "/guilds/{}/audit-logs"
GUILD_BAN = "/guilds/{}/bans/{}"
GUILD_BANS = "/guilds/{}/bans"
GUILD_CHANNELS = "/guilds/{}/channels"
GUILD_MEMBER = "/guilds/{}/members/{}"
GUILD_MEMBER_ROLE = "/guilds/{}/members/{}/roles/{}"
GUILD_ROLE = "/guilds/{}/roles/{}"
GUILD_ROLES = "/guilds/{}/roles"
GUILD_WEBHOOKS = "/guilds/{}/webhooks"
INVITE = "/invites/{}"
OAUTH2_APPLICATION_ME = "/oauth2/applications/@me"
USER = "/users/{}"
USER_ME = "/users/@me"
USER_ME_CHANNELS = "/users/@me/channels"
USER_ME_GUILD = "/users/@me/guilds/{}"
USER_ME_GUILDS = "/users/@me/guilds"
WEBHOOK = "/webhooks/{}"
WEBHOOK_TOKEN = "/webhooks/{}/{}"
