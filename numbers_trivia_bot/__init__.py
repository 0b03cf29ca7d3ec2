"""Numbers Trivia Bot: a Slack bot that answers number and date trivia.

WHY: Teams like a quick fact about a number that comes up in a channel.
This package listens to Slack, understands trivia requests (directly via a
slash command or buttons, or conversationally through Wit.ai), and answers
with facts from the public Numbers API.

HOW: Four layers: service clients (api/), the conversation core (core/),
Slack dispatch (slack/), and an optional HTTP server (server/). A
background broadcaster posts today's date fact to incoming webhooks.

RULES:
- All outbound HTTP goes through api/ clients with explicit timeouts
- Conversation state is in memory only, one session per user
- Slack handlers never raise into slack-bolt; failures are logged
"""

__version__ = "0.1.0"
