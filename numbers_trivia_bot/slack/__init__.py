"""Slack integration for the Numbers Trivia Bot.

WHY: Slack is where the questions come from and where the answers go.
This package turns Slack events into trivia lookups and conversation
turns, and formats what is sent back.

HOW: slack-bolt handles event delivery, either over Socket Mode (bot.py
main) or over HTTP through the FastAPI server. messages.py holds the
reply strings and Block Kit builders.

RULES:
- Socket Mode requires SLACK_BOT_TOKEN and SLACK_APP_TOKEN
- HTTP mode requires SLACK_BOT_TOKEN and SLACK_SIGNING_SECRET
- All Slack commands and actions must be ack()'d within 3 seconds
"""
