"""Package entry point for ``python -m numbers_trivia_bot``.

WHY: The bot runs either over Socket Mode (no public URL, good for
development) or as an HTTP server receiving signed Slack requests.

HOW: Checks sys.argv for the ``--http`` flag. If present, starts the
FastAPI server with uvicorn. Otherwise, starts Socket Mode.

RULES:
- ``--http`` needs SLACK_BOT_TOKEN and SLACK_SIGNING_SECRET
- Without ``--http``, SLACK_BOT_TOKEN and SLACK_APP_TOKEN are required
"""

import sys

if __name__ == "__main__":
    if "--http" in sys.argv:
        from numbers_trivia_bot.server.app import run_server
        run_server()
    else:
        from numbers_trivia_bot.slack.bot import main
        main()
