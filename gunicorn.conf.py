"""
Gunicorn settings for the round server.

The RoundManager and its countdown live in process memory, so the server runs
a single eventlet worker that owns the round.
"""

import logging

from config_factory import load_config

app_config = load_config()

bind = f"{app_config.host}:{app_config.port}"
workers = 1
worker_class = "eventlet"
worker_connections = app_config.worker_connections
timeout = app_config.timeout
keepalive = app_config.keepalive

accesslog = "-"
errorlog = "-"
loglevel = app_config.log_level

proc_name = "round-server"
preload_app = False


def on_starting(server):
    """Log the round settings once at startup."""
    logging.getLogger(__name__).info(
        f"Round duration {app_config.round_duration_seconds}s, "
        f"poll interval {app_config.timer_poll_interval}s, "
        f"quorum {app_config.min_players_required}"
    )
