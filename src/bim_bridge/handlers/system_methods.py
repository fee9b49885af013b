"""System commands: version info, health checks, stats, configuration."""

import logging
import platform
from datetime import datetime, timezone

from bim_bridge import __version__
from bim_bridge.core import responses
from bim_bridge.core.contract import ParameterDocument, command
from bim_bridge.session import BridgeSession

logger = logging.getLogger(__name__)


@command("getVersion", "version", category="System",
         description="Get version information for the bridge")
def get_version(session: BridgeSession, params: ParameterDocument) -> str:
    try:
        major, minor, patch = (__version__.split(".") + ["0", "0"])[:3]
        return responses.success({
            "version": __version__,
            "major": int(major),
            "minor": int(minor),
            "patch": int(patch),
            "server_name": session.settings["server"]["name"],
            "python_version": platform.python_version(),
        })
    except Exception as e:
        return responses.from_exception(e)


@command("getConfiguration", category="System",
         description="Get current configuration values")
def get_configuration(session: BridgeSession, params: ParameterDocument) -> str:
    try:
        settings = session.settings
        return responses.success({
            "server": settings["server"],
            "logging": {
                **settings["logging"],
                "log_directory": str(session.config_manager.get_log_directory(settings)),
            },
            "dispatch": settings["dispatch"],
            "handler_modules": list(settings.get("handler_modules", [])),
            "config_file": str(session.config_manager.config_file),
            "config_file_exists": session.config_manager.exists(),
        })
    except Exception as e:
        return responses.from_exception(e)


@command("healthCheck", "ping", category="System", description="Health check endpoint")
def health_check(session: BridgeSession, params: ParameterDocument) -> str:
    try:
        return responses.success({
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "host_attached": session.host is not None,
            "command_count": len(session.registry.list_commands()),
            "version": __version__,
            "uptime": session.uptime(),
        })
    except Exception as e:
        return responses.failure(str(e), status="unhealthy")


@command("getStats", category="System",
         description="Get statistics about bridge usage")
def get_stats(session: BridgeSession, params: ParameterDocument) -> str:
    try:
        return responses.success({"uptime": session.uptime(), **session.stats.snapshot()})
    except Exception as e:
        return responses.from_exception(e)


@command("reloadConfiguration", category="System",
         description="Reload configuration from disk")
def reload_configuration(session: BridgeSession, params: ParameterDocument) -> str:
    try:
        session.reload_config()
        logger.info("Configuration reloaded via command")
        return responses.success(message="Configuration reloaded successfully")
    except Exception as e:
        return responses.from_exception(e)
