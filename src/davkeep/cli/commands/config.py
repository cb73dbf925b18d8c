"""Config command handler: show and change settings."""

from argparse import Namespace

from davkeep.logger import get_logger

from .base import BaseCommandHandler

logger = get_logger(__name__)


class ConfigHandler(BaseCommandHandler):
    """Handler for config command operations."""

    async def execute(self, args: Namespace) -> None:
        """Execute the config command."""
        if args.set_url is not None or args.set_username is not None:
            webdav = self.global_config["webdav"]
            self.global_config = self.settings_manager.set_webdav(
                args.set_url if args.set_url is not None else webdav["url"],
                (
                    args.set_username
                    if args.set_username is not None
                    else webdav["username"]
                ),
            )
            print("✅ WebDAV settings saved")

        if args.show or (args.set_url is None and args.set_username is None):
            self._show_config()

    def _show_config(self) -> None:
        """Display current configuration without secrets."""
        config = self.global_config
        tmp_dir = config["directory"]["tmp"]
        print(f"Settings file:   {self.settings_manager.settings_file}")
        print(f"WebDAV URL:      {config['webdav']['url'] or '(unset)'}")
        print(f"WebDAV username: {config['webdav']['username'] or '(unset)'}")
        print(
            "Password saved:  " + ("yes" if self.vault.is_stored() else "no")
        )
        print(
            f"Device:          {config['device']['name']} "
            f"({config['device']['id']})"
        )
        print(f"Backed-up dir:   {config['directory']['app_config']}")
        print(f"Temp dir:        {tmp_dir or '(system default)'}")
        print(f"Timeout:         {config['network']['timeout_seconds']}s")
        print(f"Log level:       {config['log_level']}")
